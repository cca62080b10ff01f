"""Domain port interfaces for hexagonal architecture.

Ports define abstract interfaces that the domain and application layers use
to interact with external services. Implementations (adapters) live in
infrastructure.
"""

from clipspace.foundation.domain.ports.account_repository import AccountRepositoryPort
from clipspace.foundation.domain.ports.credential_hasher import CredentialHasherPort
from clipspace.foundation.domain.ports.session_store import SessionStorePort
from clipspace.foundation.domain.ports.token_signer import TokenSignerPort

__all__ = [
    "AccountRepositoryPort",
    "CredentialHasherPort",
    "SessionStorePort",
    "TokenSignerPort",
]
