"""Port interface for password hashing.

This module defines the CredentialHasherPort protocol so that application
services can hash and check passwords without coupling to a specific
algorithm.

Example:
    >>> from clipspace.foundation.domain.ports import CredentialHasherPort
    >>> def check(hasher: CredentialHasherPort, password: str, stored: str) -> bool:
    ...     return hasher.verify(password, stored)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CredentialHasherPort(Protocol):
    """Port for slow, salted one-way password hashing.

    Implementations must compare in constant time and must report a wrong
    password as ``False``, never as an exception.
    """

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password for storage.

        Args:
            plaintext: The password as typed.

        Returns:
            Self-describing hash string (algorithm, cost and salt included).

        Raises:
            HashingFailureError: If the primitive fails.
        """
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash.

        Args:
            plaintext: The password as typed.
            hashed: Hash previously returned by :meth:`hash`.

        Returns:
            True if the password matches, False otherwise.

        Raises:
            HashingFailureError: If the stored hash is malformed.
        """
        ...
