"""Password hashing with bcrypt.

Implements the CredentialHasherPort protocol from
clipspace.foundation.domain.ports. The cost factor is tunable through
``AUTH_BCRYPT_ROUNDS``; hashes embed their own salt and cost, so raising the
factor later does not invalidate stored hashes.
"""

from __future__ import annotations

import bcrypt

from clipspace.foundation.domain.exceptions import HashingFailureError, ValidationError

DEFAULT_ROUNDS = 12
MIN_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


class CredentialVault:
    """bcrypt-backed credential hasher.

    Args:
        rounds: bcrypt cost factor (log2 of the iteration count).

    Example:
        >>> vault = CredentialVault(rounds=10)
        >>> hashed = vault.hash("correct-pw")
        >>> hashed.startswith("$2b$10$")
        True
        >>> vault.verify("correct-pw", hashed)
        True
        >>> vault.verify("wrong-pw", hashed)
        False
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if rounds < MIN_ROUNDS:
            msg = f"bcrypt rounds must be at least {MIN_ROUNDS}, got {rounds}"
            raise ValueError(msg)
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password with a fresh salt.

        Raises:
            ValidationError: If the password is longer than bcrypt accepts.
            HashingFailureError: If the password is empty or bcrypt errors.
        """
        if not plaintext:
            raise HashingFailureError("Cannot hash an empty password")
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                "password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        try:
            return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except ValueError as exc:
            raise HashingFailureError(str(exc)) from exc

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a password against a stored hash (constant-time).

        A wrong password returns False. An over-long password cannot have
        been stored, so it returns False as well.

        Raises:
            HashingFailureError: If the stored value is not a bcrypt hash.
        """
        encoded = (plaintext or "").encode("utf-8")
        if not encoded or len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as exc:
            raise HashingFailureError("Stored credential hash is malformed") from exc
