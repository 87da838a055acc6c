"""Salted one-way password hashing."""

import bcrypt

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt wrapper used for account passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password with a fresh salt."""
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Compare a plaintext password against a stored hash.

        Args:
            password: Plain text password
            password_hash: Stored bcrypt hash

        Returns:
            True if the password matches, False otherwise (including malformed hashes)
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False
