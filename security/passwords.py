"""Password hashing with a per-hash salt and a server-wide pepper.
"""
import base64
import hashlib
import hmac

import logfire

from passlib.context import CryptContext

from security.exceptions import HashingError


class PasswordHasher:
    """Hashes and verifies passwords with bcrypt.

    The password is first keyed with the pepper through HMAC-SHA256. Unlike the salt
    the pepper is never stored with the hash, so a leaked database alone is not enough
    to test password guesses offline.

    bcrypt reads at most 72 bytes of input. The HMAC digest is base64 encoded to 44
    ASCII bytes, so every byte of the password and of the pepper counts, whatever
    their lengths or encodings.
    """

    def __init__(self, pepper: str, rounds: int = 10):
        self._pepper = pepper.encode("utf-8")
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def _peppered(self, plain_password: str) -> str:
        digest = hmac.new(self._pepper, plain_password.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def hash(self, plain_password: str) -> str:
        """Generates a salted, peppered hash for the given password.

        Args:
            plain_password (str): The plain text password to hash.

        Raises:
            HashingError: Raised when the underlying hash function fails.

        Returns:
            str: The bcrypt hash, carrying its own salt and cost factor.
        """
        try:
            return self.pwd_context.hash(self._peppered(plain_password))
        except Exception as e:
            raise HashingError("Password hashing failed") from e

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verifies that `plain_password` matches `hashed_password`.

        Args:
            plain_password (str): The plain text password to verify.
            hashed_password (str): The stored hash to compare against.

        Raises:
            HashingError: Raised when the hash backend itself fails.

        Returns:
            bool: True if the passwords match, False on mismatch or a malformed hash.
        """
        try:
            return self.pwd_context.verify(self._peppered(plain_password), hashed_password)
        except (ValueError, TypeError) as e:
            logfire.warning(f"Stored password hash could not be read: {type(e).__name__}")
            return False
        except Exception as e:
            logfire.error(f"Password verification failed: {type(e).__name__}")
            raise HashingError("Password verification failed") from e

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a stored hash."""
        self.pwd_context.dummy_verify()
