"""Signing and verification of access and refresh tokens.
"""
import logfire

from datetime import datetime, timedelta, timezone

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError

from pydantic import ValidationError

from schema.security import TokenClaims, TokenType, TokenUser

from security.config import SecuritySettings
from security.exceptions import SigningError


class TokenCodec:
    """Encodes user claims into signed JWTs and verifies them again.

    Each `TokenType` maps to exactly one secret and one lifetime. Verification
    always uses the secret of the type the token declares, and tokens declaring
    no type, or a type outside `TokenType`, are rejected before any signature
    check.
    """

    def __init__(self, settings: SecuritySettings):
        self.algorithm = settings.algorithm
        self._secrets = {
            TokenType.ACCESS: settings.access_token_secret,
            TokenType.REFRESH: settings.refresh_token_secret,
        }
        self._ttls = {
            TokenType.ACCESS: settings.access_token_ttl,
            TokenType.REFRESH: settings.refresh_token_ttl,
        }

    def secret_for(self, token_type: TokenType) -> str:
        return self._secrets[token_type].get_secret_value()

    def ttl_for(self, token_type: TokenType) -> timedelta:
        return self._ttls[token_type]

    def sign(
        self, user: TokenUser, token_type: TokenType, secret: str, ttl: timedelta
    ) -> str:
        """Creates a signed token embedding `{tokenType, user}`.

        Args:
            user (TokenUser): The claim snapshot to embed.
            token_type (TokenType): Kind of token being issued.
            secret (str): Key to sign with.
            ttl (timedelta): Lifetime of the token from now.

        Raises:
            SigningError: Raised when the token cannot be signed.

        Returns:
            str: The encoded JWT.
        """
        now = datetime.now(timezone.utc)
        to_encode = {
            "tokenType": token_type.value,
            "user": user.model_dump(by_alias=True),
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        try:
            return jwt.encode(to_encode, secret, algorithm=self.algorithm)
        except JOSEError as e:
            raise SigningError(f"Could not sign {token_type.value}") from e

    def decode(self, token: str) -> dict | None:
        """Reads the claims of `token` WITHOUT checking its signature.

        Only used to find out the declared token type. Never authorize with it.

        Returns:
            dict | None: The raw claims, or None if the token is not a readable JWT.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except (JOSEError, AttributeError, TypeError):
            return None
        if not isinstance(claims, dict):
            return None
        return claims

    def verify(self, token: str) -> TokenClaims | None:
        """Verifies signature and expiry of `token` with the secret of its declared type.

        Every failure gives the same None. The cause is logged server side only.

        Returns:
            TokenClaims | None: The verified claims, None if the token is not valid.
        """
        unverified = self.decode(token)
        if unverified is None:
            logfire.info("Token rejected: not a readable JWT")
            return None

        declared_type = unverified.get("tokenType")
        if declared_type is None:
            logfire.warning("Token rejected: no tokenType claim")
            return None

        try:
            token_type = TokenType(declared_type)
        except ValueError:
            logfire.warning(f"Token rejected: unknown tokenType {declared_type!r}")
            return None

        try:
            payload = jwt.decode(
                token, self.secret_for(token_type), algorithms=[self.algorithm]
            )
            return TokenClaims.model_validate(payload)
        except ExpiredSignatureError:
            logfire.info(f"Token rejected: expired {token_type.value}")
            return None
        except JOSEError as e:
            logfire.warning(f"Token rejected: {token_type.value} failed verification ({e})")
            return None
        except ValidationError:
            logfire.warning(f"Token rejected: {token_type.value} claims are malformed")
            return None
