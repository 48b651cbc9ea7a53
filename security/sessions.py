"""Issues the access/refresh token pair for an authenticated account."""

from schema.security import TokenPair, TokenType, TokenUser

from security.tokens import TokenCodec


def get_user_details(account) -> TokenUser:
    """Project an account onto the claims placed in its tokens.

    This is an allow-list: fields added to the account later never reach a token
    unless they are named here.
    """
    return TokenUser(
        first_name=account.first_name,
        last_name=account.last_name,
        email=account.email,
        is_admin=bool(account.is_admin),
    )


class SessionIssuer:
    """Mints token pairs. Nothing is persisted server side."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def issue_tokens(self, account) -> TokenPair:
        user = get_user_details(account)
        return TokenPair(
            access_token=self._sign(user, TokenType.ACCESS),
            refresh_token=self._sign(user, TokenType.REFRESH),
        )

    def _sign(self, user: TokenUser, token_type: TokenType) -> str:
        return self.codec.sign(
            user,
            token_type,
            self.codec.secret_for(token_type),
            self.codec.ttl_for(token_type),
        )
