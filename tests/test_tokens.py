import pytest

from datetime import datetime, timedelta, timezone

from jose import jwt

from schema.security import TokenType, TokenUser
from security.config import SecuritySettings
from security.exceptions import SigningError
from security.tokens import TokenCodec

from conftest import ACCESS_SECRET, PEPPER, REFRESH_SECRET

USER = TokenUser(first_name="Ada", last_name="Lovelace", email="a@b.com", is_admin=False)


def _forge(claims: dict, secret: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    return jwt.encode({**claims, "exp": int(exp.timestamp())}, secret, algorithm="HS256")


def _user_claims() -> dict:
    return USER.model_dump(by_alias=True)


def test_signed_access_token_verifies(codec):
    token = codec.sign(USER, TokenType.ACCESS, ACCESS_SECRET, timedelta(minutes=10))

    claims = codec.verify(token)

    assert claims is not None
    assert claims.token_type is TokenType.ACCESS
    assert claims.user == USER


def test_token_is_a_three_segment_jwt_with_camel_case_claims(codec):
    token = codec.sign(USER, TokenType.REFRESH, REFRESH_SECRET, timedelta(days=30))

    assert len(token.split(".")) == 3
    payload = jwt.get_unverified_claims(token)
    assert payload["tokenType"] == "refreshToken"
    assert payload["user"] == {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "a@b.com",
        "isAdmin": False,
    }
    assert "exp" in payload


def test_access_token_signed_with_refresh_secret_is_rejected(codec):
    forged = _forge({"tokenType": "accessToken", "user": _user_claims()}, REFRESH_SECRET)

    assert codec.verify(forged) is None


def test_refresh_token_signed_with_access_secret_is_rejected(codec):
    forged = _forge({"tokenType": "refreshToken", "user": _user_claims()}, ACCESS_SECRET)

    assert codec.verify(forged) is None


def test_codec_with_swapped_secrets_rejects_both_kinds(codec):
    swapped = TokenCodec(
        SecuritySettings(
            access_token_secret=REFRESH_SECRET,
            refresh_token_secret=ACCESS_SECRET,
            password_pepper=PEPPER,
        )
    )
    access = codec.sign(USER, TokenType.ACCESS, ACCESS_SECRET, timedelta(minutes=10))
    refresh = codec.sign(USER, TokenType.REFRESH, REFRESH_SECRET, timedelta(days=30))

    assert swapped.verify(access) is None
    assert swapped.verify(refresh) is None


def test_expired_token_is_rejected_despite_valid_signature(codec):
    token = codec.sign(USER, TokenType.ACCESS, ACCESS_SECRET, timedelta(minutes=-1))

    assert codec.decode(token) is not None
    assert codec.verify(token) is None


def test_token_without_token_type_is_rejected(codec):
    token = _forge({"user": _user_claims()}, ACCESS_SECRET)

    assert codec.verify(token) is None


def test_token_with_unknown_token_type_is_rejected(codec):
    token = _forge({"tokenType": "adminToken", "user": _user_claims()}, ACCESS_SECRET)

    assert codec.verify(token) is None


def test_token_with_malformed_user_claim_is_rejected(codec):
    token = _forge({"tokenType": "accessToken", "user": {"email": "a@b.com"}}, ACCESS_SECRET)

    assert codec.verify(token) is None


@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", "Bearer x.y.z"])
def test_garbage_is_rejected_without_raising(codec, token):
    assert codec.decode(token) is None
    assert codec.verify(token) is None


def test_decode_reads_claims_without_checking_signature(codec):
    forged = _forge({"tokenType": "accessToken", "user": _user_claims()}, "attacker-secret")

    assert codec.decode(forged)["tokenType"] == "accessToken"
    assert codec.verify(forged) is None


def test_ttl_policy_per_token_type(codec):
    assert codec.ttl_for(TokenType.ACCESS) == timedelta(minutes=10)
    assert codec.ttl_for(TokenType.REFRESH) == timedelta(days=30)
    assert codec.secret_for(TokenType.ACCESS) == ACCESS_SECRET
    assert codec.secret_for(TokenType.REFRESH) == REFRESH_SECRET


def test_unsupported_algorithm_raises_signing_error():
    codec = TokenCodec(
        SecuritySettings(
            access_token_secret=ACCESS_SECRET,
            refresh_token_secret=REFRESH_SECRET,
            password_pepper=PEPPER,
            algorithm="HS999",
        )
    )

    with pytest.raises(SigningError):
        codec.sign(USER, TokenType.ACCESS, ACCESS_SECRET, timedelta(minutes=10))
