import pytest

from security.exceptions import HashingError
from security.passwords import PasswordHasher


def test_hash_verifies_against_same_password(hasher):
    stored = hasher.hash("Correct-horse1")

    assert hasher.verify("Correct-horse1", stored) is True


def test_wrong_password_does_not_verify(hasher):
    stored = hasher.hash("Correct-horse1")

    assert hasher.verify("Correct-horse2", stored) is False


def test_same_password_hashes_differently_each_time(hasher):
    first = hasher.hash("Correct-horse1")
    second = hasher.hash("Correct-horse1")

    assert first != second
    assert hasher.verify("Correct-horse1", first)
    assert hasher.verify("Correct-horse1", second)


def test_hash_does_not_contain_password_or_pepper(hasher):
    stored = hasher.hash("Correct-horse1")

    assert "Correct-horse1" not in stored
    assert "test-pepper" not in stored


def test_hash_from_another_pepper_does_not_verify(hasher):
    other = PasswordHasher("another-pepper", rounds=4)

    assert hasher.verify("Correct-horse1", other.hash("Correct-horse1")) is False


def test_default_cost_factor_is_ten():
    stored = PasswordHasher("pepper").hash("Correct-horse1")

    assert stored.startswith("$2b$10$")


@pytest.mark.parametrize("stored", ["", "not-a-hash", "$2b$04$truncated", None])
def test_malformed_stored_hash_is_a_failed_verification(hasher, stored):
    assert hasher.verify("Correct-horse1", stored) is False


def test_hashing_failure_raises_hashing_error(hasher, monkeypatch):
    def broken_hash(secret):
        raise RuntimeError("entropy pool exhausted")

    monkeypatch.setattr(hasher.pwd_context, "hash", broken_hash)

    with pytest.raises(HashingError):
        hasher.hash("Correct-horse1")


@pytest.mark.parametrize("password", ["ж" * 36, "a" * 64, "Correct-horse1" * 5])
def test_long_passwords_still_depend_on_the_pepper(password):
    stored = PasswordHasher("pepper-one", rounds=4).hash(password)

    assert PasswordHasher("pepper-one", rounds=4).verify(password, stored) is True
    assert PasswordHasher("totally-different-pepper", rounds=4).verify(password, stored) is False


def test_every_pepper_byte_counts_after_a_max_length_password():
    password = "a" * 64
    stored = PasswordHasher("change-me-pepper", rounds=4).hash(password)

    assert PasswordHasher("change-mXXXXXXXXXX", rounds=4).verify(password, stored) is False


def test_passwords_sharing_a_72_byte_prefix_are_distinct(hasher):
    stored = hasher.hash("x" * 72 + "tail-one")

    assert hasher.verify("x" * 72 + "tail-two", stored) is False


def test_verify_backend_failure_raises_hashing_error(hasher, monkeypatch):
    stored = hasher.hash("Correct-horse1")

    def broken_verify(secret, hashed):
        raise RuntimeError("bcrypt backend unavailable")

    monkeypatch.setattr(hasher.pwd_context, "verify", broken_verify)

    with pytest.raises(HashingError):
        hasher.verify("Correct-horse1", stored)
