import jwt
import pytest

from moviecatalog.core.errors import InvalidToken
from moviecatalog.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


@pytest.mark.parametrize("password", ["secret123", "pässwörd-ünïcode", "x" * 72])
def test_hash_then_verify(password):
    hashed = hash_password(password)
    assert hashed != password
    assert verify_password(password, hashed)


def test_wrong_password_does_not_verify():
    hashed = hash_password("secret123")
    assert verify_password("secret124", hashed) is False


def test_hash_is_salted_with_cost_ten():
    first, second = hash_password("secret123"), hash_password("secret123")
    assert first != second
    assert first.startswith("$2b$10$")


def test_verify_never_raises_on_garbage_hash():
    assert verify_password("secret123", "not-a-bcrypt-hash") is False


def test_token_resolves_to_user_id(settings):
    token = create_access_token(42, "alice", settings)
    assert decode_access_token(token, settings) == 42


def test_token_lifetime_is_one_week(settings):
    token = create_access_token(1, settings=settings)
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["exp"] - payload["iat"] == 7 * 24 * 60 * 60


def test_token_signed_with_other_secret_is_rejected(settings):
    other = settings.model_copy(update={"SECRET_KEY": "another-secret-key-of-sufficient-length"})
    token = create_access_token(1, settings=other)
    with pytest.raises(InvalidToken):
        decode_access_token(token, settings)


def test_expired_token_is_rejected(settings):
    expired = settings.model_copy(update={"ACCESS_TOKEN_EXPIRE_MINUTES": -1})
    token = create_access_token(1, settings=expired)
    with pytest.raises(InvalidToken) as excinfo:
        decode_access_token(token, settings)
    assert "expired" in excinfo.value.message


def test_malformed_token_is_rejected(settings):
    with pytest.raises(InvalidToken):
        decode_access_token("definitely.not.a-jwt", settings)


def test_non_integer_subject_is_rejected(settings):
    token = jwt.encode({"sub": "alice", "exp": 9999999999}, settings.SECRET_KEY, algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_access_token(token, settings)
