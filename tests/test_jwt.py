from datetime import datetime, timezone

import jwt
import pytest

from ledgerly.app.core.security import create_access_token, decode_access_token
from ledgerly.app.core.settings import get_settings


def test_token_lifetime_follows_settings():
    settings = get_settings()
    before = datetime.now(timezone.utc).timestamp()
    payload = decode_access_token(create_access_token(user_id=5))
    lifetime = payload["exp"] - before
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 - 5 <= lifetime <= settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 + 5


def test_explicit_lifetime_overrides_settings():
    before = datetime.now(timezone.utc).timestamp()
    payload = decode_access_token(create_access_token(user_id=5, expires_minutes=120))
    assert 120 * 60 - 5 <= payload["exp"] - before <= 120 * 60 + 5


def test_token_with_other_algorithm_is_rejected():
    token = jwt.encode({"sub": "5"}, get_settings().SECRET_KEY, algorithm="HS512")
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_tampered_token_is_rejected():
    token = create_access_token(user_id=5)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    with pytest.raises(ValueError):
        decode_access_token(tampered)
