import jwt
import pytest

from ledgerly.app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    pwd_context,
    verify_password,
)
from ledgerly.app.core.settings import get_settings


def test_passwords_hash_with_pbkdf2():
    hashed = get_password_hash("password123")
    assert hashed.startswith("$pbkdf2-sha256$")
    assert pwd_context.identify(hashed) == "pbkdf2_sha256"
    # Salted: the same password never hashes the same way twice
    assert get_password_hash("password123") != hashed


def test_verify_password_accepts_long_passphrases():
    passphrase = "correct horse battery staple " * 5
    hashed = get_password_hash(passphrase)
    assert verify_password(passphrase, hashed)
    assert not verify_password(passphrase[:72], hashed)
    assert not verify_password("wrong", hashed)


def test_token_accepts_claims_dict_or_owner_id():
    assert decode_access_token(create_access_token({"sub": "42"}))["sub"] == "42"
    assert decode_access_token(create_access_token(42))["sub"] == "42"


def test_token_signed_with_another_key_is_rejected():
    forged = jwt.encode({"sub": "1"}, get_settings().SECRET_KEY + "-other", algorithm="HS256")
    with pytest.raises(ValueError, match="Invalid token"):
        decode_access_token(forged)


def test_expired_token_reports_expiry():
    token = create_access_token({"sub": "7"}, expires_minutes=-1)
    with pytest.raises(ValueError, match="Expired token"):
        decode_access_token(token)
