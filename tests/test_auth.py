from datetime import datetime, timedelta, timezone

import jwt
import pytest

import config
from config import AuthSettings
from utils.auth import (
    create_access_token,
    extract_bearer_token,
    hash_password,
    verify_access_token,
    verify_password,
)
from utils.errors import Forbidden

from conftest import TEST_SECRET


def test_password_hash_round_trip(app_env):
    digest = hash_password("hunter2")
    assert digest.startswith("pbkdf2_sha256$1000$")
    assert verify_password("hunter2", digest)
    assert not verify_password("hunter3", digest)
    assert not verify_password("hunter2", "garbage")


def test_hash_password_rejects_empty(app_env):
    with pytest.raises(ValueError):
        hash_password("")


def test_access_token_carries_user_id(app_env):
    token = create_access_token(42)
    assert verify_access_token(token) == 42


def test_expired_token_is_forbidden(app_env):
    expired = AuthSettings(secret_key=TEST_SECRET, token_ttl_minutes=-5)
    token = create_access_token(7, expired)
    with pytest.raises(Forbidden):
        verify_access_token(token)


def test_token_signed_with_other_secret_is_forbidden(app_env):
    other = AuthSettings(secret_key="another-secret-key-with-enough-bytes-for-hs256")
    token = create_access_token(7, other)
    with pytest.raises(Forbidden):
        verify_access_token(token)


def test_token_without_numeric_subject_is_forbidden(app_env):
    expire = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "someone", "exp": expire}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(Forbidden):
        verify_access_token(token)


def test_token_without_expiry_is_forbidden(app_env):
    token = jwt.encode({"sub": "7"}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(Forbidden):
        verify_access_token(token)


def test_token_without_subject_is_forbidden(app_env):
    expire = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"exp": expire}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(Forbidden):
        verify_access_token(token)


def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc") == "abc"
    assert extract_bearer_token("bearer abc") == "abc"
    assert extract_bearer_token("Bearer ") is None
    assert extract_bearer_token("Basic abc") is None
    assert extract_bearer_token(None) is None


def test_missing_token_is_unauthenticated(client):
    response = client.get("/api/decks")
    assert response.status_code == 401
    assert response.json()["message"] == "Missing token"


def test_wrong_scheme_is_unauthenticated(client):
    response = client.get("/api/decks", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_invalid_token_is_forbidden(client):
    response = client.get("/api/initial-data", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid token"


def test_register_then_login(client):
    response = client.post("/api/register", json={"email": "Ana@Example.com", "password": "s3cret"})
    assert response.status_code == 201
    user = response.json()
    assert user["email"] == "ana@example.com"

    response = client.post("/api/login", json={"email": "ana@example.com", "password": "s3cret"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": user["id"], "email": "ana@example.com", "subscription_status": "inactive"}
    assert "password_hash" not in body["user"]

    response = client.get("/api/decks", headers={"Authorization": f"Bearer {body['token']}"})
    assert response.status_code == 200
    assert response.json() == []


def test_register_duplicate_email_conflicts(client):
    payload = {"email": "ana@example.com", "password": "s3cret"}
    assert client.post("/api/register", json=payload).status_code == 201
    response = client.post("/api/register", json=payload)
    assert response.status_code == 409


def test_register_requires_email_and_password(client):
    response = client.post("/api/register", json={"email": "ana@example.com"})
    assert response.status_code == 400


def test_login_failures(client):
    client.post("/api/register", json={"email": "ana@example.com", "password": "s3cret"})
    unknown = client.post("/api/login", json={"email": "bob@example.com", "password": "s3cret"})
    assert unknown.status_code == 400
    wrong = client.post("/api/login", json={"email": "ana@example.com", "password": "nope"})
    assert wrong.status_code == 401


def test_secret_generated_and_persisted_when_empty(tmp_path, monkeypatch):
    config_dir = tmp_path / ".medrecall"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    config_path.write_text('[auth]\nsecret_key = ""\nalgorithm = "HS256"\n', encoding="utf-8")

    monkeypatch.delenv("MEDRECALL_SECRET_KEY", raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    config.get_auth_settings.cache_clear()
    try:
        settings = config.get_auth_settings()
        assert settings.secret_key
        assert config.get_auth_settings() is settings
        text = config_path.read_text(encoding="utf-8")
        assert f'secret_key = "{settings.secret_key}"' in text
        assert 'algorithm = "HS256"' in text
    finally:
        config.get_auth_settings.cache_clear()


def test_secret_section_added_when_missing(tmp_path, monkeypatch):
    config_dir = tmp_path / ".medrecall"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    config_path.write_text("[server]\nport = 3000\n", encoding="utf-8")

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)

    config.set_auth_secret_key("xyz789")

    updated = config_path.read_text(encoding="utf-8")
    assert "[auth]" in updated
    assert 'secret_key = "xyz789"' in updated
