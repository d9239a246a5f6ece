from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from db import database, store
from main import app
from utils.auth import create_access_token

TEST_SECRET = "test-secret-key-with-enough-bytes-for-hs256-signing"


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[auth]",
                f'secret_key = "{TEST_SECRET}"',
                "token_ttl_minutes = 60",
                "password_hash_iterations = 1000",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    config_dir = tmp_path / ".medrecall"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    for name in ("MEDRECALL_SECRET_KEY", "MEDRECALL_DB_PATH", "MEDRECALL_TOKEN_TTL_MINUTES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "medrecall.db")
    config.get_auth_settings.cache_clear()
    database.resolve_db_path.cache_clear()

    database.init_db()
    yield config_dir
    config.get_auth_settings.cache_clear()
    database.resolve_db_path.cache_clear()


@pytest.fixture
def client(app_env):
    return TestClient(app)


@pytest.fixture
def make_user(app_env):
    """Create a user row and return (user_id, auth headers)."""
    def _make(email: str):
        with database.get_conn() as conn:
            user = store.insert_user(conn, email, "unused")
        token = create_access_token(user["id"])
        return user["id"], {"Authorization": f"Bearer {token}"}
    return _make
