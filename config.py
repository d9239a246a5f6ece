import tomllib
import shutil
import re
import secrets
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".medrecall"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL_MINUTES = 60
DEFAULT_PASSWORD_ITERATIONS = 200_000


@dataclass(frozen=True)
class AuthSettings:
    secret_key: str
    algorithm: str = DEFAULT_ALGORITHM
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES
    password_hash_iterations: int = DEFAULT_PASSWORD_ITERATIONS


def load_config() -> Dict[str, Any]:
    """Load config from ~/.medrecall/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    auth_cfg = config.get("auth", {})
    config["auth"] = {
        "secret_key": os.getenv("MEDRECALL_SECRET_KEY", auth_cfg.get("secret_key", "")),
        "algorithm": auth_cfg.get("algorithm", DEFAULT_ALGORITHM),
        "token_ttl_minutes": int(os.getenv(
            "MEDRECALL_TOKEN_TTL_MINUTES",
            auth_cfg.get("token_ttl_minutes", DEFAULT_TOKEN_TTL_MINUTES)
        )),
        "password_hash_iterations": int(
            auth_cfg.get("password_hash_iterations", DEFAULT_PASSWORD_ITERATIONS)
        ),
    }
    database_cfg = config.get("database", {})
    config["database"] = {
        "path": os.getenv("MEDRECALL_DB_PATH", database_cfg.get("path", "")),
    }
    server_cfg = config.get("server", {})
    config["server"] = {
        "host": server_cfg.get("host", "127.0.0.1"),
        "port": int(server_cfg.get("port", 3000)),
        "log_level": os.getenv("MEDRECALL_LOG_LEVEL", server_cfg.get("log_level", "info")).lower(),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('auth', 'algorithm')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value


def ensure_secret_key() -> str:
    """Return the configured signing secret, generating and persisting one on first run."""
    config = load_config()
    secret = config["auth"]["secret_key"]
    if secret:
        return secret
    secret = secrets.token_urlsafe(48)
    set_auth_secret_key(secret)
    return secret


def set_auth_secret_key(secret: str) -> None:
    """Persist the token signing secret into config.toml."""
    load_config()
    text = CONFIG_PATH.read_text()
    if "[auth]" not in text:
        text = text.rstrip() + f'\n\n[auth]\nsecret_key = "{secret}"\n'
        CONFIG_PATH.write_text(text)
        return

    def update_section(match: re.Match) -> str:
        section = match.group(1)
        rest = match.group(2)
        if re.search(r"^secret_key\s*=", section, flags=re.MULTILINE):
            section = re.sub(
                r"^secret_key\s*=.*$",
                f'secret_key = "{secret}"',
                section,
                flags=re.MULTILINE,
            )
        else:
            lines = section.rstrip().splitlines()
            insert_at = 1 if lines else 0
            lines.insert(insert_at, f'secret_key = "{secret}"')
            section = "\n".join(lines) + "\n\n"
        return section + rest

    text = re.sub(r"(?ms)(^\[auth\].*?)(^\[|\Z)", update_section, text)
    CONFIG_PATH.write_text(text)


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Token and password settings, read once per process and never mutated afterwards."""
    secret = ensure_secret_key()
    auth_cfg = load_config()["auth"]
    return AuthSettings(
        secret_key=secret,
        algorithm=auth_cfg["algorithm"],
        token_ttl_minutes=auth_cfg["token_ttl_minutes"],
        password_hash_iterations=auth_cfg["password_hash_iterations"],
    )
