from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

# Well-known dev address so a fresh checkout can mint without extra setup.
DEV_BOOTSTRAP_ADMIN = "0xa11ce00000000000000000000000000000000001"


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it’s easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"{name} must be true|false (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    bootstrap_admin: str
    collection_name: str
    collection_symbol: str
    ipfs_gateway: str
    metadata_timeout_s: float

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")
    timeout_raw = _getenv("METADATA_TIMEOUT_S", "5.0")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        metadata_timeout_s = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"METADATA_TIMEOUT_S must be a number (got {timeout_raw!r})"
        ) from None
    if metadata_timeout_s <= 0:
        raise ValueError(
            f"METADATA_TIMEOUT_S must be positive (got {timeout_raw!r})"
        )

    # In prod the bootstrap admin must be set explicitly; the dev address
    # is public knowledge.
    admin_default = "" if app_env_raw == "prod" else DEV_BOOTSTRAP_ADMIN
    bootstrap_admin = _getenv("BOOTSTRAP_ADMIN", admin_default)
    if not bootstrap_admin:
        raise ValueError("BOOTSTRAP_ADMIN must be set")

    ipfs_gateway = _getenv("IPFS_GATEWAY", "https://ipfs.io/ipfs/")
    if not ipfs_gateway.endswith("/"):
        ipfs_gateway += "/"

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_parse_bool("LOG_JSON", _getenv("LOG_JSON", "false")),
        port=port,
        bootstrap_admin=bootstrap_admin,
        collection_name=_getenv("COLLECTION_NAME", "SheBuilds Skill NFT"),
        collection_symbol=_getenv("COLLECTION_SYMBOL", "SBSNFT"),
        ipfs_gateway=ipfs_gateway,
        metadata_timeout_s=metadata_timeout_s,
    )


# Optional: module-level singleton so imports are cheap
SETTINGS = load_settings()
