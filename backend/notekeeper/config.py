from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# repository_root/data (we are in backend/notekeeper/)
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

DEFAULT_JWT_EXP_MINUTES = 24 * 60


def _get_int(value: str | None, default: int | None) -> int | None:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_positive_int(value: str | None, default: int) -> int:
    # zero or negative lifetimes would issue tokens that are already expired
    parsed = _get_int(value, default)
    return parsed if parsed is not None and parsed > 0 else default


def _get_list(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(item.strip().lower() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_exp_minutes: int = DEFAULT_JWT_EXP_MINUTES
    bcrypt_rounds: int | None = None
    data_dir: Path = DEFAULT_DATA_DIR
    admin_emails: frozenset[str] = field(default_factory=frozenset)
    api_prefix: str = ""
    log_level: str = "INFO"


def api_prefix_from_env() -> str:
    load_dotenv()
    return os.getenv("API_PREFIX", "").rstrip("/")


def load_settings() -> Settings:
    """Build settings from the environment (and a .env file, if present)."""
    load_dotenv()

    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError("JWT_SECRET is not set")

    return Settings(
        jwt_secret=secret,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_exp_minutes=_get_positive_int(os.getenv("JWT_EXP_MINUTES"), DEFAULT_JWT_EXP_MINUTES),
        bcrypt_rounds=_get_int(os.getenv("BCRYPT_ROUNDS"), None),
        data_dir=Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR))),
        admin_emails=_get_list(os.getenv("ADMIN_EMAILS")),
        api_prefix=api_prefix_from_env(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
