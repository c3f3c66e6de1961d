from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from notekeeper.api import notes, users
from notekeeper.config import Settings, api_prefix_from_env, load_settings
from notekeeper.errors import install_error_handlers
from notekeeper.storage.notes_store import NotesStore
from notekeeper.storage.users_store import UsersStore
from notekeeper.utils.auth_hash import PasswordHasher
from notekeeper.utils.jwt_auth import TokenService

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the stores and auth services once per process."""
    settings: Settings = app.state.settings or load_settings()
    app.state.settings = settings
    _configure_logging(settings.log_level)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    app.state.users = UsersStore(settings.data_dir)
    app.state.notes = NotesStore(settings.data_dir)
    app.state.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_exp_minutes,
    )
    logger.info("Notekeeper API starting, data dir %s", settings.data_dir)

    yield

    logger.info("Notekeeper API shutting down")
    for name in ("users", "notes", "hasher", "tokens"):
        delattr(app.state, name)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory; settings default to the environment at startup."""
    app = FastAPI(title="Notekeeper API", lifespan=lifespan)
    app.state.settings = settings
    install_error_handlers(app)

    prefix = settings.api_prefix if settings else api_prefix_from_env()
    app.include_router(users.router, prefix=prefix)
    app.include_router(notes.router, prefix=prefix)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
