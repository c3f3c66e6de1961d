"""Password hashing built on passlib.

``PasswordHasher`` wraps a ``CryptContext`` configured for bcrypt. The cost
factor comes from ``BCRYPT_ROUNDS`` (see ``notekeeper.config``); when it is
unset passlib's default is used. If the bcrypt backend cannot be loaded the
hasher falls back to pbkdf2_sha256 and logs a warning.

Plaintext passwords are never logged or kept beyond the call.
"""
from __future__ import annotations

import logging
from typing import Optional

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

logger = logging.getLogger(__name__)


def _build_context(rounds: Optional[int]) -> CryptContext:
    try:
        if rounds:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        else:
            ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")
        # forces backend loading now instead of on the first login
        ctx.hash("backend-check")
        return ctx
    except Exception as exc:
        logger.warning(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256 (%s)",
            exc,
        )
    # BCRYPT_ROUNDS is a log2 cost; pbkdf2 keeps passlib's default iteration count
    return CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordHasher:
    def __init__(self, rounds: Optional[int] = None):
        self._context = _build_context(rounds)

    @property
    def scheme(self) -> str:
        return self._context.default_scheme()

    def hash(self, plain: str) -> str:
        """Hash a plaintext password and return the encoded hash string."""
        if plain is None:
            raise ValueError("Password must not be None")
        return self._context.hash(plain)

    def verify(self, plain: Optional[str], hashed: Optional[str]) -> bool:
        if plain is None or hashed is None:
            return False
        try:
            return self._context.verify(plain, hashed)
        except (UnknownHashError, ValueError, TypeError):
            return False
