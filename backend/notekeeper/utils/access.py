"""Request identity and the access rules applied on top of it.

``get_auth_context`` is the bearer-token gate every protected route depends
on. It yields an immutable ``AuthContext`` that handlers pass on explicitly
to the role guard and to the per-note ownership policy.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from notekeeper.deps import get_token_service
from notekeeper.errors import Forbidden, Unauthenticated
from notekeeper.models.users import Role
from notekeeper.storage.notes_store import Note
from notekeeper.utils.jwt_auth import InvalidToken, TokenService

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def get_auth_context(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    # HTTPBearer yields None for a missing header or a non-Bearer scheme
    if creds is None or not creds.credentials:
        raise Unauthenticated("No token provided")
    try:
        claims = tokens.verify(creds.credentials)
    except InvalidToken as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise Unauthenticated("Invalid or expired token")
    return AuthContext(user_id=claims.user_id, role=claims.role)


# -- role guard ---------------------------------------------------------------

def role_allowed(role: Role, allowed: Iterable[Role]) -> bool:
    return role in frozenset(allowed)


def check_roles(ctx: Optional[AuthContext], allowed: Iterable[Role]) -> AuthContext:
    allowed = frozenset(allowed)
    if ctx is None:
        raise Unauthenticated("No token provided")
    if not role_allowed(ctx.role, allowed):
        required = ", ".join(sorted(r.value for r in allowed))
        raise Forbidden(f"Access denied. Required role: {required}")
    return ctx


def require_roles(*roles: Role) -> Callable[..., AuthContext]:
    """Dependency that authenticates the caller and checks the role allow-list.

    Usage:
        @router.get("", dependencies=[Depends(require_roles(Role.ADMIN))])
    """
    allowed = frozenset(roles)

    def dependency(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        return check_roles(ctx, allowed)

    return dependency


# -- note ownership -----------------------------------------------------------

def can_access_note(ctx: AuthContext, note: Note) -> bool:
    return note.user_id == ctx.user_id or ctx.is_admin


def authorize_note(ctx: AuthContext, note: Note, verb: str) -> None:
    """Owner-or-admin rule; verb is "view", "update" or "delete"."""
    if not can_access_note(ctx, note):
        logger.info("User %s denied %s on note %s", ctx.user_id, verb, note.id)
        raise Forbidden(f"Access denied. You can only {verb} your own notes")
