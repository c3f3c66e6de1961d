from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from notekeeper.config import Settings
from notekeeper.deps import get_hasher, get_settings, get_token_service, get_users_store
from notekeeper.errors import Conflict, NotFound, Unauthenticated, ValidationError
from notekeeper.models.users import (
    LoginRequest,
    LoginResponse,
    OwnerOut,
    RegisterRequest,
    RegisterResponse,
    Role,
    UserListResponse,
    UserOut,
)
from notekeeper.storage.users_store import EmailTakenError, UserRecord, UsersStore, normalize_email
from notekeeper.utils.access import AuthContext, get_auth_context, require_roles
from notekeeper.utils.auth_hash import PasswordHasher
from notekeeper.utils.jwt_auth import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


def _user_out(rec: UserRecord) -> UserOut:
    return UserOut(**rec.to_public_dict())


@router.get("/health-check", response_class=PlainTextResponse)
def health_check() -> str:
    return "OK"


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    users: UsersStore = Depends(get_users_store),
    hasher: PasswordHasher = Depends(get_hasher),
    settings: Settings = Depends(get_settings),
) -> RegisterResponse:
    name = (req.name or "").strip()
    email = normalize_email(req.email or "")
    if not name or not email or not req.password:
        raise ValidationError("Name, email and password are required")

    role = Role.ADMIN if email in settings.admin_emails else Role.USER
    try:
        rec = users.create(name=name, email=email, hashed_password=hasher.hash(req.password), role=role)
    except EmailTakenError:
        raise Conflict("Email already registered")

    logger.info("Registered user %s with role %s", rec.id, rec.role.value)
    return RegisterResponse(message="User registered successfully", user=_user_out(rec))


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    users: UsersStore = Depends(get_users_store),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    if not req.email or not req.password:
        raise ValidationError("Email and password are required")

    rec = users.get_by_email(req.email)
    # same answer for unknown email and wrong password
    if rec is None or not hasher.verify(req.password, rec.hashed_password):
        logger.info("Failed login for %s", normalize_email(req.email))
        raise Unauthenticated("Invalid email or password")

    token = tokens.issue(rec.id, rec.role)
    return LoginResponse(
        message="Login successful",
        token=token,
        user=OwnerOut(id=rec.id, name=rec.name, email=rec.email, role=rec.role),
    )


@router.get("/profile", response_model=UserOut)
def profile(
    ctx: AuthContext = Depends(get_auth_context),
    users: UsersStore = Depends(get_users_store),
) -> UserOut:
    rec = users.get(ctx.user_id)
    if rec is None:
        raise NotFound("User not found")
    return _user_out(rec)


@router.get("", response_model=UserListResponse, dependencies=[Depends(require_roles(Role.ADMIN))])
def list_users(
    users: UsersStore = Depends(get_users_store),
) -> UserListResponse:
    records = users.list_users()
    return UserListResponse(
        message="Users retrieved successfully",
        count=len(records),
        users=[_user_out(r) for r in records],
    )
