from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


# Fields are optional so that a missing value reaches the handler and gets
# the same "... are required" message the clients already expect.
class RegisterRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=254)
    password: Optional[str] = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    email: Optional[str] = Field(default=None, max_length=254)
    password: Optional[str] = Field(default=None, max_length=128)


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    created_at: str


class OwnerOut(BaseModel):
    id: str
    name: str
    email: str
    role: Role


class RegisterResponse(BaseModel):
    message: str
    user: UserOut


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: OwnerOut


class UserListResponse(BaseModel):
    message: str
    count: int
    users: list[UserOut]
