"""Accessors for the per-process handles built in the app lifespan."""
from fastapi import Request

from notekeeper.config import Settings
from notekeeper.storage.notes_store import NotesStore
from notekeeper.storage.users_store import UsersStore
from notekeeper.utils.auth_hash import PasswordHasher
from notekeeper.utils.jwt_auth import TokenService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_users_store(request: Request) -> UsersStore:
    return request.app.state.users


def get_notes_store(request: Request) -> NotesStore:
    return request.app.state.notes


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher
