from __future__ import annotations

import hashlib
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from notekeeper.models.users import Role
from notekeeper.storage.files import StoreError, atomic_write_json, read_json, utc_now_iso

logger = logging.getLogger(__name__)


class EmailTakenError(Exception):
    """Another user already registered this email."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _safe_user_id(user_id: str) -> str:
    # ids come from tokens; keep them strict to avoid path issues
    if not user_id or any(ch in user_id for ch in ["/", "\\"]) or ".." in user_id:
        raise ValueError("Invalid user_id")
    return user_id


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    hashed_password: str
    role: Role
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "hashed_password": self.hashed_password,
            "role": self.role.value,
            "created_at": self.created_at,
        }

    def to_public_dict(self) -> dict[str, Any]:
        data = self.to_dict()
        del data["hashed_password"]
        return data


class UsersStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    @property
    def _users_dir(self) -> Path:
        return self.base_dir / "users"

    def _user_path(self, user_id: str) -> Path:
        return self._users_dir / f"{_safe_user_id(user_id)}.json"

    def _email_index_path(self, email: str) -> Path:
        digest = hashlib.sha256(normalize_email(email).encode("utf-8")).hexdigest()
        return self._users_dir / "by_email" / digest

    def _load(self, path: Path) -> Optional[UserRecord]:
        raw = read_json(path)
        if raw is None:
            return None
        try:
            return UserRecord(
                id=raw["id"],
                name=raw["name"],
                email=raw["email"],
                hashed_password=raw["hashed_password"],
                role=Role(raw.get("role", Role.USER.value)),
                created_at=raw["created_at"],
            )
        except (KeyError, ValueError) as exc:
            raise StoreError(f"Malformed user {path.name}") from exc

    def get(self, user_id: str) -> Optional[UserRecord]:
        try:
            path = self._user_path(user_id)
        except ValueError:
            return None
        return self._load(path)

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        user_id = self._indexed_id(email)
        if not user_id:
            return None
        rec = self.get(user_id)
        if rec is None or rec.email != normalize_email(email):
            return None
        return rec

    def _indexed_id(self, email: str) -> Optional[str]:
        try:
            return self._email_index_path(email).read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError("Cannot read email index") from exc

    def _claim_email(self, email: str, user_id: str) -> None:
        # exclusive create of the index file is what makes emails unique
        index = self._email_index_path(email)
        try:
            index.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreError("Cannot write email index") from exc
        for _ in range(2):
            try:
                with index.open("x", encoding="utf-8") as f:
                    f.write(user_id)
                return
            except FileExistsError:
                holder = self._indexed_id(email)
                if holder is None:
                    continue
                if self.get(holder) is not None:
                    raise EmailTakenError("Email already registered")
                # left behind by an interrupted registration
                logger.warning("Reclaiming dangling email index for user %s", holder)
                index.unlink(missing_ok=True)
            except OSError as exc:
                raise StoreError("Cannot write email index") from exc
        raise EmailTakenError("Email already registered")

    def list_users(self) -> list[UserRecord]:
        if not self._users_dir.exists():
            return []
        loaded = (self._load(p) for p in self._users_dir.glob("*.json"))
        # a record whose index was never written did not finish registering
        users = [u for u in loaded if u is not None and self._indexed_id(u.email) == u.id]
        users.sort(key=lambda u: (u.created_at, u.id))
        return users

    def create(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: Role = Role.USER,
    ) -> UserRecord:
        rec = UserRecord(
            id=uuid.uuid4().hex,
            name=name,
            email=normalize_email(email),
            hashed_password=hashed_password,
            role=role,
            created_at=utc_now_iso(),
        )

        # record first, then the index: an index always names a stored user
        user_path = self._user_path(rec.id)
        atomic_write_json(user_path, rec.to_dict())
        try:
            self._claim_email(rec.email, rec.id)
        except Exception:
            user_path.unlink(missing_ok=True)
            raise
        logger.debug("Stored user %s", rec.id)
        return rec
