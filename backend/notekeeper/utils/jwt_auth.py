from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from notekeeper.config import DEFAULT_JWT_EXP_MINUTES
from notekeeper.models.users import Role


class InvalidToken(Exception):
    """Token signature, structure or validity window did not check out."""


class ExpiredToken(InvalidToken):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: Role


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    Verification is stateless: a token is valid as long as its signature
    matches the server secret and ``exp`` is in the future. There is no
    server-side revocation list.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = DEFAULT_JWT_EXP_MINUTES,
    ):
        if not secret:
            raise RuntimeError("JWT_SECRET is not set")
        self._secret = secret
        self._algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: str, role: Role, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self.expires_minutes)
        payload = {
            "sub": user_id,
            "userId": user_id,
            "role": Role(role).value,
            "iat": int(now.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise ExpiredToken("Token has expired") from exc
        except JWTError as exc:
            raise InvalidToken("Invalid token") from exc

        user_id = payload.get("userId") or payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidToken("Token has no subject")
        try:
            role = Role(payload.get("role"))
        except ValueError as exc:
            raise InvalidToken("Token carries an unknown role") from exc
        return TokenClaims(user_id=user_id, role=role)
