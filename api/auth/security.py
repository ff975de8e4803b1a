"""
Auth security helpers: bcrypt password checks and the JWT token signer.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import bcrypt
import jwt

from core.config import DEFAULT_TOKEN_SECRET, AuthConfig
from core.errors import InvalidToken

logger = logging.getLogger(__name__)

_signer: TokenSigner | None = None


def now_epoch_s() -> int:
    return int(time.time())


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


class TokenSigner:
    """
    Signs and verifies bearer tokens carrying `userId` and `email`.
    """

    def __init__(self, *, secret: str, expiry_seconds: int, algorithm: str = "HS256") -> None:
        if not (secret or "").strip():
            raise ValueError("Token secret is empty.")
        self._secret = secret
        self.expiry_seconds = int(expiry_seconds)
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, settings: AuthConfig | None) -> TokenSigner:
        settings = settings or AuthConfig()
        if settings.secret == DEFAULT_TOKEN_SECRET:
            logger.warning("token_secret_default set JWT_SECRET in production")
        return cls(
            secret=settings.secret,
            expiry_seconds=settings.token_expiry_seconds,
            algorithm=settings.algorithm,
        )

    def sign(self, *, user_id: int | str, email: str) -> str:
        issued_at = now_epoch_s()
        payload = {
            "userId": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expiry_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if not raw:
            raise InvalidToken("Token is empty.")

        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("Invalid token.") from exc

        if "userId" not in payload or not payload.get("email"):
            raise InvalidToken("Token is missing identity claims.")
        return payload


def init_signer(settings: AuthConfig | None) -> TokenSigner:
    global _signer
    if _signer is None:
        _signer = TokenSigner.from_config(settings)
    return _signer


def reset_signer() -> None:
    global _signer
    _signer = None


def signer() -> TokenSigner:
    if _signer is None:
        raise RuntimeError("Token signer is not initialized. Call init_signer() on startup.")
    return _signer
