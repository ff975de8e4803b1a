"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool

from core.errors import InvalidCredentials

from . import repository, security

logger = logging.getLogger(__name__)

# One message for both failure modes; the reason only goes to the log.
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


async def authenticate(email: str, password: str, *, signer: security.TokenSigner) -> str:
    """
    Check `email`/`password` against the users table and return a signed token.
    """
    user_row = await repository.find_by_email(email)
    if user_row is None:
        logger.info("login_failed reason=user_not_found email=%s", email)
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    # bcrypt is CPU bound; keep it off the event loop.
    is_valid = await run_in_threadpool(
        security.verify_password,
        password,
        str(user_row.get("password_hash") or ""),
    )
    if not is_valid:
        logger.info("login_failed reason=invalid_password user_id=%s", user_row.get("id"))
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    token = signer.sign(user_id=user_row["id"], email=str(user_row["email"]))
    logger.info("login_succeeded user_id=%s", user_row["id"])
    return token
