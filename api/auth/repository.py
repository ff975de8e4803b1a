"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db


async def find_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash
        FROM users
        WHERE email = $1
        LIMIT 1
        """,
        email,
    )
