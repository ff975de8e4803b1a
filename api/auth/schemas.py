"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class TokenResponse(BaseModel):
    token: str


class TokenClaims(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int | str = Field(..., alias="userId")
    email: str


class ErrorResponse(BaseModel):
    error: str
