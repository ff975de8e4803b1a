"""
Auth API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from core.errors import GatewayError

from . import dependencies, schemas, security, service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=schemas.TokenResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse}},
)
async def login(
    payload: schemas.LoginRequest,
    signer: security.TokenSigner = Depends(security.signer),
):
    try:
        token = await service.authenticate(payload.email, payload.password, signer=signer)
    except GatewayError as exc:
        # The service message goes back to the caller as-is.
        logger.warning("login_rejected error=%s", exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    return schemas.TokenResponse(token=token)


@router.get("/me")
async def me(claims: schemas.TokenClaims = Depends(dependencies.get_current_claims)) -> dict:
    return claims.model_dump(by_alias=True)
