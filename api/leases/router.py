"""
Lease API endpoints.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from core import search as search_client
from core.errors import UpstreamError

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def search_leases(
    q: str = Query(default=""),
    search: search_client.SearchClient = Depends(search_client.client),
):
    try:
        return await service.search_leases(q, search=search)
    except UpstreamError:
        logger.exception("lease_search_failed q=%s", q)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "search failed"},
        )


@router.get("/{lease_id}")
async def get_lease(
    lease_id: str,
    lease_service: service.LeaseServiceClient = Depends(service.client),
):
    try:
        downstream = await lease_service.get_lease(lease_id)
        if not downstream.ok:
            # Pass the downstream answer through untouched.
            return Response(
                content=downstream.content,
                status_code=downstream.status_code,
                media_type=downstream.content_type,
            )
        body = json.loads(downstream.content)
    except (UpstreamError, ValueError):
        logger.exception("lease_fetch_failed lease_id=%s", lease_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "fetch lease failed"},
        )
    return JSONResponse(content=body)
