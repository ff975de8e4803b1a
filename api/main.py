from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from auth import security
from core import cache, db, search
from core import config as config_loader
from core.config import Config
from core.errors import StoreError
from leases import router as leases_router
from leases import service as leases_service

logger = logging.getLogger("core_api")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_invalid errors=%s", exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid request", "details": jsonable_encoder(exc.errors())},
    )


async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(config: Config | None = None) -> FastAPI:
    config = config or config_loader.load()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # Shared clients are created once per process; teardown runs even
        # when a later init step fails.
        try:
            try:
                await db.init_pool(config.database)
            except StoreError as exc:
                logger.warning("db_pool_unavailable error=%s", exc)
            security.init_signer(config.auth)
            cache.init_client(config.cache)
            search.init_client(config.search)
            leases_service.init_client(config.lease_service)
            logger.info("core_api_started host=%s port=%s", config.server.host, config.server.port)
            yield
        finally:
            await leases_service.close_client()
            await search.close_client()
            await cache.close_client()
            security.reset_signer()
            await db.close_pool()
            logger.info("core_api_stopped")

    app = FastAPI(title="core-api", lifespan=lifespan)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)

    app.include_router(auth_router.router, prefix="/auth", tags=["auth"])
    app.include_router(leases_router.router, prefix="/api/v1/leases", tags=["leases"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    config = config_loader.load()
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
