"""
FastAPI application entry point for the real-estate backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from realestate.bootstrap import run_bootstrap
from realestate.config import get_settings
from realestate.dependencies import get_document_store, get_storage_client
from realestate.errors import RepositoryError
from realestate.media import MediaService
from realestate.routes import router

logger = logging.getLogger(__name__)


def _resolve(app: FastAPI, dependency):
    return app.dependency_overrides.get(dependency, dependency)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings.check_deployment_secrets()
    if settings.seed_on_startup:
        store = _resolve(app, get_document_store)()
        storage_client = _resolve(app, get_storage_client)()
        media = MediaService(storage_client, settings.signed_url_expiry_days)
        run_bootstrap(store, media, settings)
    yield


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error("Unhandled repository error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Real Estate Backend (FastAPI)", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("realestate.app:app", host="0.0.0.0", port=8080)
