"""
FastAPI application for the true-availability endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..adapters.record_store_client import RestRecordStoreClient
from ..config import AppConfig
from ..domain.exceptions import ConfigurationError
from ..services.availability_service import RecordStoreProtocol, TrueAvailabilityService

logger = logging.getLogger(__name__)

CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(
    config: Optional[AppConfig] = None,
    store: Optional[RecordStoreProtocol] = None,
) -> FastAPI:
    """
    Build the application.

    With an explicit ``store`` every request shares it; otherwise each
    request gets a REST store forwarding the caller's bearer token.
    """
    active_config = config or AppConfig()

    app = FastAPI(title="tutorslots", version=__version__)
    app.state.config = active_config
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(_: Request, exc: ConfigurationError) -> JSONResponse:
        logger.error("Record store is not configured: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("Error in get-true-availability: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/get-true-availability")
    async def get_true_availability(
        request: Request,
        service: TrueAvailabilityService = Depends(get_availability_service),
    ) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            payload = None

        response = await run_in_threadpool(service.handle_request, payload)
        return JSONResponse(status_code=response.status_code, content=response.body)

    return app


def get_availability_service(request: Request) -> TrueAvailabilityService:
    config: AppConfig = request.app.state.config
    store = request.app.state.store

    if store is None:
        store = RestRecordStoreClient(
            base_url=config.store.url,
            api_key=config.store.api_key,
            access_token=_bearer_token(request),
            timeout_seconds=config.store.timeout_seconds,
            availability_table=config.store.availability_table,
            bookings_table=config.store.bookings_table,
        )

    return TrueAvailabilityService(record_store=store, active_status=config.active_booking_status)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token
    return None
