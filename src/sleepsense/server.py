"""
HTTP ingress for wearable samples.

Run with: sleepsense serve  (or uvicorn on the app returned by create_app)

Note: no ``from __future__ import annotations`` here, FastAPI resolves the
``Annotated`` header dependency at runtime.
"""

import logging
import secrets
from typing import Annotated, Any

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from sleepsense.analytics.pipeline import score_sample
from sleepsense.config import Settings
from sleepsense.errors import (
    InvalidInput,
    InvalidTimestamp,
    StorageFailure,
    Unauthorized,
)
from sleepsense.store import JsonlRecordStore, RecordStore

logger = logging.getLogger(__name__)

STORE_PATH = "/storeIoTData"


def check_api_key(expected: str, supplied: str | None) -> None:
    """Raise Unauthorized unless *supplied* matches the configured secret.

    An empty configured secret authorizes nobody.
    """
    if not expected or supplied is None:
        raise Unauthorized("missing API key")
    if not secrets.compare_digest(expected.encode(), supplied.encode()):
        raise Unauthorized("invalid API key")


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise InvalidInput("No JSON data provided") from e


def create_app(settings: Settings, store: RecordStore | None = None) -> FastAPI:
    """Build the ingress application around an injected settings object and store."""
    if store is None:
        store = JsonlRecordStore(settings.store_path)

    app = FastAPI(
        title="sleepsense",
        description="Ingests wearable samples and stores them with a sleep score and stage",
    )
    app.state.settings = settings
    app.state.store = store

    @app.exception_handler(Unauthorized)
    async def _unauthorized(request: Request, exc: Unauthorized) -> PlainTextResponse:
        client = request.client.host if request.client else "?"
        logger.warning("Unauthorized access attempt from %s (%s)", client, exc)
        return PlainTextResponse("Unauthorized: Invalid API Key", status_code=401)

    @app.exception_handler(InvalidInput)
    async def _invalid_input(request: Request, exc: InvalidInput) -> PlainTextResponse:
        return PlainTextResponse(f"Bad Request: {exc}", status_code=400)

    @app.exception_handler(InvalidTimestamp)
    async def _invalid_timestamp(request: Request, exc: InvalidTimestamp) -> PlainTextResponse:
        return PlainTextResponse(f"Bad Request: {exc}", status_code=400)

    @app.exception_handler(StorageFailure)
    async def _storage_failure(request: Request, exc: StorageFailure) -> PlainTextResponse:
        logger.error("Error writing record", exc_info=exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(STORE_PATH)
    async def store_iot_data(
        request: Request,
        x_api_key: Annotated[str | None, Header()] = None,
    ) -> JSONResponse:
        """Authenticate, score and store one sensor sample."""
        check_api_key(settings.api_key, x_api_key)

        body = await _read_body(request)
        record = score_sample(body)

        # File writes may block; keep them off the event loop
        record_id = await run_in_threadpool(store.append, record)
        logger.info(
            "IoT data saved id=%s score=%d stage=%s",
            record_id, record.sleep_score, record.sleep_stage,
        )
        return JSONResponse({"result": "Data saved successfully", "docId": record_id})

    return app
