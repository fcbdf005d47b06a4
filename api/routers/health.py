"""Health Router - liveness and store diagnostics.

``/health`` answers 200 when the store is reachable, 503 when it is not,
and 500 when required configuration is missing. ``/test-db`` runs a write
probe against the store and reports what it saw.
"""
from __future__ import annotations

import logging
import os
import platform
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_settings, get_store
from tasksaver.config import Settings
from tasksaver.dates import utcnow
from tasksaver.errors import TaskSaverError
from tasksaver.store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter()

_STARTED = time.monotonic()


def _process_info() -> Dict[str, Any]:
    return {"pid": os.getpid(), "python": platform.python_version()}


@router.get("/health")
def health(
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_store),
) -> JSONResponse:
    started = time.perf_counter()
    missing = settings.missing_required()
    if missing:
        logger.error(f"Health check: missing configuration {missing}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Missing required environment variables",
                "missing": missing,
                "timestamp": utcnow().isoformat(),
            },
        )

    db_status, db_error = "connected", None
    try:
        store.probe()
    except TaskSaverError as exc:
        db_status, db_error = "disconnected", exc.message
        logger.warning(f"Health check: store unreachable: {exc.message}")

    healthy = db_status == "connected"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": utcnow().isoformat(),
            "uptime": round(time.monotonic() - _STARTED, 3),
            "responseTime": f"{(time.perf_counter() - started) * 1000:.0f}ms",
            "environment": settings.environment,
            "database": {"status": db_status, "backend": store.backend, "error": db_error},
            "version": settings.version,
            "process": _process_info(),
        },
    )


@router.get("/test-db")
def test_db(store: DocumentStore = Depends(get_store)) -> JSONResponse:
    """Diagnostic probe. Not meant for monitoring."""
    started = time.perf_counter()
    try:
        results = store.probe()
    except TaskSaverError as exc:
        logger.warning(f"Store probe failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.message,
                "timestamp": utcnow().isoformat(),
            },
        )

    results["totalTime"] = f"{(time.perf_counter() - started) * 1000:.0f}ms"
    return JSONResponse(
        content={
            "success": True,
            "message": "Database connection test completed",
            "results": results,
            "timestamp": utcnow().isoformat(),
        }
    )
