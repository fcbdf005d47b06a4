"""FastAPI service for TaskSaver."""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_settings
from api.routers import (
    auth_router,
    events_router,
    health_router,
    items_router,
    messages_router,
    profile_router,
    tasks_router,
)
from tasksaver import __version__
from tasksaver.errors import TaskSaverError
from tasksaver.store import build_store

logger = logging.getLogger(__name__)

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the document store once and share it across requests."""
    settings = get_settings()
    app.state.store = build_store(settings)
    logger.info(
        f"TaskSaver API starting ({settings.environment}, store={app.state.store.backend})"
    )
    try:
        yield
    finally:
        app.state.store.close()


app = FastAPI(
    title="TaskSaver API",
    version=__version__,
    description="Tasks, events, calendar and messages behind cookie-based sessions.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Envelope
# =============================================================================

def _envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


@app.exception_handler(TaskSaverError)
async def handle_domain_error(request: Request, exc: TaskSaverError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(".".join(loc) or error.get("msg", "request"))
    return _envelope(400, f"Invalid or missing fields: {', '.join(fields)}")


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _envelope(500, "Internal server error")


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(profile_router, prefix="/api/profile", tags=["profile"])
app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
app.include_router(events_router, prefix="/api/events", tags=["events"])
app.include_router(items_router, prefix="/api/items", tags=["items"])
app.include_router(messages_router, prefix="/api/messages", tags=["messages"])
app.include_router(health_router, prefix="/api", tags=["health"])


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)
