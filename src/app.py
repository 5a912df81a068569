"""Main FastAPI application module.

This module initializes the FastAPI application, registers error handlers
and all route handlers.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import API_HOST, API_PORT, CORS_ALLOWED_ORIGINS
from core.database import SessionLocal, init_db
from core.dependencies import get_timer_authority
from core.exceptions import PersistenceError, QuizServiceError
from api.routes import admin, auth, quiz, status
from utils.seed import seed_database
from utils.timer_manager import TimerManager

# Setup logging
setup_logging()

logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Quiz Service API",
    description="Year-level quiz administration: sessions, timers and results.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(quiz.router)
app.include_router(admin.router)
app.include_router(status.router)


def _error_body(message: str, error=None) -> dict:
    body = {"message": message}
    if error:
        body["error"] = error
    return body


@app.exception_handler(QuizServiceError)
async def quiz_service_error_handler(request: Request, exc: QuizServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.error))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=_error_body("Invalid request", details))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    error = PersistenceError("Database error", error=exc.__class__.__name__)
    return JSONResponse(
        status_code=error.status_code, content=_error_body(error.message, error.error)
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Server error"))


@app.on_event("startup")
def startup_tasks() -> None:
    """Create tables, seed defaults and restore a running global timer."""
    init_db()
    with SessionLocal() as db:
        seed_database(db)
        get_timer_authority().rehydrate(TimerManager(db))


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links."""
    return {
        "name": "Quiz Service API",
        "version": "1.0.0",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "status": "/api/status",
    }


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Quiz Service on http://%s:%s", API_HOST, API_PORT)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
