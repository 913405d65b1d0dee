import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from standupsync.db.base import get_db
from standupsync.core.config import settings
from standupsync.core.logging import configure_logging
from standupsync.routers import query as query_router
from standupsync.routers import standups as standups_router
from standupsync.services.ai_gateway import GatewayConfig, build_gateway
from standupsync.core.errors import (
    StandupSyncException,
    standupsync_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    # Model resolution happens once; requests only read the handle.
    app.state.gateway = build_gateway(GatewayConfig.from_settings(settings))
    yield


app = FastAPI(
    title="StandupSync API",
    description=(
        "**Daily standup analytics**\n\n"
        "Weekly / monthly summaries, statistics, recurring-blocker detection and "
        "natural-language queries, optionally enriched by Gemini with a "
        "deterministic fallback.\n\n"
        "Every response uses the `{success, data | message, error}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(StandupSyncException, standupsync_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(query_router.router)
app.include_router(standups_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(request: Request, db: Session = Depends(get_db)):
    """
    Probes the standup store with `SELECT 1` and reports which Gemini model
    the gateway resolved at startup (`null` when AI analysis runs on
    fallbacks only). A missing model is not an outage, so only the store
    decides the status: HTTP 503 when it is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health probe could not reach the standup store")
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": "unreachable"},
        )

    gateway = getattr(request.app.state, "gateway", None)
    return {
        "status": "ok",
        "db": "ok",
        "ai_model": gateway.model_name if gateway is not None else None,
        "env": settings.APP_ENV,
    }
