"""Main application entry point."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

from config import (
    API_VERSION,
    CHECKOUT_RATE_LIMIT,
    CORS_ORIGINS,
    LOGIN_RATE_LIMIT,
    PING_MESSAGE,
    RATE_LIMIT_WINDOW_SECONDS,
    TRUST_PROXY_HEADERS,
)
from database import init_db, engine, SessionLocal
from logging_config import setup_logging
from routers import products, checkout, settings, orders, auth as auth_router
from security import RateLimitMiddleware
from services.store import StorefrontStore

# Setup structured logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info("Starting application...")

    init_db()
    app.state.store = StorefrontStore(SessionLocal)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Storefront Service",
    version=API_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    RateLimitMiddleware,
    limits={
        "/api/checkout": CHECKOUT_RATE_LIMIT,
        "/api/auth/login": LOGIN_RATE_LIMIT,
    },
    window_seconds=RATE_LIMIT_WINDOW_SECONDS,
    trust_proxy_headers=TRUST_PROXY_HEADERS
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every error body has the shape {"error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected malformed request", extra={
        "endpoint": request.url.path,
        "errors": len(exc.errors())
    })
    return JSONResponse(status_code=400, content={"error": "Invalid request payload"})


# Instrument FastAPI and SQLAlchemy
FastAPIInstrumentor.instrument_app(app)
SQLAlchemyInstrumentor().instrument(engine=engine)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/ping")
async def ping():
    return {"message": PING_MESSAGE}


app.include_router(auth_router.router)
app.include_router(products.router)
app.include_router(checkout.router)
app.include_router(settings.router)
app.include_router(orders.router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
