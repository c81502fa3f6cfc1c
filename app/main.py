"""
CryptoRamp — FastAPI application entry point.

Configures logging, the app, middleware and error handlers, and
registers all API routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.api import admin, auth, config, crypto, customers, kyc, quotes, transactions, webhooks
from app.core.exceptions import AppError, ConfigurationError
from app.services.exchange_client import close_exchange_client

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    from app.database import engine
    from app.redis_client import redis

    missing = settings.missing_required()
    if missing:
        logger.warning("Missing required settings: %s", ", ".join(missing))
        if settings.is_production:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    yield

    await close_exchange_client()
    await engine.dispose()
    await redis.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Fiat-to-crypto onramp and offramp widget backend.",
    version="0.1.0",
    lifespan=lifespan,
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# --- Routers ---
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(config.router, prefix="/api/config", tags=["Config"])
app.include_router(crypto.router, prefix="/api/crypto", tags=["Catalog"])
app.include_router(quotes.router, prefix="/api/quotes", tags=["Quotes"])
app.include_router(transactions.router, prefix="/api/transactions", tags=["Transactions"])
app.include_router(webhooks.router, prefix="/api/webhooks", tags=["Webhooks"])
app.include_router(customers.router, prefix="/api/customers", tags=["Customers"])
app.include_router(kyc.router, prefix="/api/kyc", tags=["KYC"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "0.1.0",
    }
