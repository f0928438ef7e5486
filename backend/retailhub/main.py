"""
RetailHub Backend: stock control for a chain of outlets and one warehouse.

ARCHITECTURE:
- FastAPI Backend: catalog, batches, admission, inventory, transfers
- SQLite DB (or any SQLAlchemy URL): source of truth for all state
- Web dashboard and barcode scanners talk to the same JSON API

STOCK MODEL:
- A batch is a purchase lot; its units are admitted one barcode at a time
- Every admitted unit is an inventory record located at the warehouse
- Transfers move units between stores through an in-transit state
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from retailhub.api.routes import auth, stores, fields, categories, products, batches, inventory, dispatches
from retailhub.core.config import settings
from retailhub.core.exceptions import RetailHubError, to_http
from retailhub.db.init_db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    1. Configure logging
    2. Initialize database tables (and the first super_admin)
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    print("[*] Initializing database...")
    init_db()
    print("[OK] Database initialized")
    yield


app = FastAPI(
    title="RetailHub API",
    description="Catalog, batch admission, inventory and store transfers.",
    version="0.1.0",
    lifespan=lifespan,
)


# SECURITY: Trust only specific hosts
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# SECURITY: Restrict CORS to specific methods and headers (not wildcards)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
    ],
    max_age=600,  # Cache preflight for 10 minutes
    expose_headers=["Content-Type"],
)


@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.SECURE_COOKIES:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@app.exception_handler(RetailHubError)
async def retailhub_error_handler(request: Request, exc: RetailHubError):
    """Domain errors raised in services become JSON errors with a matching status."""
    http_error = to_http(exc)
    if http_error.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=http_error.status_code, content={"detail": http_error.detail})


app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(stores.router, prefix="/stores", tags=["stores"])
app.include_router(fields.router, prefix="/fields", tags=["fields"])
app.include_router(categories.router, prefix="/categories", tags=["categories"])
app.include_router(products.router, prefix="/products", tags=["products"])
app.include_router(batches.router, prefix="/batches", tags=["batches"])
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
app.include_router(dispatches.router, prefix="/dispatches", tags=["dispatches"])


@app.get("/health")
def health():
    return {"status": "ok"}
