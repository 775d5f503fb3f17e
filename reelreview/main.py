from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from typing import Optional
from datetime import datetime, timezone
from reelreview.exceptions import CatalogError, Conflict, PermissionDenied, ValidationFailure
from reelreview.routes import auth, movies, reviews, users, watchlist
from reelreview.seed import seed as seed_catalog
from reelreview.storage import EntityStore, build_storage
import os
import logging

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Status codes for catalog errors
ERROR_STATUS = {
    ValidationFailure: 400,
    PermissionDenied: 403,
    Conflict: 409,
}


def _cors_origins() -> list:
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
    ]
    if production_url := os.getenv("FRONTEND_URL"):
        allowed_origins.append(production_url)
    return allowed_origins


def create_app(storage: Optional[EntityStore] = None, seed_data: Optional[bool] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        storage: Entity store to serve; built from STORAGE_BACKEND at startup when omitted
        seed_data: Seed default user and movies at startup; defaults to SEED_DATA env
    """
    if seed_data is None:
        seed_data = os.getenv("SEED_DATA", "true").lower() == "true"

    # ============================================
    # Application Lifespan Management
    # ============================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
        - Build the entity store (once per process) unless one was injected
        - Seed the catalog when enabled
        """
        logger.info("=" * 60)
        logger.info("ReelReview API Starting...")
        logger.info(f"   Environment: {os.getenv('ENVIRONMENT', 'development')}")

        if app.state.storage is None:
            app.state.storage = build_storage()
        logger.info(f"   Storage: {type(app.state.storage).__name__}")

        if seed_data:
            seed_catalog(app.state.storage)
        logger.info("=" * 60)

        yield

        logger.info("ReelReview API Shutting Down...")

    app = FastAPI(
        title="ReelReview API",
        description="Movie discovery, star-rated reviews and watchlists",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.storage = storage

    # ============================================
    # Security Configuration
    # ============================================

    allowed_origins = _cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Trusted Hosts - Production only
    if os.getenv("ENVIRONMENT") == "production":
        if trusted_hosts := [h for h in os.getenv("TRUSTED_HOSTS", "").split(",") if h]:
            app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)

        # XSS Protection & Clickjacking
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    # ============================================
    # Exception Handlers
    # ============================================

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError):
        """Map recoverable catalog errors onto HTTP status codes"""
        status_code = ERROR_STATUS.get(type(exc), 400)
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.detail}")
        return JSONResponse(status_code=status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Catch-all handler so unexpected errors are logged"""
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    # ============================================
    # Routes
    # ============================================

    @app.get("/", tags=["Health"])
    async def root():
        """Basic health check"""
        return {
            "message": "ReelReview API",
            "version": API_VERSION,
            "status": "healthy",
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check for monitoring"""
        return {
            "status": "healthy",
            "api_version": API_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "storage": type(app.state.storage).__name__ if app.state.storage else None
        }

    app.include_router(auth.router)
    app.include_router(movies.router)
    app.include_router(reviews.router)
    app.include_router(users.router)
    app.include_router(watchlist.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
