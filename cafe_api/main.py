from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cafe_api.config import settings
from cafe_api.database import Base, engine
from cafe_api.exceptions import ServiceError, service_error_handler, validation_error_handler
from cafe_api.logging_config import configure_logging
from cafe_api.middleware.request_id import RequestIDMiddleware
from cafe_api.routers import auth, profile, cafes, reviews, friends, messages, notifications
from cafe_api.security import Authenticator
from cafe_api.services.blob_store import LocalBlobStore
from cafe_api.utils.logger import get_logger
import cafe_api.models  # noqa: F401  (registers tables on Base.metadata)

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=engine)

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {"docs_url": None, "redoc_url": None, "openapi_url": None}

app = FastAPI(
    title="Cafe Reviews API",
    description="Café reviews, friends, direct messages and notifications",
    version="1.0.0",
    **docs_config
)

# Trust material and blob storage are built once per process
app.state.authenticator = Authenticator.from_settings(settings)
app.state.blob_store = LocalBlobStore.from_settings(settings)

app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

logger.info(f"CORS_ORIGINS: {settings.CORS_ORIGINS}")

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (auth, profile, cafes, reviews, friends, messages, notifications):
    app.include_router(module.router, prefix="/api")

app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

@app.on_event("startup")
async def startup_event():
    """Log application startup information."""
    # Initialize database in this worker process (for Gunicorn compatibility)
    from cafe_api.database import get_engine
    get_engine()
    logger.info(f"Cafe Reviews API started ({'DEBUG' if settings.DEBUG else 'PRODUCTION'} mode)")

@app.get("/")
async def root():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "ok": True,
        "message": "Cafe Reviews API running",
        "time": datetime.now(timezone.utc).isoformat()
    }
