from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.config import settings
from app.api.v1.router import api_router
from app.core.exceptions import HRMError
from app.database import init_db, async_session_factory


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    - Create database tables that do not exist yet
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    await init_db()
    logger.info(f"Identity provider: {settings.IDENTITY_PROVIDER}"
                f"{' (fallback to stub)' if settings.IDENTITY_FALLBACK_TO_STUB else ''}")

    yield

    # Shutdown
    logger.info("Shutting down...")


# OpenAPI Tags with detailed descriptions
OPENAPI_TAGS = [
    {"name": "Authentication", "description": "Profile of the user behind the food-ordering token"},
    {"name": "Employees", "description": "Employee directory, account linking and salary history"},
    {"name": "Benefits", "description": "Monthly benefit assignments"},
    {"name": "Salary", "description": "Salary records, lifecycle and monthly payroll generation"},
    {"name": "Health", "description": "Service health"},
]

FULL_API_DESCRIPTION = """
## Restaurant HRM API

Staff records and monthly payroll for a restaurant.

### Salary lifecycle

`PENDING` -> `APPROVED` -> `PAID`, with `CANCELLED` reachable from any open
status. `PAID` and `CANCELLED` records cannot be edited.

### Authentication

Tokens are issued by the food-ordering service.
Include token in Authorization header: `Bearer <token>`.
Reads need any valid user; changes need the `ADMIN` role.

### Error Codes

| Code | Description |
|------|-------------|
| 400 | Bad Request - Invalid reference or status transition |
| 401 | Unauthorized - Invalid/expired token or unknown user |
| 403 | Forbidden - Role not allowed |
| 404 | Not Found - Resource doesn't exist |
| 409 | Conflict - Duplicate resource |
| 422 | Unprocessable Entity - Validation failed |
| 503 | Identity service unavailable |
"""

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=FULL_API_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.exception_handler(HRMError)
async def hrm_error_handler(request: Request, exc: HRMError):
    """Render service-layer errors with their own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors and return a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")

    error_detail = {
        "detail": "Internal server error",
        "type": type(exc).__name__,
        "path": str(request.url.path),
        "method": request.method,
    }
    if settings.DEBUG:
        error_detail["error"] = str(exc)

    return JSONResponse(status_code=500, content=error_detail)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint with database validation."""
    health_status = {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": "unknown"
        }
    }

    # Check database connectivity
    try:
        async with async_session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            health_status["checks"]["database"] = "connected"
    except Exception as e:
        logger.warning(f"Health check database error: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = f"error: {str(e)}"

    # Return 503 if unhealthy
    if health_status["status"] == "unhealthy":
        return JSONResponse(status_code=503, content=health_status)

    return health_status


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }
