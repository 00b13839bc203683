"""
Main FastAPI application for the Ponto Geo attendance service
"""
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
import logging
import logging.config

from ponto import __version__
from ponto.config import settings
from ponto.database import engine, Base
from ponto.exceptions import PontoError, Unauthorized
from ponto import models  # noqa: F401  registers the tables on Base.metadata

from ponto.api import points, absences, devices, audit, company_settings, profiles, face

logging.config.dictConfig(settings.get_logging_config())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ponto Geo",
    description="Geofence-validated time-and-attendance registration and approval API",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_tags=[
        {"name": "points", "description": "Point registration and approval"},
        {"name": "absences", "description": "Absence requests"},
        {"name": "devices", "description": "Device authorization"},
        {"name": "audit", "description": "Audit trail"},
        {"name": "settings", "description": "Company settings (geofence)"},
        {"name": "profiles", "description": "User profiles"},
        {"name": "face", "description": "Face verification"},
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


# Error handlers
@app.exception_handler(PontoError)
async def ponto_error_handler(request: Request, exc: PontoError):
    """Map domain errors onto their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return error_response(exc.status_code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are 400 with a readable message"""
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return error_response(400, f"Invalid request: {problems}")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"Internal server error on {request.url.path}: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
            "version": __version__
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


for router in (points, absences, devices, audit, company_settings, profiles, face):
    app.include_router(router.router, prefix=settings.API_PREFIX)


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info("Starting Ponto Geo")

    if settings.is_production:
        missing = settings.validate_required_settings()
        if missing:
            logger.warning(f"Missing required settings: {', '.join(missing)}")

    # In production, use Alembic migrations instead
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Ponto Geo")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ponto.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
