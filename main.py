from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.core.config import settings, validate_settings
from app.core.logging_config import setup_logging, get_logger
from app.core.backend import BackendClient, close_backend_client, get_backend_client
from app.core.exceptions import (
    InventoryPortalException,
    BackendError,
    BackendHTTPError,
    ConfigurationError,
    AuthenticationError,
    AuthorizationError,
    FormValidationError,
    NotFoundError,
    sanitize_error_message
)
from app.core.resources import ITEMS
from app.core.validation import request_errors
from app.core.view_state import FormStatus
from app.core.security_middleware import SecurityHeadersMiddleware
from app.api.v1.router import api_router

# Setup logging first (before settings validation)
setup_logging()
logger = get_logger(__name__)

READ_METHODS = ("GET", "HEAD")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("Configuration validated successfully")

        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Debug mode: {'ON' if settings.DEBUG else 'OFF'}")
        logger.info(f"Inventory backend: {settings.BACKEND_URL}")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        logger.error("Application startup failed due to configuration issues.")
        raise

    yield

    logger.info("Shutting down application")
    await close_backend_client()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Inventory management portal for university departments and offices",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
)


def status_for(exc: InventoryPortalException) -> int:
    if isinstance(exc, FormValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(exc, AuthenticationError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, AuthorizationError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, BackendHTTPError) and 400 <= exc.status_code < 500:
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, BackendError):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, ConfigurationError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(InventoryPortalException)
async def custom_exception_handler(request: Request, exc: InventoryPortalException):
    """Handle custom application exceptions."""
    status_code = status_for(exc)
    log = logger.warning if status_code < 500 else logger.error
    log(
        f"Application error: {exc.message}",
        extra={
            "error_code": exc.error_code,
            "details": exc.details,
            "path": str(request.url),
            "method": request.method,
        }
    )

    content = {
        "error": True,
        "message": exc.message,
        "error_code": exc.error_code,
        "details": exc.details if settings.DEBUG else None,
        "errors": None,
    }
    if isinstance(exc, FormValidationError):
        content["errors"] = exc.errors
        content["status"] = FormStatus.ERROR.value
    elif isinstance(exc, BackendError):
        if request.method in READ_METHODS:
            content["retry"] = True
        else:
            content["errors"] = {"submit": exc.message}
            content["status"] = FormStatus.ERROR.value
            if exc.details.get("saved_lines"):
                content["saved_lines"] = exc.details["saved_lines"]
                content["failed_lines"] = exc.details["failed_lines"]

    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report unparseable request bodies with the same field map as form validation."""
    return await custom_exception_handler(request, FormValidationError(request_errors(exc.errors())))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions."""
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "path": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": sanitize_error_message(exc),
            "error_code": "INTERNAL_ERROR",
            "details": {
                "type": type(exc).__name__,
                "message": str(exc),
            } if settings.DEBUG else None,
            "errors": None,
        }
    )


app.add_middleware(SecurityHeadersMiddleware)

allowed_origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
seen = set()
allowed_origins = [x for x in allowed_origins if not (x in seen or seen.add(x))]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if not settings.DEBUG else ["*"],
    allow_credentials=not settings.DEBUG,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


@app.get("/health")
async def health_check(client: BackendClient = Depends(get_backend_client)):
    """Health check including inventory backend reachability."""
    health_status = {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }

    if await client.ping(ITEMS[0].path):
        health_status["backend"] = "connected"
    else:
        health_status["backend"] = "disconnected"
        health_status["status"] = "degraded"

    status_code = status.HTTP_200_OK if health_status["status"] == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=health_status, status_code=status_code)
