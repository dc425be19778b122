from typing import Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn

from app.core.config import Settings, get_settings
from app.core.database import create_engine_from_settings, create_session_maker, create_db_and_tables, close_db
from app.core.logging import setup_logging
from app.core.security import Credential
from app.middleware.logging_middleware import LoggingMiddleware
from app.controllers import auth_controller, product_controller
from app.services.auth_service import AuthService

# Register every table with SQLModel.metadata
from app import models  # noqa: F401

import structlog

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info("Application startup", environment=settings.environment)

    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set; signing tokens with the insecure default secret")

    credential = Credential.from_plaintext(settings.admin_username, settings.admin_password)
    app.state.auth_service = AuthService(credential, settings)

    engine = create_engine_from_settings(settings)
    try:
        await create_db_and_tables(engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        await close_db(engine)
        raise

    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)

    yield

    logger.info("Application shutdown")
    await close_db(engine)
    logger.info("Database connections closed")


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(
        "HTTP Exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        errors=errors,
        path=request.url.path,
        method=request.method
    )
    fields = sorted({".".join(str(p) for p in e.get("loc", ())[1:]) for e in errors} - {""})
    message = "Invalid request"
    if fields:
        message = f"Invalid or missing fields: {', '.join(fields)}"
    return _error_response(422, message)


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled Exception",
        error_type=type(exc).__name__,
        error=str(exc),
        path=request.url.path,
        method=request.method
    )
    return _error_response(500, "Internal server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    application = FastAPI(
        title="Product Catalog API",
        description="Token-protected CRUD service for products",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "local" else None,
        redoc_url="/redoc" if settings.environment == "local" else None,
    )
    application.state.settings = settings

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(LoggingMiddleware)

    application.include_router(auth_controller.router)
    application.include_router(product_controller.router)

    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(HTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    @application.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.environment,
        }

    return application


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "local",
        log_config=None
    )
