from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from vidshare.core.config import AppSettings
from vidshare.core.exceptions import AppError
from vidshare.api import api_router
from vidshare.db.database import init_models


def get_app_settings() -> AppSettings:
    try:
        return AppSettings()
    except Exception as e:
        logger.error(f"Error loading settings: {e}")
        raise

def setup_logging(settings: AppSettings):
    logger.add(
        settings.log_file,
        level=settings.app_log_level.value.upper(),
        rotation=settings.log_rotation,
        compression=settings.log_compression.value,
        format=settings.log_format,
    )

async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{exc.__class__.__name__} on {request.method} {request.url.path}: {exc.message}")
    content = {"detail": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)

async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

def create_app():
    settings = get_app_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{settings.app_name} starting...")
        if settings.db_create_tables:
            await init_models()
        yield
        logger.info(f"{settings.app_name} shutting down...")

    app = FastAPI(
        title=settings.app_name,
        description="API for the video sharing application",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}
    app.include_router(api_router)

    return app

app = create_app()

if __name__ == "__main__":
    settings = get_app_settings()
    uvicorn.run(
        "vidshare.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
    )
