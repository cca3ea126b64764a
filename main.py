from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from framework.config import settings
from framework.database.manager import DatabaseManager
from framework.middleware.logging_md import LoggingMiddleware
from framework.middleware.security_headers import HSTSMiddleware
from framework.logging.logger import LogConfig
from framework.exceptions.handler import register_exception_handlers
from apps.identity.api.router import router as identity_router
from apps.catalog.api.router import router as catalog_router
from apps.inventory.api.router import router as inventory_router

# Initialize logging configuration
LogConfig.setup_logging()
logger.info("Added configuration values.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = DatabaseManager.get_instance()
    await manager.db.connect()
    logger.info("Database connection verified.")
    yield
    await manager.db.disconnect()
    DatabaseManager.reset_instance()
    logger.info(f"{settings.APP_NAME} is shutting down.")


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} Doc - V1",
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Register global exception handlers
    register_exception_handlers(app)

    logger.info("Added connection string.")
    logger.info("Set the JWT configuration.")

    app.add_middleware(LoggingMiddleware)

    if settings.is_development:
        logger.info("In Development environment.")
    else:
        logger.info(f"In {settings.APP_ENV} environment.")
        app.add_middleware(HSTSMiddleware, max_age=settings.HSTS_MAX_AGE)

    # Outermost: CORS answers preflight requests before anything else runs
    logger.info("Enable CORS Origin.")
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ALLOW_ORIGIN_REGEX,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount routers (prefix from config)
    app.include_router(identity_router, prefix=settings.API_V1_AUTH_PREFIX, tags=["Identity & Tenant"])
    app.include_router(catalog_router, prefix=settings.API_V1_CATALOG_PREFIX, tags=["Catalog"])
    app.include_router(inventory_router, prefix=settings.API_V1_INVENTORY_PREFIX, tags=["Inventory"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
