"""
Kitchen API

Order management for franchise stores and the central kitchen: orders,
shipments, catalog, stores and users behind one FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.exceptions import register_exception_handlers
from core.logger import setup_service_logger

from . import dependencies
from .catalog_service.routes import categories_router, products_router
from .dependencies import ServiceFactory
from .order_service.routes import router as orders_router
from .shipment_service.routes import router as shipments_router
from .store_service.routes import router as stores_router
from .user_service.routes import router as users_router

settings = get_settings()
logger = setup_service_logger(settings.service_name, settings.logging)

ROUTERS = [
    orders_router,
    shipments_router,
    categories_router,
    products_router,
    stores_router,
    users_router,
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info(f"Starting {settings.service_name} on port {settings.port}")

    factory = ServiceFactory(settings)
    await factory.initialize()
    dependencies.set_factory(factory)

    yield

    logger.info(f"Shutting down {settings.service_name}")
    dependencies.set_factory(None)
    await factory.close()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the application; tests pass ``use_lifespan=False`` and inject services"""
    application = FastAPI(
        title="Kitchen API",
        description="Central kitchen and franchise order management",
        version=settings.version,
        lifespan=lifespan if use_lifespan else None,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    for router in ROUTERS:
        application.include_router(router)

    @application.get("/health", tags=["Health"])
    async def health_check():
        """Liveness plus database connectivity"""
        database = "disconnected"
        if dependencies.factory and await dependencies.factory.database_healthy():
            database = "connected"
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": settings.version,
            "database": database,
        }

    return application


app = create_app()


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "services.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
