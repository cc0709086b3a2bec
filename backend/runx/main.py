"""RunX Store API: application assembly.

Invariants:
    - Routers are listed explicitly in ROUTERS; nothing is auto-discovered
    - The store engine exists only between lifespan startup and shutdown
    - Error handlers are registered last, after every router is mounted
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from runx import __version__
from runx.api.error_handlers import register_error_handlers
from runx.api.routes import (
    accounts, cart, health, orders, payments, products, two_factor,
)
from runx.config import get_settings
from runx.infrastructure.database import close_db, init_db
from runx.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    accounts.router,
    products.router,
    cart.router,
    orders.router,
    two_factor.router,
    payments.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(
        "RunX API ready",
        extra={"mode": settings.order_placement_mode.value},
    )
    try:
        yield
    finally:
        await close_db()
        logger.info("RunX API stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title="RunX Store API", version=__version__, lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in ROUTERS:
        application.include_router(router)
    register_error_handlers(application)
    return application


app = create_app()
