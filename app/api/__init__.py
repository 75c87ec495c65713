# app/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from app.api.errors import register_exception_handlers
from app.api.routers import carts, health, products
from app.data.database import init_db, make_session_factory
from app.data.seed import seed_if_empty
from app.utils.logging import get_logger
from app.utils.settings import CART_WRITE_ATTEMPTS, SEED_ON_STARTUP

logger = get_logger(__name__)


def create_app(
    engine: Engine,
    cart_write_attempts: int = CART_WRITE_ATTEMPTS,
    seed_on_startup: bool = SEED_ON_STARTUP,
) -> FastAPI:
    """
    Build the API around an engine owned by the caller.

    The engine is not disposed here; whoever created it closes it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info(f"Database ready: {engine.url.render_as_string(hide_password=True)}")
        if seed_on_startup:
            seed_if_empty(app.state.session_factory)
        yield

    app = FastAPI(title="Cart Service", version="1.0.0", lifespan=lifespan)

    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.cart_write_attempts = cart_write_attempts

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)

    return app
