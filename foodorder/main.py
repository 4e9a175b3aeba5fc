# foodorder/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodorder.api.errors import register_error_handlers
from foodorder.api.routers import cart, health, order
from foodorder.data.database import Base, engine
from foodorder.utils.logging import configure_logging, get_logger
from foodorder.utils.settings import CATALOG_SERVICE_URL, ENVIRONMENT, FRONTEND_URL

# register every model in Base.metadata before create_all
from foodorder.data import models  # noqa: F401

logger = get_logger(__name__)


def check_config(environment: str = ENVIRONMENT, catalog_url: str = CATALOG_SERVICE_URL) -> None:
    # without a catalog, order prices come from the client
    if environment == "production" and not catalog_url:
        raise RuntimeError("CATALOG_SERVICE_URL must be set in production")


def init_db() -> None:
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    check_config()
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Food Order Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_URL],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(cart.router)
    app.include_router(order.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=4000)
