# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import OperationalError
import uvicorn

from app.api import include_routers
from app.data.database import Base, engine
from app.domain.errors import StoreError, Unavailable
from app.utils.settings import SEED_ON_STARTUP
from app.utils.logging import get_logger

# IMPORT WSZYSTKICH MODELI (PRZED CREATE_ALL)
from app.data import models  # noqa: F401

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if SEED_ON_STARTUP:
        from app.data.seed import seed

        seed()


def _error_response(exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    include_routers(app)

    @app.exception_handler(RedisError)
    async def redis_unavailable(request: Request, exc: RedisError):
        logger.error(f"Cart store unavailable on {request.method} {request.url.path}: {exc}")
        return _error_response(Unavailable("Cart store unavailable"))

    @app.exception_handler(OperationalError)
    async def database_unavailable(request: Request, exc: OperationalError):
        logger.error(f"Database unavailable on {request.method} {request.url.path}: {exc}")
        return _error_response(Unavailable("Database unavailable"))

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
