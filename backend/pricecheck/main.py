"""
FastAPI application entry point for the PriceCheck API.

``create_app`` wires settings, the database engine and session factory,
the refresh token store, error handlers and routers into one application.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from pricecheck.config import Settings, get_settings
from pricecheck.database import create_db_engine, create_session_factory, init_db
from pricecheck.errors import PriceCheckError
from pricecheck.routers.auth import router as auth_router
from pricecheck.routers.users import router as users_router
from pricecheck.routers.products import router as products_router
from pricecheck.routers.supermarkets import router as supermarkets_router
from pricecheck.routers.inventory import router as inventory_router
from pricecheck.routers.shopping_list import router as shopping_list_router
from pricecheck.services.sessions import RefreshTokenStore

logger = logging.getLogger(__name__)

APP_TITLE = "PriceCheck API"
APP_VERSION = "1.0.0"


def _log_registered_routes(app: FastAPI):
    logger.info("Registered routes:")
    for route in app.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods):
                logger.info(f"  {method} {route.path}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and refresh token store on startup."""
    settings: Settings = app.state.settings
    logger.info("Initializing database...")
    init_db(app.state.engine, app.state.session_factory, settings)
    logger.info("Connecting refresh token store...")
    await app.state.token_store.connect(settings.redis_url)
    _log_registered_routes(app)
    yield
    logger.info("Shutting down...")
    await app.state.token_store.disconnect()
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=APP_TITLE,
        description="Find the cheapest supermarket offers for a shopping list in your city",
        version=APP_VERSION,
        docs_url="/api-docs",
        lifespan=lifespan,
    )

    engine = create_db_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.token_store = RefreshTokenStore()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.exception_handler(PriceCheckError)
    async def pricecheck_error_handler(request: Request, exc: PriceCheckError):
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    # Include routers
    for router in (
        auth_router,
        users_router,
        products_router,
        supermarkets_router,
        inventory_router,
        shopping_list_router,
    ):
        app.include_router(router, prefix=settings.api_prefix)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": APP_TITLE,
            "version": APP_VERSION,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pricecheck.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
