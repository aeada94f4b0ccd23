from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import health, posts, users
from core.config import Settings, get_settings
from core.database import configure_database, dispose_database, init_models
from core.errors import register_error_handlers
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware

log = get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application: logging, database, error handlers, routers."""
    settings = settings or get_settings()

    configure_logging(
        level=settings.LOG_LEVEL,
        json_logs=settings.LOG_JSON,
        log_sql=settings.LOG_SQL,
        version=settings.APP_VERSION,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("startup", env=settings.APP_ENV)
        configure_database(settings.DATABASE_URL, echo=settings.LOG_SQL)
        try:
            await init_models()
        except Exception as e:
            log.warning("database_unavailable", error=str(e), message="App starting without database")

        yield

        log.info("shutdown")
        await dispose_database()

    app = FastAPI(
        title="Starter API",
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_prod else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    register_error_handlers(app)

    # Middleware (order matters: last added = first executed)
    app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=settings.SLOW_REQUEST_MS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(posts.router, prefix="/api/posts", tags=["posts"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
