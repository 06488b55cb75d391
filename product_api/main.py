# product_api/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from . import __version__, models  # noqa: F401  models must be imported before create_all
from .config import Settings, get_settings
from .database import build_engine, build_session_maker, create_tables
from .middleware import register_error_handlers
from .products import router as products_router

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("product_api").setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.CREATE_TABLES:
        # Development convenience; the ORM mapping is the schema.
        await create_tables(app.state.engine)
    logger.info("%s started (database dialect: %s)", settings.PROJECT_NAME, app.state.engine.dialect.name)
    try:
        yield
    finally:
        await app.state.engine.dispose()
        logger.info("%s stopped", settings.PROJECT_NAME)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="CRUD API for products",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    app.state.session_maker = build_session_maker(app.state.engine)

    register_error_handlers(app)
    # added last so it wraps the error middleware too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(products_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url=app.docs_url)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    return app


def run() -> None:
    settings = get_settings()
    # the app is built by uvicorn (and rebuilt on reload), not at import time
    uvicorn.run(
        "product_api.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
    )


if __name__ == "__main__":
    run()
