# main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.categories import router as categories_router
from app.api.products import router as products_router
from app.api.reddit_reviews import router as reddit_reviews_router
from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errors import register_error_handlers
from app.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database.create_all()
        if not settings.ADMIN_API_TOKEN:
            logger.warning("ADMIN_API_TOKEN is not set: admin routes are open")
        yield
        app.state.database.dispose()

    app = FastAPI(
        title="Reddit Reviews API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL)

    # Front-end (Next.js) origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(products_router)
    app.include_router(categories_router)
    app.include_router(reddit_reviews_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
