from contextlib import asynccontextmanager

from fastapi import FastAPI

from auth import router as auth_router
from core.db import Database
from core.errors import install_exception_handlers
from core.log import configure_logging
from core.middleware import install_middleware
from posts import router as posts_router
from stars import router as stars_router
from store import Store


def create_app(*, store: Store | None = None) -> FastAPI:
    """
    Build the API app. Passing a prebuilt `store` skips the database pool
    entirely (used by tests).
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is not None:
            yield
            return

        # One pool and one Store per process, built before serving.
        db = Database()
        await db.connect()
        app.state.store = Store.build(db)
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(title="starboard-api", lifespan=lifespan)
    if store is not None:
        app.state.store = store

    install_middleware(app)
    install_exception_handlers(app)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(auth_router.private_router, tags=["auth"])
    app.include_router(posts_router.router, tags=["posts"])
    app.include_router(posts_router.private_router, tags=["posts"])
    app.include_router(stars_router.private_router, tags=["stars"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
