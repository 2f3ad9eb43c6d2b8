"""FastAPI application: lifecycle, routes, studio session."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from medisocial.models.db_models import create_tables, dispose_db, init_db
from medisocial.routes import library_router, post_router, rts_router, session_router, tools_router
from medisocial.services import GeminiService, PersistenceStore, PubMedService, SqlKeyValueMedium
from medisocial.studio import Studio
from medisocial.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def build_default_studio() -> Studio:
    """Studio over Gemini, PubMed and the SQL key-value medium."""
    factory = init_db()
    await create_tables()
    store = PersistenceStore(SqlKeyValueMedium(factory))
    return Studio(GeminiService(), store, PubMedService())


def create_app(studio: Studio | None = None) -> FastAPI:
    """Build the app. Pass a studio to run against fakes (tests); otherwise the default one is built at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: logging, storage, studio load. Shutdown: wait for pending images, close DB."""
        setup_logging()
        session = studio or await build_default_studio()
        await session.start()
        app.state.studio = session
        yield
        await session.shutdown()
        if studio is None:
            await dispose_db()

    app = FastAPI(
        title="MediSocial Studio",
        description="AI-assisted medical content: Instagram posts, SEO articles, infographics and conversion copy",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(post_router)
    app.include_router(tools_router)
    app.include_router(library_router)
    app.include_router(rts_router)
    app.include_router(session_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
