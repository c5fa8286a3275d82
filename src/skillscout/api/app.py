"""FastAPI application factory."""

from fastapi import FastAPI

from skillscout import __version__
from skillscout.api.routers import config, corpus, query, sessions, skills
from skillscout.core.context import SharedContext


def create_app(context: SharedContext) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Skillscout API",
        description="Skill matching and progressive disclosure over HTTP",
        version=__version__,
    )
    app.state.context = context

    app.include_router(skills.router, prefix="/skills", tags=["skills"])
    app.include_router(corpus.router, prefix="/corpus", tags=["corpus"])
    app.include_router(query.router, prefix="/query", tags=["query"])
    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
    app.include_router(config.router, prefix="/config", tags=["config"])

    return app
