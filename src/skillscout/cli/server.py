"""Server CLI command for the HTTP API."""

import asyncio
import logging

import uvicorn

from skillscout.api import create_app
from skillscout.cli.skills import build_context
from skillscout.utils.config import Config
from skillscout.utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def _run_api(config: Config, host: str, port: int) -> None:
    """Run the HTTP API server until it is stopped."""
    context = build_context(config)
    setup_logging(config, console_output=True)

    app = create_app(context)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port))
    logger.info(f"Serving {len(context.corpus)} skills on http://{host}:{port}")
    await server.serve()


def server_command(
    config: Config, host: str | None = None, port: int | None = None
) -> None:
    """Start the API server."""
    asyncio.run(_run_api(config, host or config.api.host, port or config.api.port))
