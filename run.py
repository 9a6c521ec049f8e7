"""Entry point for serving the TaskForge API.

Host and port are read from the ``API_HOST`` and ``API_PORT``
environment variables.  Other settings (database path, log level,
fallback user id) are described in ``taskforge_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from taskforge_api.app.core.config import settings


async def run_api() -> None:
    """Start the API using Uvicorn."""
    api_host = os.getenv("API_HOST", "0.0.0.0")
    api_port = int(os.getenv("API_PORT", "8000"))
    config = Config(
        app="taskforge_api.app.main:app",
        host=api_host,
        port=api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
