"""Entry point for the Startups game server"""

import logging
import os

import uvicorn

from .ws.server import app

logger = logging.getLogger(__name__)


def run():
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    logger.info(f"Starting Startups server on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
