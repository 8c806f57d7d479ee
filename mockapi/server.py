"""Server Lifecycle: binds the app to a socket with uvicorn.

Invariants:
    - The app (and therefore the data file) is built before any socket is bound
    - close() stops accepting connections; in-flight requests finish
    - SIGINT/SIGTERM trigger the same orderly shutdown (uvicorn signal capture)
"""

import logging

import uvicorn

from mockapi.config import Settings
from mockapi.main import create_app

logger = logging.getLogger(__name__)


class MockApiServer:
    """listen/close wrapper around a uvicorn server for one data file."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.app = create_app(settings)
        self._server = uvicorn.Server(uvicorn.Config(
            self.app,
            host=settings.host,
            port=settings.port,
            log_config=None,
            access_log=False,
            lifespan="on",
        ))

    def listen(self) -> None:
        """Serve until closed or interrupted. Blocks."""
        self._server.run()

    def close(self) -> None:
        logger.info("Closing server")
        self._server.should_exit = True
