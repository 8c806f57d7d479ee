"""mockapi: FastAPI application factory.

Invariants:
    - The data file is loaded eagerly in create_app(): an invalid file raises
      DataFileError and no app (and no server) is created
    - One DocumentStore + ResourceRouter per app, held on app.state
    - The watcher runs only between lifespan startup and shutdown
    - CORS is registered only when settings.cors is true

Design Decisions:
    - Factory over a module-level app: the data file comes from the launcher
    - Lifespan owns the background watcher and the startup resource listing
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mockapi import __version__
from mockapi.api.cors import register_cors
from mockapi.api.error_handlers import register_error_handlers
from mockapi.api.routes import resources
from mockapi.config import Settings, get_settings
from mockapi.infrastructure.document_store import DocumentStore
from mockapi.infrastructure.file_watcher import FileWatcher
from mockapi.services.resource_router import ResourceRouter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    router: ResourceRouter = app.state.resource_router
    logger.info(f"Mock API running at {settings.base_url}")
    for name in router.resources():
        logger.info(f"  {settings.base_url}/{name}", extra={"resource": name})

    watcher: FileWatcher | None = None
    if settings.watch:
        watcher = FileWatcher(
            app.state.store, on_reload=router.rebuild,
            interval=settings.watch_interval,
        )
        watcher.start()
    app.state.watcher = watcher
    yield
    if watcher is not None:
        await watcher.stop()
    logger.info("Mock API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app for one data file. Raises DataFileError."""
    settings = settings or get_settings()
    store = DocumentStore(settings.data_file, readonly=settings.readonly)
    store.load()

    app = FastAPI(
        title="mockapi", version=__version__, lifespan=lifespan,
        docs_url=None, redoc_url=None, openapi_url=None,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.resource_router = ResourceRouter(store, readonly=settings.readonly)
    app.state.watcher = None

    if settings.cors:
        register_cors(app)
    register_error_handlers(app)
    app.include_router(resources.router)
    return app
