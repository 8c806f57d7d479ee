"""File Watcher: polls the backing file and reloads the store on external edits.

Invariants:
    - A reload swaps the store only after a successful parse
    - A failed reload is logged and the previous data keeps serving
    - on_reload runs after every successful reload (route table regeneration)
    - The loop never exits on a reload failure; only cancellation stops it

Design Decisions:
    - Polling on (mtime_ns, size), no OS notification dependency
    - File read runs in a worker thread; parse + swap run on the event loop
"""

import asyncio
import logging
from collections.abc import Callable

from mockapi.core.errors import DataFileError
from mockapi.infrastructure.document_store import DocumentStore

logger = logging.getLogger(__name__)

_NEVER = object()


class FileWatcher:
    """Background task that keeps a DocumentStore in sync with its file."""

    def __init__(
        self,
        store: DocumentStore,
        on_reload: Callable[[], None] | None = None,
        interval: float = 1.0,
    ):
        self.store = store
        self.on_reload = on_reload
        self.interval = interval
        self._task: asyncio.Task | None = None
        self._failed_stamp: object = _NEVER

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="mockapi-watcher")
            logger.info(
                f"Watching {self.store.path} for changes",
                extra={"data_file": str(self.store.path)},
            )

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def check(self) -> bool:
        """Reload once if the file changed. Returns True on a successful reload."""
        stamp = self.store.file_stamp()
        if stamp == self._failed_stamp or not self.store.changed_on_disk():
            return False
        try:
            text, stamp = await asyncio.to_thread(self.store.read_file)
            self.store.apply(text, stamp)
        except DataFileError as e:
            # Same broken content is reported once, not on every poll
            self._failed_stamp = stamp
            logger.warning(
                f"Failed to reload data: {e.message}",
                extra={"error_code": e.code, "data_file": str(self.store.path)},
            )
            return False
        self._failed_stamp = _NEVER
        logger.info("Data reloaded", extra={"data_file": str(self.store.path)})
        if self.on_reload:
            self.on_reload()
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.check()
