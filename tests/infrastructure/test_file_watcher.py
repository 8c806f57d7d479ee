"""File Watcher: tests for reload on external edits.

Invariants verified:
    - A valid edit swaps the store and calls on_reload
    - An invalid edit keeps the previous data and is reported once
    - No change → no reload
    - start/stop manage a single background task
"""

import asyncio
import json
import logging

import pytest

from mockapi.infrastructure.document_store import DocumentStore
from mockapi.infrastructure.file_watcher import FileWatcher


@pytest.fixture
def store(data_file):
    s = DocumentStore(data_file)
    s.load()
    return s


async def test_check_without_change_does_nothing(store):
    calls = []
    watcher = FileWatcher(store, on_reload=lambda: calls.append(1))
    assert await watcher.check() is False
    assert calls == []


async def test_check_reloads_valid_edit(store, data_file):
    calls = []
    watcher = FileWatcher(store, on_reload=lambda: calls.append(1))
    data_file.write_text(
        json.dumps({"users": [{"id": 9, "name": "Zed"}], "tags": []}),
        encoding="utf-8",
    )

    assert await watcher.check() is True
    assert store.resources() == ["users", "tags"]
    assert store.get("users") == [{"id": 9, "name": "Zed"}]
    assert calls == [1]


async def test_check_keeps_data_on_invalid_edit(store, data_file, caplog):
    watcher = FileWatcher(store)
    data_file.write_text("{ definitely not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        assert await watcher.check() is False
        assert await watcher.check() is False

    assert len(store.get("users")) == 3
    failures = [r for r in caplog.records if "Failed to reload" in r.getMessage()]
    assert len(failures) == 1


async def test_check_recovers_after_invalid_edit(store, data_file):
    watcher = FileWatcher(store)
    data_file.write_text("{ nope", encoding="utf-8")
    await watcher.check()

    data_file.write_text(json.dumps({"users": []}), encoding="utf-8")
    assert await watcher.check() is True
    assert store.get("users") == []


async def test_deleted_file_keeps_data(store, data_file):
    watcher = FileWatcher(store)
    data_file.unlink()
    assert await watcher.check() is False
    assert len(store.get("users")) == 3


async def test_background_task_picks_up_edit(store, data_file):
    reloaded = asyncio.Event()
    watcher = FileWatcher(store, on_reload=reloaded.set, interval=0.01)
    watcher.start()
    try:
        data_file.write_text(json.dumps({"posts": []}), encoding="utf-8")
        await asyncio.wait_for(reloaded.wait(), timeout=2)
    finally:
        await watcher.stop()
    assert store.resources() == ["posts"]


async def test_stop_without_start_is_noop(store):
    await FileWatcher(store).stop()
