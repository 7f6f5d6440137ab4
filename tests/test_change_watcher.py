"""Tests for change_watcher module."""
import threading
import pytest

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)
from watchdog.observers.polling import PollingObserver

from firefox_bookmarks.change_watcher import BookmarkFileHandler, FileChangeWatcher


class Counter:
    def __init__(self):
        self.calls = 0
        self.event = threading.Event()

    def __call__(self):
        self.calls += 1
        self.event.set()


@pytest.fixture
def counter():
    return Counter()


class TestBookmarkFileHandler:
    def test_modified_target(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, counter)
        handler.dispatch(FileModifiedEvent(str(target)))
        assert counter.calls == 1

    def test_created_target(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, counter)
        handler.dispatch(FileCreatedEvent(str(target)))
        assert counter.calls == 1

    def test_moved_over_target(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, counter)
        handler.dispatch(FileMovedEvent(str(tmp_path / "bookmarks.json.tmp"), str(target)))
        assert counter.calls == 1

    def test_moved_away_from_target_ignored(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, counter)
        handler.dispatch(FileMovedEvent(str(target), str(tmp_path / "renamed.json")))
        assert counter.calls == 0

    def test_other_files_ignored(self, tmp_path, counter):
        handler = BookmarkFileHandler(tmp_path / "bookmarks.json", counter)
        handler.dispatch(FileModifiedEvent(str(tmp_path / "other.json")))
        assert counter.calls == 0

    def test_directory_events_ignored(self, tmp_path, counter):
        handler = BookmarkFileHandler(tmp_path, counter)
        handler.dispatch(DirModifiedEvent(str(tmp_path)))
        assert counter.calls == 0

    def test_bytes_paths(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, counter)
        handler.dispatch(FileModifiedEvent(str(target).encode()))
        assert counter.calls == 1

    def test_callback_error_does_not_escape(self, tmp_path, capsys):
        def boom():
            raise RuntimeError("boom")

        target = tmp_path / "bookmarks.json"
        handler = BookmarkFileHandler(target, boom)
        handler.dispatch(FileModifiedEvent(str(target)))
        assert "boom" in capsys.readouterr().err


class TestFileChangeWatcher:
    def test_missing_directory(self, tmp_path, counter):
        watcher = FileChangeWatcher()
        with pytest.raises(FileNotFoundError):
            watcher.subscribe(tmp_path / "missing" / "bookmarks.json", counter)

    def test_detects_change(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        target.write_text("{}")
        watcher = FileChangeWatcher(observer_factory=lambda: PollingObserver(timeout=0.1))

        handle = watcher.subscribe(target, counter)
        try:
            target.write_text('{"children": []}')
            assert counter.event.wait(timeout=10)
        finally:
            watcher.cancel(handle)

    def test_cancel_stops_observer(self, tmp_path, counter):
        target = tmp_path / "bookmarks.json"
        target.write_text("{}")
        watcher = FileChangeWatcher(observer_factory=lambda: PollingObserver(timeout=0.1))

        handle = watcher.subscribe(target, counter)
        observer = watcher._observer
        assert observer.is_alive()

        watcher.cancel(handle)
        watcher.cancel(handle)
        assert watcher._observer is None
        assert not observer.is_alive()
        assert handle.active is False
