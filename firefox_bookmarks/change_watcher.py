"""File change notifications for the bookmark file, built on watchdog.

watchdog watches directories, so each subscription schedules a
non-recursive watch on the file's parent directory and filters events
down to the one path. The observer delivers events from a single thread
in order, so a subscriber's callback never runs concurrently with itself.
"""
import os
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


ChangeCallback = Callable[[], None]


def _normalize(path: Any) -> str:
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    return os.path.abspath(str(path))


class BookmarkFileHandler(FileSystemEventHandler):
    """Calls back when one specific file is written, created or replaced."""

    def __init__(self, path: Path, callback: ChangeCallback):
        self.path = _normalize(path)
        self.callback = callback

    def _fire(self, event_path: Any) -> None:
        if event_path and _normalize(event_path) == self.path:
            try:
                self.callback()
            except Exception as e:
                print(f"[ChangeWatcher] Callback failed for {self.path}: {e}", file=sys.stderr)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._fire(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._fire(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors and Firefox replace files by renaming a temp file over them
        if not event.is_directory:
            self._fire(getattr(event, "dest_path", None))


@dataclass
class WatchHandle:
    """Subscription handle returned by FileChangeWatcher.subscribe."""
    path: Path
    watch: Any
    active: bool = True


class FileChangeWatcher:
    """Runs one watchdog observer shared by all subscriptions.

    The observer thread starts with the first subscription and stops when
    the last one is cancelled.
    """

    def __init__(self, observer_factory: Callable[[], Any] = Observer):
        self.observer_factory = observer_factory
        self._observer: Optional[Any] = None
        self._subscriptions = 0
        self._lock = threading.Lock()

    def _ensure_observer(self) -> Any:
        if self._observer is None:
            observer = self.observer_factory()
            observer.daemon = True
            observer.start()
            self._observer = observer
        return self._observer

    def _stop_observer(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            if self._observer.is_alive():
                self._observer.join(timeout=5)
            self._observer = None

    def subscribe(self, path: Path, callback: ChangeCallback) -> WatchHandle:
        """Watch a file for changes.

        Args:
            path: File to watch; its directory must exist
            callback: Called with no arguments on every change

        Returns:
            Handle to pass to cancel()

        Raises:
            FileNotFoundError: If the file's directory doesn't exist
            OSError: If the platform watch can't be created
        """
        path = Path(path)
        directory = path.parent
        if not directory.is_dir():
            raise FileNotFoundError(f"Cannot watch {path}: {directory} doesn't exist")

        with self._lock:
            observer = self._ensure_observer()
            try:
                watch = observer.schedule(
                    BookmarkFileHandler(path, callback), str(directory), recursive=False
                )
            except OSError:
                if self._subscriptions == 0:
                    self._stop_observer()
                raise
            self._subscriptions += 1

        return WatchHandle(path=path, watch=watch)

    def cancel(self, handle: WatchHandle) -> None:
        """Stop a subscription. Cancelling twice is a no-op."""
        with self._lock:
            if not handle.active:
                return
            handle.active = False

            if self._observer is not None:
                try:
                    self._observer.unschedule(handle.watch)
                except KeyError:
                    pass

            self._subscriptions -= 1
            if self._subscriptions <= 0:
                self._subscriptions = 0
                self._stop_observer()
