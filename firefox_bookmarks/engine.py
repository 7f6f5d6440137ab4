"""Bookmark index engine.

The engine owns the flat bookmark list for one bookmark file, keeps it in
sync with the file through a change watcher, and answers search queries.
Errors never propagate out of the engine: they are reported to the
notifier and turned into ``False``/``None`` results.
"""
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from firefox_bookmarks.bookmarks_reader import Bookmark, read_bookmarks
from firefox_bookmarks.bookmarks_source import resolve_bookmark_file
from firefox_bookmarks.config import Config
from firefox_bookmarks.errors import BookmarksError, BookmarkSourceError
from firefox_bookmarks.launcher import BrowserLauncher
from firefox_bookmarks.notifications import Notifier, StderrNotifier
from firefox_bookmarks.search import KeywordSearchEngine, SearchEngine, SearchResult


ICON_NAME = "firefox"


class EngineState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    DISPOSED = "disposed"


class ChangeWatcher(Protocol):
    """File change subscription source (see change_watcher.FileChangeWatcher)."""

    def subscribe(self, path: Path, callback: Any) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


@dataclass(frozen=True)
class ResultMeta:
    """Display metadata for a search result."""
    display_name: str
    icon_name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.display_name, "icon": self.icon_name, "url": self.url}


class BookmarkIndexEngine:
    """Searchable index over one Firefox bookmark file."""

    def __init__(
        self,
        config: Config,
        notifier: Optional[Notifier] = None,
        watcher: Optional[ChangeWatcher] = None,
        launcher: Optional[BrowserLauncher] = None,
        search_engine: Optional[SearchEngine] = None,
    ):
        self.config = config
        self.notifier = notifier or StderrNotifier()
        self.watcher = watcher
        self.launcher = launcher or BrowserLauncher(config.browser_command)
        self.search_engine = search_engine or KeywordSearchEngine()

        self._state = EngineState.UNINITIALIZED
        self._bookmark_file: Optional[Path] = None
        self._bookmarks: Tuple[Bookmark, ...] = ()
        self._watch_handle: Optional[Any] = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is EngineState.ACTIVE

    @property
    def bookmark_file(self) -> Optional[Path]:
        """The file being indexed and watched, once enabled."""
        return self._bookmark_file

    @property
    def bookmarks(self) -> Tuple[Bookmark, ...]:
        """The current index."""
        return self._bookmarks

    def _notify(self, error: BookmarksError) -> None:
        self.notifier.notify_error(error.title, str(error))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def enable(self) -> bool:
        """Resolve the bookmark file, index it and start watching it.

        Returns:
            True if the engine is active. False if the bookmark file could
            not be located; the engine then stays uninitialized.
        """
        if self._state is not EngineState.UNINITIALIZED:
            return self.is_active

        try:
            bookmark_file = resolve_bookmark_file(self.config)
        except BookmarkSourceError as e:
            self._notify(e)
            return False

        self._bookmark_file = bookmark_file
        self._state = EngineState.ACTIVE

        # A failed first read leaves the index empty; the next change retries
        self.reload()

        if self.watcher is not None:
            try:
                self._watch_handle = self.watcher.subscribe(bookmark_file, self.reload)
            except OSError as e:
                self.notifier.notify_error("Watch Error", f"Cannot watch {bookmark_file}: {e}")

        return True

    def reload(self) -> bool:
        """Re-read the bookmark file and swap in the new index.

        On failure the previous index is kept and the error is reported.

        Returns:
            True if the index was replaced
        """
        if not self.is_active or self._bookmark_file is None:
            return False

        try:
            bookmarks = read_bookmarks(self._bookmark_file)
        except BookmarksError as e:
            self._notify(e)
            return False

        self._bookmarks = bookmarks
        return True

    def dispose(self) -> None:
        """Cancel the file watch. The engine can't be enabled again."""
        if self._watch_handle is not None and self.watcher is not None:
            self.watcher.cancel(self._watch_handle)
        self._watch_handle = None
        self._bookmarks = ()
        self._state = EngineState.DISPOSED

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def initial_results(
        self, terms: Sequence[str], limit: Optional[int] = None
    ) -> Optional[List[SearchResult]]:
        """Rank the index against query terms.

        Returns:
            Ranked SearchResults, or None if the engine isn't active
        """
        if not self.is_active:
            return None

        # Bind once so a concurrent reload can't change the list mid-query
        bookmarks = self._bookmarks
        return self.search_engine.rank(bookmarks, terms, limit=limit)

    def subsearch_results(
        self,
        previous: Sequence[Any],
        terms: Sequence[str],
        limit: Optional[int] = None,
    ) -> Optional[List[SearchResult]]:
        """Refine a search. Always re-ranks the full index; previous is unused."""
        return self.initial_results(terms, limit=limit)

    def result_metadata(self, result: SearchResult) -> ResultMeta:
        """Display name and icon for a result; blank titles show the URL."""
        name = result.title if result.title.strip() else result.url
        return ResultMeta(display_name=name, icon_name=ICON_NAME, url=result.url)

    def activate(self, result: SearchResult) -> bool:
        """Open a result's URL in the browser."""
        try:
            return self.launcher.open(result.url)
        except OSError as e:
            self.notifier.notify_error("Launch Error", f"Cannot open {result.url}: {e}")
            return False
