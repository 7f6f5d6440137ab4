"""Shared fixtures for tests."""
import copy
import json
import os
import pytest
from pathlib import Path

from firefox_bookmarks.bookmarks_reader import Bookmark
from firefox_bookmarks.config import Config


PLACE = "text/x-moz-place"
CONTAINER = "text/x-moz-place-container"
SEPARATOR = "text/x-moz-place-separator"


SAMPLE_BOOKMARKS = {
    "guid": "root________",
    "title": "",
    "root": "placesRoot",
    "type": CONTAINER,
    "children": [
        {
            "guid": "menu________",
            "title": "menu",
            "root": "bookmarksMenuFolder",
            "type": CONTAINER,
            "children": [
                {"title": "Python Docs", "type": PLACE, "uri": "https://docs.python.org"},
                {
                    "title": "Work",
                    "type": CONTAINER,
                    "children": [
                        {"title": "Jira Board", "type": PLACE, "uri": "https://jira.example.com/board"},
                        {"title": "Confluence", "type": PLACE, "uri": "https://confluence.example.com"},
                    ],
                },
                {"title": "", "type": SEPARATOR},
            ],
        },
        {
            "guid": "toolbar_____",
            "title": "toolbar",
            "root": "toolbarFolder",
            "type": CONTAINER,
            "children": [
                {"title": "GitHub", "type": PLACE, "uri": "https://github.com"},
                {
                    "title": "Tutorials",
                    "type": CONTAINER,
                    "children": [
                        {
                            "title": "Databases",
                            "type": CONTAINER,
                            "children": [
                                {"title": "SQLite Guide", "type": PLACE, "uri": "https://sqlite.org/guide"},
                            ],
                        },
                    ],
                },
            ],
        },
        {
            "guid": "tags________",
            "title": "tags",
            "root": "tagsFolder",
            "type": CONTAINER,
            "children": [
                {
                    "title": "dev",
                    "type": CONTAINER,
                    "children": [
                        {"title": "Tagged Only", "type": PLACE, "uri": "https://tagged.example.com"},
                    ],
                },
            ],
        },
        {
            "guid": "unfiled_____",
            "title": "unfiled",
            "root": "unfiledBookmarksFolder",
            "type": CONTAINER,
            "children": [
                {"title": "Stack Overflow", "type": PLACE, "uri": "https://stackoverflow.com"},
                {"type": PLACE, "uri": "https://untitled.example.org"},
            ],
        },
    ],
}


EXPECTED_BOOKMARKS = (
    Bookmark("Python Docs", "https://docs.python.org"),
    Bookmark("Jira Board", "https://jira.example.com/board"),
    Bookmark("Confluence", "https://confluence.example.com"),
    Bookmark("GitHub", "https://github.com"),
    Bookmark("SQLite Guide", "https://sqlite.org/guide"),
    Bookmark("Stack Overflow", "https://stackoverflow.com"),
    Bookmark("", "https://untitled.example.org"),
)


def write_backup(path: Path, data: dict, mtime: int = None) -> Path:
    """Write a bookmark backup, optionally with a fixed modification time."""
    path.write_text(json.dumps(data))
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def sample_bookmarks_path(tmp_path):
    """Create a temporary bookmarks file with sample data."""
    return write_backup(tmp_path / "bookmarks.json", SAMPLE_BOOKMARKS)


@pytest.fixture
def sample_bookmarks():
    """Return sample bookmarks as read_bookmarks returns them."""
    return EXPECTED_BOOKMARKS


@pytest.fixture
def firefox_root(tmp_path):
    """A fake ~/.mozilla/firefox with one relative default profile."""
    root = tmp_path / "firefox"
    backups = root / "abcd1234.default-release" / "bookmarkbackups"
    backups.mkdir(parents=True)
    write_backup(backups / "bookmarks-2024-01-01_10_aaaa.json", {"children": []}, mtime=1_700_000_000)
    write_backup(backups / "bookmarks-2024-02-01_12_bbbb.json", SAMPLE_BOOKMARKS, mtime=1_700_100_000)

    (root / "profiles.ini").write_text(
        "[General]\n"
        "StartWithLastProfile=1\n"
        "\n"
        "[Profile1]\n"
        "Name=old\n"
        "IsRelative=1\n"
        "Path=zzzz9999.old\n"
        "Default=0\n"
        "\n"
        "[Profile0]\n"
        "Name=default-release\n"
        "IsRelative=1\n"
        "Path=abcd1234.default-release\n"
        "Default=1\n"
    )
    return root


@pytest.fixture
def file_config(sample_bookmarks_path):
    return Config(bookmark_file=sample_bookmarks_path)


class FakeWatcher:
    """In-memory change watcher; tests fire callbacks by hand."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.subscriptions = {}
        self.cancelled = []
        self._next = 0

    def subscribe(self, path, callback):
        if self.fail:
            raise OSError("inotify watch limit reached")
        self._next += 1
        self.subscriptions[self._next] = (path, callback)
        return self._next

    def cancel(self, handle):
        self.cancelled.append(handle)
        self.subscriptions.pop(handle, None)

    def fire(self):
        for _, callback in list(self.subscriptions.values()):
            callback()


class FakeLauncher:
    def __init__(self, error: Exception = None):
        self.error = error
        self.opened = []

    def open(self, url):
        if self.error:
            raise self.error
        self.opened.append(url)
        return True


@pytest.fixture
def watcher():
    return FakeWatcher()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def failing_watcher():
    return FakeWatcher(fail=True)


@pytest.fixture
def failing_launcher():
    return FakeLauncher(error=OSError("No such file or directory: 'firefox'"))


@pytest.fixture
def sample_data():
    """A fresh copy of the sample bookmark document."""
    return copy.deepcopy(SAMPLE_BOOKMARKS)


@pytest.fixture
def backup_writer():
    return write_backup
