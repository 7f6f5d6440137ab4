"""Error notification for the bookmark index."""
import sys
from typing import List, Protocol, Tuple


class Notifier(Protocol):
    """Receives errors the index engine can't surface any other way."""

    def notify_error(self, title: str, detail: str = "") -> None:
        """Report an error. Must not raise."""
        ...


class StderrNotifier:
    """Writes notifications to stderr, leaving stdout to the MCP transport."""

    def __init__(self, prefix: str = "[FirefoxBookmarks]"):
        self.prefix = prefix

    def notify_error(self, title: str, detail: str = "") -> None:
        message = f"{self.prefix} {title}: {detail}" if detail else f"{self.prefix} {title}"
        try:
            print(message, file=sys.stderr)
        except (OSError, ValueError):
            pass


class RecordingNotifier:
    """Keeps notifications in memory, for hosts that display them later."""

    def __init__(self):
        self.errors: List[Tuple[str, str]] = []

    def notify_error(self, title: str, detail: str = "") -> None:
        self.errors.append((title, detail))
