"""Error types raised while locating and reading the bookmark file."""


class BookmarksError(Exception):
    """Base class for bookmark index errors.

    ``title`` is the short heading used when the error is reported
    through a notifier; ``str(error)`` is the detail.
    """

    title = "Bookmarks Error"


class BookmarkSourceError(BookmarksError):
    """The bookmark file could not be located."""

    title = "Directory Error"


class RegistryNotFoundError(BookmarkSourceError, FileNotFoundError):
    """profiles.ini is missing or names no profile."""

    title = "Profile Error"


class DirectoryNotFoundError(BookmarkSourceError, FileNotFoundError):
    """The backups directory does not exist or is not a directory."""


class EmptyDirectoryError(BookmarkSourceError):
    """The backups directory holds no regular file."""


class FileVanishedError(EmptyDirectoryError):
    """The newest backup was removed between listing and the final check."""


class BookmarkReadError(BookmarksError, OSError):
    """The bookmark file could not be read."""

    title = "Error reading file"


class EmptyDataError(BookmarksError, ValueError):
    """The bookmark file is empty."""

    title = "Error parsing file"


class BookmarkParseError(BookmarksError, ValueError):
    """The bookmark file is not a valid bookmark JSON document."""

    title = "Error parsing file"
