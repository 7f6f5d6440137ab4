"""Locating the Firefox bookmark file on disk."""
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from firefox_bookmarks.config import Config
from firefox_bookmarks.errors import (
    DirectoryNotFoundError,
    EmptyDirectoryError,
    FileVanishedError,
    RegistryNotFoundError,
)


BACKUPS_DIR_NAME = "bookmarkbackups"

_KEY_VALUE = re.compile(r"^([^=]+)=(.+)$")


@dataclass(frozen=True)
class ProfileDescriptor:
    """A profile entry from profiles.ini."""
    path: str
    is_relative: bool

    def backups_dir(self, firefox_root: Path) -> Path:
        """Directory holding this profile's bookmark backups."""
        if self.is_relative:
            return firefox_root / self.path / BACKUPS_DIR_NAME
        return Path(self.path) / BACKUPS_DIR_NAME


def locate_default_profile(registry_path: Path) -> ProfileDescriptor:
    """Find the default profile in a Firefox profile registry.

    The registry is scanned top to bottom. The candidate is always the most
    recently seen ``Path``/``IsRelative`` pair; scanning stops as soon as
    the most recent ``Default`` value is ``1``. When no profile is marked
    default the last pair in the file wins.

    Args:
        registry_path: Path to profiles.ini

    Returns:
        The selected profile

    Raises:
        RegistryNotFoundError: If the registry doesn't exist or names no profile
    """
    if not registry_path.is_file():
        raise RegistryNotFoundError(f"{registry_path} does not exist")

    try:
        with open(registry_path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.read().splitlines()
    except OSError as e:
        raise RegistryNotFoundError(f"Cannot read {registry_path}: {e.strerror or e}") from e

    last_path: Optional[str] = None
    last_is_relative: Optional[str] = None
    last_default: Optional[str] = None
    default_path: Optional[str] = None
    default_is_relative: Optional[str] = None

    for line in lines:
        if not line:
            continue

        match = _KEY_VALUE.match(line)
        if match is None:
            continue

        key, value = match.group(1).strip(), match.group(2).strip()
        if key == "Path":
            last_path = value
        elif key == "IsRelative":
            last_is_relative = value
        elif key == "Default":
            last_default = value

        default_path = last_path
        default_is_relative = last_is_relative
        if last_default == "1":
            break

    if not default_path:
        raise RegistryNotFoundError(f"No profile path found in {registry_path}")

    return ProfileDescriptor(path=default_path, is_relative=default_is_relative == "1")


def latest_backup(directory: Path) -> Path:
    """Return the most recently modified regular file in a directory.

    Modification times are compared in whole seconds. Files with the same
    second are ordered by name and the greatest name wins, which for
    Firefox's date-stamped backup names is also the newest backup.

    Args:
        directory: Directory to scan

    Returns:
        Path to the selected file

    Raises:
        DirectoryNotFoundError: If directory is missing or not a directory
        EmptyDirectoryError: If it contains no regular file
        FileVanishedError: If the selected file disappeared while scanning
    """
    if not directory or not os.path.isdir(directory):
        raise DirectoryNotFoundError(f"{directory} seems doesn't exist")

    best_key = None
    best_name = None
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if not entry.is_file(follow_symlinks=False):
                        continue
                    mtime = int(entry.stat(follow_symlinks=False).st_mtime)
                except FileNotFoundError:
                    continue

                key = (mtime, entry.name)
                if best_key is None or key > best_key:
                    best_key = key
                    best_name = entry.name
    except OSError as e:
        raise DirectoryNotFoundError(f"Cannot list {directory}: {e.strerror or e}") from e

    if best_name is None:
        raise EmptyDirectoryError(f"It seems are no files in {directory}")

    selected = Path(directory) / best_name
    if not selected.exists():
        raise FileVanishedError(f"{selected} was removed while scanning {directory}")

    return selected


def resolve_bookmark_file(config: Config) -> Path:
    """Decide which bookmark file to index.

    Order: explicit file, explicit backups directory, then the default
    profile's backups directory. An explicit file is not checked here; it
    is validated when it is first read.

    Raises:
        BookmarkSourceError: If the backups directory or profile can't be resolved
    """
    if config.bookmark_file:
        return config.bookmark_file

    if config.bookmark_backups_dir:
        return latest_backup(config.bookmark_backups_dir)

    profile = locate_default_profile(config.profiles_ini)
    return latest_backup(profile.backups_dir(config.firefox_root))
