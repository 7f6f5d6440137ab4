"""Configuration for the Firefox bookmarks search server."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_FIREFOX_ROOT = Path.home() / ".mozilla" / "firefox"


def _env_path(*names: str) -> Optional[Path]:
    """Return the first non-empty environment variable among names as a Path."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return Path(value).expanduser()
    return None


@dataclass
class Config:
    """Main configuration for the bookmarks search server.

    Exactly one bookmark source is used: ``bookmark_file`` if set, else
    ``bookmark_backups_dir`` if set, else discovery through
    ``firefox_root/profiles.ini``.
    """
    bookmark_file: Optional[Path] = None
    bookmark_backups_dir: Optional[Path] = None
    firefox_root: Path = field(default_factory=lambda: DEFAULT_FIREFOX_ROOT)
    browser_command: str = "firefox"  # Used to open activated results
    max_results: int = 20  # Cap for MCP tool responses

    @property
    def profiles_ini(self) -> Path:
        """Path to the Firefox profile registry."""
        return self.firefox_root / "profiles.ini"

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        firefox_root = _env_path("BOOKMARKS_FIREFOX_ROOT") or DEFAULT_FIREFOX_ROOT

        return cls(
            bookmark_file=_env_path("BOOKMARK_FILE", "FIREFOX_BOOKMARK_FILE"),
            bookmark_backups_dir=_env_path("BOOKMARK_BACKUPS_DIR", "FIREFOX_BOOKMARK_BACKUPS_DIR"),
            firefox_root=firefox_root,
            browser_command=os.environ.get("BOOKMARKS_BROWSER", "firefox"),
            max_results=int(os.environ.get("BOOKMARKS_MAX_RESULTS", "20")),
        )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.

    Returns:
        Config loaded from environment
    """
    global _config

    if _config is None:
        _config = Config.from_env()

    return _config
