"""Opening bookmark URLs in the browser."""
import shutil
import subprocess
import webbrowser
from typing import Optional


class BrowserLauncher:
    """Opens URLs in a new browser tab.

    Uses ``<browser_command> --new-tab <url>`` when the command is on PATH,
    otherwise falls back to the desktop's default browser.
    """

    def __init__(self, browser_command: str = "firefox"):
        self.browser_command = browser_command

    def _find_browser(self) -> Optional[str]:
        return shutil.which(self.browser_command) if self.browser_command else None

    def open(self, url: str) -> bool:
        """Open a URL.

        Args:
            url: URL to open

        Returns:
            True if a browser was started

        Raises:
            OSError: If the browser process can't be spawned
        """
        executable = self._find_browser()
        if executable:
            subprocess.Popen(
                [executable, "--new-tab", url],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
            return True

        try:
            return webbrowser.open_new_tab(url)
        except webbrowser.Error:
            return False
