"""Native window around the sidecar UI (pywebview)."""

from __future__ import annotations

import threading
from collections.abc import Callable
from urllib.parse import urlsplit

import webview

from imfviewer.models import WindowConfig
from imfviewer.viewer.logging import ViewerLogComponent, get_logger
from imfviewer.viewer.urls import is_navigation_allowed

logger = get_logger(ViewerLogComponent.WINDOW)


def _root_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.netloc:
        return url
    return f"{parts.scheme}://{parts.netloc}"


class WindowHost:
    """Creates the single main window and routes late navigations into it.

    A navigation requested before the window exists replaces the URL the
    window will be created with.
    """

    def __init__(self, config: WindowConfig, *, on_closed: Callable[[], None]):
        self.config: WindowConfig = config
        self._on_closed = on_closed
        self._lock = threading.Lock()
        self._window: webview.Window | None = None
        self._queued_url: str | None = None
        self._home_url: str | None = None

    @property
    def window(self) -> webview.Window | None:
        with self._lock:
            return self._window

    def navigate(self, url: str) -> bool:
        """Load `url` in the main window. Returns False if the URL is not allowed."""
        if not is_navigation_allowed(url):
            logger.warning(f"Refusing to navigate to {url}")
            return False

        with self._lock:
            window = self._window
            if window is None:
                self._queued_url = url
                return True

        logger.debug(f"Navigating to {url}")
        window.load_url(url)
        return True

    def create(self, url: str) -> webview.Window:
        """Create the main window at `url` (or at a navigation queued before now)."""
        with self._lock:
            if self._window is not None:
                raise RuntimeError("Main window already created")
            start_url = self._queued_url or url
            self._queued_url = None
            if not is_navigation_allowed(start_url):
                raise ValueError(f"Refusing to open window at {start_url}")

            window = webview.create_window(
                self.config.title,
                url=start_url,
                width=self.config.width,
                height=self.config.height,
                min_size=(self.config.min_width, self.config.min_height),
            )
            window.events.closed += self._handle_closed
            window.events.loaded += self._handle_loaded
            self._window = window
            self._home_url = _root_url(start_url)

        logger.info(f"Window created at {start_url}")
        return window

    def _handle_loaded(self) -> None:
        # Links followed inside the page bypass navigate(); pull the window back.
        with self._lock:
            window, home = self._window, self._home_url
        if window is None or home is None:
            return
        url = window.get_current_url()
        if url is None or is_navigation_allowed(url):
            return
        logger.warning(f"Page left the sidecar for {url}, returning to {home}")
        window.load_url(home)

    def _handle_closed(self) -> None:
        logger.info("Window closed")
        self._on_closed()

    def run(self, url: str) -> None:
        """Create the window and block in the GUI loop until it is closed."""
        self.create(url)
        webview.start()
