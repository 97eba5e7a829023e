"""Shared state between the startup routine and OS file-open notifications.

Two producers race with no ordering guarantee:

- the OS delivers "open this file" notifications, possibly before the
  sidecar is up (macOS sends them before the app finishes launching when a
  file is double-clicked);
- the startup routine launches the sidecar and becomes ready to navigate.

The Supervisor owns a single-slot mailbox for the early case. Before ready,
a notification overwrites the slot (last one wins). Becoming ready drains the
slot exactly once into the initial URL. After ready, notifications are handled
immediately by navigating the window. All state sits behind one lock; staging
and navigation happen outside it.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable

from imfviewer.constants import IMF_EXTENSION
from imfviewer.models import SidecarProcess
from imfviewer.viewer.logging import ViewerLogComponent, get_logger
from imfviewer.viewer.process_control import kill_process
from imfviewer.viewer.staging import stage_file
from imfviewer.viewer.urls import navigation_url, path_from_open_request

logger = get_logger(ViewerLogComponent.SUPERVISOR)

Navigator = Callable[[str], object]
Stager = Callable[[str], str | None]


class Supervisor:
    """Owns the sidecar handle, its port, and the pending open request."""

    def __init__(
        self, *, extension: str = IMF_EXTENSION, stage: Stager = stage_file
    ) -> None:
        self.extension: str = extension
        self._stage: Stager = stage
        self._lock = threading.Lock()
        self._pending: str | None = None
        self._sidecar: SidecarProcess | None = None
        self._port: int | None = None
        self._navigator: Navigator | None = None
        self._ready: bool = False
        self._closed: bool = False

    @property
    def ready(self) -> bool:
        with self._lock:
            return self._ready

    @property
    def port(self) -> int | None:
        with self._lock:
            return self._port

    @property
    def pending(self) -> str | None:
        with self._lock:
            return self._pending

    @property
    def sidecar(self) -> SidecarProcess | None:
        with self._lock:
            return self._sidecar

    def notify_open(self, requests: Iterable[str]) -> str | None:
        """Handle an OS open notification carrying one or more URLs or paths.

        Returns the URL navigated to when the notification was handled
        immediately, else None (stored for startup, or ignored).
        """
        for request in requests:
            path = path_from_open_request(request, self.extension)
            if path is None:
                logger.debug(f"Ignoring open request {request!r}")
                continue

            replaced: str | None = None
            with self._lock:
                closed, ready = self._closed, self._ready
                if not closed and not ready:
                    replaced, self._pending = self._pending, path
                port = self._port
                navigator = self._navigator

            if closed:
                logger.debug(f"Window closed, dropping open request {path}")
                return None
            if not ready:
                if replaced is not None:
                    logger.info(f"Replacing pending file {replaced} with {path}")
                continue

            assert port is not None
            return self._open_now(path, port, navigator)
        return None

    def _open_now(self, path: str, port: int, navigator: Navigator | None) -> str | None:
        file_name = self._stage(path)
        if file_name is None:
            return None
        url = navigation_url(port, file_name)
        logger.info(f"Opening {file_name} in the running viewer")
        if navigator is not None:
            navigator(url)
        return url

    def mark_ready(
        self, sidecar: SidecarProcess, navigator: Navigator | None = None
    ) -> str:
        """Record the running sidecar and return the initial window URL.

        Drains the pending slot; a file stored there is staged and folded into
        the URL as the `open` parameter. Can only happen once per run.
        """
        with self._lock:
            if self._ready:
                raise RuntimeError("Supervisor is already ready")
            self._sidecar = sidecar
            self._port = sidecar.port
            self._navigator = navigator
            self._ready = True
            pending, self._pending = self._pending, None

        file_name = self._stage(pending) if pending is not None else None
        return navigation_url(sidecar.port, file_name)

    def terminate(self) -> None:
        """Kill the sidecar on window close. Safe to call more than once."""
        with self._lock:
            self._closed = True
            sidecar, self._sidecar = self._sidecar, None

        if sidecar is None:
            return
        logger.info(f"Stopping sidecar pid={sidecar.pid}")
        kill_process(sidecar.popen, sidecar.tracked, name="sidecar")
