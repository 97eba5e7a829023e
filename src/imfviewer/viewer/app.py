"""Viewer orchestration: locate -> launch -> ready -> window -> terminate.

`ViewerApp.open_files` may be called from any thread at any time (OS file
associations, command-line arguments); `ViewerApp.start` is the startup
routine. The Supervisor reconciles the two.
"""

from __future__ import annotations

import subprocess
import time
from collections.abc import Iterable
from pathlib import Path

from imfviewer.models import SidecarProcess, ViewerConfig
from imfviewer.utils import format_elapsed_ms
from imfviewer.viewer.launcher import PopenFactory, launch_sidecar
from imfviewer.viewer.locator import default_exe_dir, locate_sidecar
from imfviewer.viewer.logging import ViewerLogComponent, get_logger
from imfviewer.viewer.process_control import kill_process
from imfviewer.viewer.supervisor import Supervisor
from imfviewer.viewer.window import WindowHost

logger = get_logger(ViewerLogComponent.SUPERVISOR)


class ViewerApp:
    """Single entry point for running the viewer.

    All CLI commands go through this class.
    """

    def __init__(
        self,
        config: ViewerConfig | None = None,
        *,
        popen_factory: PopenFactory = subprocess.Popen,
    ):
        self.config: ViewerConfig = config or ViewerConfig()
        self.supervisor: Supervisor = Supervisor(extension=self.config.extension)
        self.window_host: WindowHost = WindowHost(
            self.config.window, on_closed=self.supervisor.terminate
        )
        self._popen_factory: PopenFactory = popen_factory

    def sidecar_path(self) -> Path:
        """Resolve the sidecar binary: explicit override first, then the locator."""
        if self.config.sidecar_binary is not None:
            return self.config.sidecar_binary
        return locate_sidecar(
            resource_dir=self.config.resource_dir,
            exe_dir=default_exe_dir(),
            cwd=Path.cwd(),
        )

    def open_files(self, requests: Iterable[str]) -> str | None:
        """Deliver an OS "open" notification (URLs or paths)."""
        return self.supervisor.notify_open(list(requests))

    def start(self) -> str:
        """Launch the sidecar and return the URL the window should open.

        Raises SidecarError subclasses when the sidecar cannot be started.
        """
        start = time.perf_counter()
        sidecar: SidecarProcess = launch_sidecar(
            self.sidecar_path(),
            no_browser_env=self.config.no_browser_env,
            popen_factory=self._popen_factory,
        )
        try:
            url = self.supervisor.mark_ready(
                sidecar, navigator=self.window_host.navigate
            )
        except BaseException:
            kill_process(sidecar.popen, sidecar.tracked, name="sidecar")
            raise
        logger.info(f"Sidecar ready in {format_elapsed_ms(start)}")
        return url

    def run(self) -> None:
        """Start the sidecar, show the window, and block until it is closed."""
        url = self.start()
        try:
            self.window_host.run(url)
        finally:
            self.supervisor.terminate()
