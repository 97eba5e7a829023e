"""Spawn the `imf gui` sidecar and sniff the port it binds.

The sidecar picks a free port on its own and announces it on stdout with a
line like `IMF GUI running at http://127.0.0.1:54321`. Port detection is a
bounded consumer over that line stream: it stops at the first valid match and
never drains the rest of the output.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Iterable
from pathlib import Path

from imfviewer.constants import NO_BROWSER_ENV, PORT_MARKER, SIDECAR_GUI_ARG
from imfviewer.models import SidecarProcess, TrackedProcess
from imfviewer.viewer.logging import ViewerLogComponent, get_logger
from imfviewer.viewer.process_control import kill_process, reap, track_process

logger = get_logger(ViewerLogComponent.SIDECAR)

PopenFactory = Callable[..., subprocess.Popen]


class SidecarError(RuntimeError):
    """Fatal startup failure of the sidecar."""


class SpawnError(SidecarError):
    """The sidecar binary could not be executed."""


class PortDetectionError(SidecarError):
    """The sidecar never announced a usable port."""


def parse_port(line: str, marker: str = PORT_MARKER) -> int | None:
    """Return the port announced on `line`, or None if the line is not an announcement.

    The port is the token after the last colon; it must be a decimal number in 1..65535.
    """
    if marker not in line:
        return None
    token = line.rsplit(":", 1)[-1].strip()
    if not (token.isascii() and token.isdigit()):
        return None
    port = int(token)
    if not 1 <= port <= 65535:
        return None
    return port


def sniff_port(lines: Iterable[str], marker: str = PORT_MARKER) -> int | None:
    """Consume `lines` until the first valid port announcement.

    Nothing past the matching line is read. Returns None if the stream ends first.
    """
    for line in lines:
        port = parse_port(line, marker)
        if port is not None:
            return port
        logger.debug(f"sidecar: {line.rstrip()}")
    return None


def _prepare_env(no_browser_env: str) -> dict[str, str]:
    """Copy os.environ and stop the sidecar from opening its own browser."""
    env = os.environ.copy()
    env[no_browser_env] = "1"
    return env


def _abort(popen: subprocess.Popen, tracked: TrackedProcess | None) -> None:
    kill_process(popen, tracked, name="sidecar")
    reap(popen)


def launch_sidecar(
    binary: Path,
    *,
    no_browser_env: str = NO_BROWSER_ENV,
    popen_factory: PopenFactory = subprocess.Popen,
) -> SidecarProcess:
    """Spawn `<binary> gui` and block until it announces its port.

    Raises:
        SpawnError: the binary could not be started.
        PortDetectionError: stdout was unavailable, closed before a port was
            announced, or the sidecar exited right after announcing. The child
            is killed before the error is raised.
    """
    cmd = [str(binary), SIDECAR_GUI_ARG]
    logger.info(f"Starting sidecar: {' '.join(cmd)}")

    try:
        popen = popen_factory(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=None,
            env=_prepare_env(no_browser_env),
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        raise SpawnError(f"Failed to launch sidecar at {binary}: {e}") from e

    tracked = track_process(popen.pid)

    if popen.stdout is None:
        _abort(popen, tracked)
        raise PortDetectionError("Failed to capture sidecar stdout")

    try:
        port = sniff_port(popen.stdout)
    except BaseException:
        _abort(popen, tracked)
        raise
    if port is None:
        _abort(popen, tracked)
        raise PortDetectionError(
            f"Could not detect sidecar port: {binary} closed its output without "
            f"printing '{PORT_MARKER}<port>'"
        )

    returncode = popen.poll()
    if returncode is not None:
        reap(popen)
        raise PortDetectionError(
            f"Sidecar exited with code {returncode} right after announcing port {port}"
        )

    logger.info(f"Sidecar pid={popen.pid} listening on port {port}")
    return SidecarProcess(popen=popen, port=port, tracked=tracked)
