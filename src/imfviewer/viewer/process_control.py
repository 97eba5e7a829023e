"""Process tracking and force-kill helpers for the sidecar.

Design goals:
- Only kill processes we started (tracked by pid + create_time).
- Kill the whole tree: the sidecar may have spawned helpers of its own.
- Fire-and-forget: never wait for exit, never raise during shutdown.
"""

from __future__ import annotations

import subprocess

import psutil

from imfviewer.models import TrackedProcess
from imfviewer.viewer.logging import ViewerLogComponent, get_logger

logger = get_logger(ViewerLogComponent.SIDECAR)


def track_process(pid: int) -> TrackedProcess | None:
    """Create a TrackedProcess for a running PID, recording create_time."""
    try:
        proc = psutil.Process(pid)
        return TrackedProcess(pid=pid, create_time=float(proc.create_time()))
    except (psutil.Error, OSError):
        return None


def validate_tracked(tp: TrackedProcess) -> psutil.Process | None:
    """Return a psutil.Process only if PID matches create_time (prevents PID reuse bugs)."""
    if tp.pid is None or tp.create_time is None:
        return None
    try:
        proc = psutil.Process(tp.pid)
        if abs(float(proc.create_time()) - float(tp.create_time)) > 0.001:
            return None
        return proc
    except (psutil.Error, OSError):
        return None


def kill_tracked_tree(tp: TrackedProcess, *, name: str) -> int:
    """Force-kill a tracked process and its descendants. Returns count signalled."""
    root = validate_tracked(tp)
    if root is None:
        return 0

    try:
        children = root.children(recursive=True)
    except (psutil.Error, OSError):
        children = []

    killed = 0
    for proc in [*children, root]:
        try:
            proc.kill()
            killed += 1
        except psutil.NoSuchProcess:
            continue
        except (psutil.Error, OSError) as e:
            logger.debug(f"Could not kill {name} pid={proc.pid}: {e}")
    if killed:
        logger.debug(f"Killed {killed} {name} process(es) rooted at pid={tp.pid}")
    return killed


def kill_process(
    popen: subprocess.Popen, tracked: TrackedProcess | None, *, name: str
) -> None:
    """Force-kill a spawned child without waiting for it to exit.

    Prefers the tracked tree; falls back to the Popen handle when the process
    could not be tracked (e.g. it exited before psutil saw it).
    """
    if tracked is not None and kill_tracked_tree(tracked, name=name):
        return
    try:
        popen.kill()
    except OSError as e:
        logger.debug(f"Could not kill {name} pid={popen.pid}: {e}")


def reap(popen: subprocess.Popen, timeout: float = 2.0) -> None:
    """Collect the exit status of a killed child so no zombie is left behind."""
    try:
        popen.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"Process pid={popen.pid} did not exit within {timeout}s")
