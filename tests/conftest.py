from __future__ import annotations

import subprocess
import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import Mock

import pytest

from imfviewer.models import SidecarProcess


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An isolated home directory with a Desktop, so staging never touches the real one."""
    home_dir = tmp_path / "home"
    (home_dir / "Desktop").mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.fixture
def write_sidecar(tmp_path: Path) -> Callable[[str], Path]:
    """Write an executable Python script that stands in for the `imf` binary."""

    def _write(body: str) -> Path:
        script = tmp_path / "bin" / "imf"
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
        script.chmod(0o755)
        return script

    return _write


@pytest.fixture
def spawned() -> Iterator[list[subprocess.Popen]]:
    """Record every process a test spawns and make sure none outlives it."""
    procs: list[subprocess.Popen] = []
    yield procs
    for proc in procs:
        if proc.poll() is None:
            proc.kill()
            proc.wait(timeout=5)
        if proc.stdout is not None:
            proc.stdout.close()


@pytest.fixture
def recording_popen(
    spawned: list[subprocess.Popen],
) -> Callable[..., subprocess.Popen]:
    def _popen(*args, **kwargs) -> subprocess.Popen:
        proc = subprocess.Popen(*args, **kwargs)
        spawned.append(proc)
        return proc

    return _popen


@pytest.fixture
def sidecar() -> SidecarProcess:
    return SidecarProcess(popen=Mock(spec=subprocess.Popen, pid=4242), port=51234)
