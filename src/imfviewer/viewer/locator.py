"""Locate the `imf` sidecar executable."""

from __future__ import annotations

import sys
from pathlib import Path

from imfviewer.constants import SIDECAR_BINARY_NAME, SIDECAR_SUBDIR


def sidecar_candidates(
    binary_name: str,
    *,
    resource_dir: Path | None,
    exe_dir: Path | None,
    cwd: Path | None,
) -> list[Path]:
    """Return the ordered list of places the sidecar may live.

    Order: bundled `sidecar/` resource folder, resource root, next to the
    running executable, the working directory, and its parent.
    """
    candidates: list[Path] = []
    if resource_dir is not None:
        candidates.append(resource_dir / SIDECAR_SUBDIR / binary_name)
        candidates.append(resource_dir / binary_name)
    if exe_dir is not None:
        candidates.append(exe_dir / binary_name)
    if cwd is not None:
        candidates.append(cwd / binary_name)
        candidates.append(cwd / ".." / binary_name)
    return candidates


def locate_sidecar(
    binary_name: str = SIDECAR_BINARY_NAME,
    *,
    resource_dir: Path | None = None,
    exe_dir: Path | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the first existing sidecar candidate.

    Falls back to the bare binary name so the OS resolves it from PATH at
    spawn time. Never raises.
    """
    for path in sidecar_candidates(
        binary_name, resource_dir=resource_dir, exe_dir=exe_dir, cwd=cwd
    ):
        if path.exists():
            return path
    return Path(binary_name)


def default_exe_dir() -> Path:
    """Directory of the running executable (the app binary when frozen)."""
    return Path(sys.executable).resolve().parent
