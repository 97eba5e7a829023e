"""Copy opened files into the directory the sidecar serves from.

The sidecar works out of the user's Desktop (falling back to Downloads, then
the temp dir), so a file opened from elsewhere is copied there first and then
referenced by name only.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from imfviewer.viewer.logging import ViewerLogComponent, get_logger

logger = get_logger(ViewerLogComponent.STAGING)


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def staging_dir(home: Path | None = None) -> Path:
    """Return the sidecar work directory: ~/Desktop, ~/Downloads, or the temp dir."""
    home = home if home is not None else _home_dir()
    if home is not None:
        for name in ("Desktop", "Downloads"):
            candidate = home / name
            if candidate.is_dir():
                return candidate
    return Path(tempfile.gettempdir())


def stage_file(source: str | Path, *, home: Path | None = None) -> str | None:
    """Copy `source` into the staging directory and return its file name.

    Copy errors are logged and swallowed: the name is returned anyway so the
    caller can still ask the sidecar to open it. Returns None only when the
    source has no file name component.
    """
    source_path = Path(source)
    file_name = source_path.name
    if not file_name:
        return None

    dest = staging_dir(home) / file_name
    if source_path.resolve() == dest.resolve():
        logger.debug(f"{file_name} is already staged at {dest}")
        return file_name

    try:
        shutil.copy2(source_path, dest)
        logger.info(f"Staged {source_path} -> {dest}")
    except OSError as e:
        logger.warning(f"Could not stage {source_path} into {dest.parent}: {e}")
    return file_name
