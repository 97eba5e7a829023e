"""Centralized Pydantic models for imf-viewer."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from imfviewer.constants import (
    IMF_EXTENSION,
    NO_BROWSER_ENV,
    RESOURCE_DIR_ENV,
    SIDECAR_PATH_ENV,
    WINDOW_HEIGHT,
    WINDOW_MIN_HEIGHT,
    WINDOW_MIN_WIDTH,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)


# === Process Models ===


class TrackedProcess(BaseModel):
    """A process we started and are allowed to manage.

    create_time protects against PID reuse when the tree is killed at shutdown.
    """

    pid: int | None = None
    create_time: float | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)


class SidecarProcess(BaseModel):
    """A running sidecar together with the port it announced.

    Created once by the launcher; the supervisor owns it until the window closes.
    """

    popen: subprocess.Popen
    port: int = Field(ge=1, le=65535)
    tracked: TrackedProcess | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, arbitrary_types_allowed=True
    )

    @property
    def pid(self) -> int:
        return self.popen.pid


# === Configuration Models ===


def default_resource_dir() -> Path:
    """Return the bundled resource directory.

    Frozen builds (PyInstaller) unpack resources into `sys._MEIPASS`; a source
    checkout uses the package's own `resources/` folder.
    """
    bundle_dir = getattr(sys, "_MEIPASS", None)
    if bundle_dir:
        return Path(bundle_dir)
    return Path(__file__).resolve().parent / "resources"


class WindowConfig(BaseModel):
    """Native window geometry and title."""

    title: str = WINDOW_TITLE
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    min_width: int = WINDOW_MIN_WIDTH
    min_height: int = WINDOW_MIN_HEIGHT


class ViewerConfig(BaseModel):
    """Complete configuration for the viewer.

    This is the single source of truth for all viewer configuration.
    All default values are defined here and should not be repeated elsewhere.
    """

    sidecar_binary: Path | None = None
    resource_dir: Path = Field(default_factory=default_resource_dir)
    extension: str = IMF_EXTENSION
    no_browser_env: str = NO_BROWSER_ENV
    window: WindowConfig = Field(default_factory=WindowConfig)

    @classmethod
    def from_env(cls, **overrides: object) -> ViewerConfig:
        """Build a config from environment overrides; explicit values win.

        `None` overrides are ignored so CLI options that were not given fall
        through to the environment and then to the defaults.
        """
        values: dict[str, object] = {}
        if sidecar := os.environ.get(SIDECAR_PATH_ENV):
            values["sidecar_binary"] = Path(sidecar).expanduser()
        if resource_dir := os.environ.get(RESOURCE_DIR_ENV):
            values["resource_dir"] = Path(resource_dir).expanduser()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
