"""Tests for configuration and process models."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from imfviewer.constants import RESOURCE_DIR_ENV, SIDECAR_PATH_ENV
from imfviewer.models import SidecarProcess, ViewerConfig, default_resource_dir


class TestViewerConfig:
    """Tests for ViewerConfig defaults and overrides."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(SIDECAR_PATH_ENV, raising=False)
        monkeypatch.delenv(RESOURCE_DIR_ENV, raising=False)

        config = ViewerConfig.from_env()

        assert config.sidecar_binary is None
        assert config.resource_dir == default_resource_dir()
        assert config.extension == ".imf"
        assert config.no_browser_env == "IMF_NO_BROWSER"
        assert config.window.title == "IMF Viewer"
        assert (config.window.width, config.window.height) == (1100, 750)
        assert (config.window.min_width, config.window.min_height) == (800, 500)

    def test_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv(SIDECAR_PATH_ENV, str(tmp_path / "imf"))
        monkeypatch.setenv(RESOURCE_DIR_ENV, str(tmp_path / "res"))

        config = ViewerConfig.from_env()

        assert config.sidecar_binary == tmp_path / "imf"
        assert config.resource_dir == tmp_path / "res"

    def test_explicit_values_win(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.delenv(RESOURCE_DIR_ENV, raising=False)
        monkeypatch.setenv(SIDECAR_PATH_ENV, str(tmp_path / "from-env"))

        config = ViewerConfig.from_env(
            sidecar_binary=tmp_path / "from-cli", resource_dir=None
        )

        assert config.sidecar_binary == tmp_path / "from-cli"
        assert config.resource_dir == default_resource_dir()

    def test_frozen_bundle_resource_dir(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setattr("sys._MEIPASS", str(tmp_path), raising=False)
        assert default_resource_dir() == tmp_path


class TestSidecarProcess:
    """Tests for the launched sidecar handle."""

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_rejects_invalid_ports(self, port: int) -> None:
        with pytest.raises(ValidationError):
            SidecarProcess(popen=Mock(spec=subprocess.Popen), port=port)

    def test_pid_from_popen(self) -> None:
        sidecar = SidecarProcess(popen=Mock(spec=subprocess.Popen, pid=77), port=1)
        assert sidecar.pid == 77
