"""Tests for the imf-viewer command line."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from imfviewer.__main__ import app
from imfviewer.constants import RESOURCE_DIR_ENV, SIDECAR_BINARY_NAME, SIDECAR_PATH_ENV
from imfviewer.models import ViewerConfig
from imfviewer.viewer.launcher import PortDetectionError

runner: CliRunner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(SIDECAR_PATH_ENV, raising=False)
    monkeypatch.delenv(RESOURCE_DIR_ENV, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    os.environ.pop(SIDECAR_PATH_ENV, None)
    os.environ.pop(RESOURCE_DIR_ENV, None)


@pytest.fixture
def viewer_app() -> Iterator[MagicMock]:
    with patch("imfviewer.cli.viewer.ViewerApp") as cls:
        yield cls


class TestLocate:
    """Tests for `imf-viewer locate`."""

    def test_prints_bundled_binary(self, tmp_path: Path) -> None:
        bundled = tmp_path / "sidecar" / SIDECAR_BINARY_NAME
        bundled.parent.mkdir()
        bundled.write_text("")

        result = runner.invoke(
            app, ["locate", "--resource-dir", str(tmp_path)], catch_exceptions=False
        )

        assert result.exit_code == 0
        assert str(bundled) in result.output
        assert "Not found" not in result.output

    def test_reads_override_from_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / ".env").write_text(f"{SIDECAR_PATH_ENV}=/opt/tools/imf\n")
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["locate"], catch_exceptions=False)

        assert result.exit_code == 0
        assert str(Path("/opt/tools/imf")) in result.output
        assert "Not found" in result.output


class TestRun:
    """Tests for `imf-viewer run`."""

    def test_delivers_files_before_start(self, viewer_app: MagicMock) -> None:
        result = runner.invoke(
            app,
            ["run", "/inbox/report.imf", "--sidecar", "/opt/imf"],
            catch_exceptions=False,
        )

        assert result.exit_code == 0, result.output
        config: ViewerConfig = viewer_app.call_args.args[0]
        assert config.sidecar_binary == Path("/opt/imf")
        instance = viewer_app.return_value
        instance.open_files.assert_called_once_with(["/inbox/report.imf"])
        instance.run.assert_called_once_with()

    def test_no_files(self, viewer_app: MagicMock) -> None:
        result = runner.invoke(app, ["run"], catch_exceptions=False)

        assert result.exit_code == 0, result.output
        viewer_app.return_value.open_files.assert_not_called()

    def test_startup_failure_exits_nonzero(self, viewer_app: MagicMock) -> None:
        viewer_app.return_value.run.side_effect = PortDetectionError(
            "Could not detect sidecar port"
        )

        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "Could not detect sidecar port" in result.output
