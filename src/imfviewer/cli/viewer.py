"""Viewer commands for the imf-viewer CLI."""

from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from rich.markup import escape
from typer import Argument, Exit, Option

from imfviewer.models import ViewerConfig
from imfviewer.utils import console
from imfviewer.viewer.app import ViewerApp
from imfviewer.viewer.launcher import SidecarError
from imfviewer.viewer.logging import (
    ViewerLogComponent,
    configure_viewer_logging,
    get_logger,
)

logger = get_logger(ViewerLogComponent.CLI)


def _load_config(
    sidecar: Path | None = None, resource_dir: Path | None = None
) -> ViewerConfig:
    dotenv_path = Path.cwd() / ".env"
    if dotenv_path.exists():
        logger.debug(f"Loading .env file from {dotenv_path.resolve()}")
        load_dotenv(dotenv_path)
    return ViewerConfig.from_env(sidecar_binary=sidecar, resource_dir=resource_dir)


def run(
    files: Annotated[
        list[str] | None,
        Argument(help="Files (paths or file:// URLs) to open once the viewer is up"),
    ] = None,
    sidecar: Annotated[
        Path | None,
        Option("--sidecar", help="Path to the imf binary. Skips binary discovery"),
    ] = None,
    resource_dir: Annotated[
        Path | None,
        Option("--resource-dir", help="Directory holding the bundled sidecar"),
    ] = None,
    verbose: Annotated[
        bool, Option("--verbose", "-v", help="Show debug logs, including sidecar output")
    ] = False,
):
    """Start the sidecar and open the viewer window."""
    configure_viewer_logging(verbose=verbose)
    config = _load_config(sidecar, resource_dir)
    viewer = ViewerApp(config)

    # Files given on the command line are the "launched by opening a file" case:
    # they arrive before the sidecar is ready and wait in the pending slot.
    if files:
        viewer.open_files(files)

    console.print(f"[cyan]🚀 Starting {config.window.title}...[/cyan]")
    try:
        viewer.run()
    except SidecarError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        console.print(
            "[yellow]💡 Use --sidecar or IMF_VIEWER_SIDECAR to point at the imf binary.[/yellow]"
        )
        raise Exit(code=1)


def locate(
    resource_dir: Annotated[
        Path | None,
        Option("--resource-dir", help="Directory holding the bundled sidecar"),
    ] = None,
):
    """Print the sidecar binary the viewer would launch."""
    config = _load_config(resource_dir=resource_dir)
    path = ViewerApp(config).sidecar_path()
    console.print(str(path), soft_wrap=True, highlight=False, markup=False)
    if not path.exists():
        console.print(
            "[yellow]⚠️  Not found on disk; the OS will resolve it from PATH.[/yellow]"
        )
