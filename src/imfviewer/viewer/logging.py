"""Centralized logging for the viewer (component loggers and console formatting)."""

from __future__ import annotations

import logging
from enum import Enum

from imfviewer.utils import PrefixedLogHandler


class ViewerLogComponent(str, Enum):
    """Where a log originated (used for prefixes and fine-grained filtering)."""

    SUPERVISOR = "supervisor"
    SIDECAR = "sidecar"
    STAGING = "staging"
    WINDOW = "window"
    CLI = "cli"


_COMPONENT_COLOR: dict[ViewerLogComponent, str] = {
    ViewerLogComponent.SUPERVISOR: "bright_blue",
    ViewerLogComponent.SIDECAR: "cyan",
    ViewerLogComponent.STAGING: "magenta",
    ViewerLogComponent.WINDOW: "green",
    ViewerLogComponent.CLI: "bright_blue",
}


_configured: bool = False


def _logger_name(component: ViewerLogComponent) -> str:
    return f"imfviewer.{component.value}"


def configure_viewer_logging(*, verbose: bool = False) -> None:
    """Route every component logger to the rich console with a `[component]` prefix."""
    global _configured
    level = logging.DEBUG if verbose else logging.INFO
    for component in ViewerLogComponent:
        logger = logging.getLogger(_logger_name(component))
        logger.setLevel(level)
        logger.handlers.clear()
        handler = PrefixedLogHandler(
            prefix=f"[{component.value}]",
            color=_COMPONENT_COLOR.get(component, "white"),
            width=12,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    _configured = True


def get_logger(component: ViewerLogComponent) -> logging.Logger:
    """Get a viewer logger for a component (do not call stdlib logging directly)."""
    logger = logging.getLogger(_logger_name(component))
    if not _configured:
        # Avoid "No handlers could be found" warnings when logging was never configured.
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
    return logger
