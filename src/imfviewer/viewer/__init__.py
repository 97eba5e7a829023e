"""Sidecar supervision and the native viewer window."""

from imfviewer.viewer.app import ViewerApp
from imfviewer.viewer.launcher import PortDetectionError, SidecarError, SpawnError
from imfviewer.viewer.supervisor import Supervisor

__all__ = [
    "PortDetectionError",
    "SidecarError",
    "SpawnError",
    "Supervisor",
    "ViewerApp",
]
