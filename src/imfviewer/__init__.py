"""imf-viewer: native desktop wrapper around the `imf gui` sidecar."""

__version__ = "0.1.0"
