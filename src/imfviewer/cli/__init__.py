"""Command-line interface for imf-viewer."""
