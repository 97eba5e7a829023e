"""Global constants for imf-viewer."""

from imfviewer.utils import is_windows

# Sidecar binary

SIDECAR_BINARY_NAME = "imf.exe" if is_windows() else "imf"
SIDECAR_SUBDIR = "sidecar"
SIDECAR_GUI_ARG = "gui"

# Environment variable that stops the sidecar from opening its own browser
NO_BROWSER_ENV = "IMF_NO_BROWSER"

# Startup log line announcing the bound port
PORT_MARKER = "running at http://127.0.0.1:"

# URL/Routing defaults
LOCAL_HOST = "127.0.0.1"
OPEN_QUERY_PARAM = "open"
ALLOWED_NAVIGATION_HOSTS = ("127.0.0.1", "localhost")
ALLOWED_NAVIGATION_SCHEMES = ("about",)

# File association
IMF_EXTENSION = ".imf"

# Window defaults
WINDOW_TITLE = "IMF Viewer"
WINDOW_WIDTH = 1100
WINDOW_HEIGHT = 750
WINDOW_MIN_WIDTH = 800
WINDOW_MIN_HEIGHT = 500

# Config environment overrides
SIDECAR_PATH_ENV = "IMF_VIEWER_SIDECAR"
RESOURCE_DIR_ENV = "IMF_VIEWER_RESOURCE_DIR"
