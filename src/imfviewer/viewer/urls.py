"""Navigation URLs exchanged with the sidecar and the OS."""

from __future__ import annotations

from urllib.parse import quote, urlsplit
from urllib.request import url2pathname

from imfviewer.constants import (
    ALLOWED_NAVIGATION_HOSTS,
    ALLOWED_NAVIGATION_SCHEMES,
    IMF_EXTENSION,
    LOCAL_HOST,
    OPEN_QUERY_PARAM,
)


def encode_component(value: str) -> str:
    """Percent-encode every UTF-8 byte outside `A-Z a-z 0-9 - _ . ~` as uppercase %XX.

    The sidecar decodes the `open` query parameter with the same rule. Names that
    are not valid UTF-8 (undecodable bytes carried as surrogates) keep their
    original bytes.
    """
    return quote(value.encode("utf-8", "surrogateescape"), safe="")


def navigation_url(port: int, file_name: str | None = None) -> str:
    """Build the URL the window loads: the sidecar root, optionally opening a file."""
    base = f"http://{LOCAL_HOST}:{port}"
    if file_name is None:
        return base
    return f"{base}/?{OPEN_QUERY_PARAM}={encode_component(file_name)}"


def path_from_open_request(request: str, extension: str = IMF_EXTENSION) -> str | None:
    """Turn an OS "open" notification into a file path, or None if it is not ours.

    `file://` URLs are converted to local paths; plain paths and other URLs
    are taken verbatim. Only values ending with `extension` are accepted.
    """
    path = request
    parts = urlsplit(request)
    if parts.scheme.lower() == "file":
        if parts.netloc not in ("", "localhost"):
            return None
        path = url2pathname(parts.path)
    if not path.endswith(extension):
        return None
    return path


def is_navigation_allowed(url: str) -> bool:
    """Keep the window on the local sidecar (plus `about:` pages)."""
    parts = urlsplit(url)
    if parts.scheme.lower() in ALLOWED_NAVIGATION_SCHEMES:
        return True
    return parts.hostname in ALLOWED_NAVIGATION_HOSTS
