"""Output extension resolution from a source path and processing querystring."""

from __future__ import annotations

import functools
import re

from PIL import Image

_FORMAT_PARAM = re.compile(r"(?:^|[?&;])format=([a-z0-9]+)", re.IGNORECASE)
_TRAILING_EXTENSION = re.compile(r"(\.[a-z0-9]+)$", re.IGNORECASE)


@functools.cache
def supported_extensions() -> frozenset[str]:
    """Image extensions Pillow knows how to handle, lower-case, without dot."""
    return frozenset(ext.lstrip(".").lower() for ext in Image.registered_extensions())


def extract_extension(full_path: str, querystring: str | None = None) -> str:
    """Return the output extension implied by a request, or ``""`` if unknown.

    A ``format=`` instruction in the querystring wins over the source file's
    own extension. Only formats Pillow supports count. The path-derived value
    keeps its leading dot; callers strip it.
    """
    if querystring and "format" in querystring.lower():
        match = _FORMAT_PARAM.search(querystring)
        if match and match.group(1).lower() in supported_extensions():
            return match.group(1).lower()

    trimmed = full_path.split("?", 1)[0]
    if querystring:
        trimmed = trimmed.replace(querystring, "")

    match = _TRAILING_EXTENSION.search(trimmed)
    if match and match.group(1).lstrip(".").lower() in supported_extensions():
        return match.group(1).lower()

    return ""
