"""Resource-type classification for pushed dependencies."""

from __future__ import annotations

import posixpath
from typing import Optional
from urllib.parse import urlsplit

from .models import ImportEdge, ResourceType

_TYPE_BY_EXTENSION = {
    ".css": ResourceType.STYLE,
    ".gif": ResourceType.IMAGE,
    ".html": ResourceType.DOCUMENT,
    ".png": ResourceType.IMAGE,
    ".jpg": ResourceType.IMAGE,
    ".js": ResourceType.SCRIPT,
    ".json": ResourceType.SCRIPT,
    ".svg": ResourceType.IMAGE,
    ".webp": ResourceType.IMAGE,
    ".woff": ResourceType.FONT,
    ".woff2": ResourceType.FONT,
}

_STYLE_KINDS = ("css-import", "html-style")


def classify_by_extension(url: str) -> Optional[ResourceType]:
    """Return the default resource type for ``url`` based on its file extension."""
    path = urlsplit(url).path
    _, extension = posixpath.splitext(path)
    return _TYPE_BY_EXTENSION.get(extension)


def classify_import(edge: ImportEdge) -> Optional[ResourceType]:
    """Return the resource type for an import edge.

    The import kind records how the author referenced the resource and wins
    over the extension. Generic kinds such as ``js-import`` can pull in many
    kinds of resources, so they defer to :func:`classify_by_extension`.
    """
    kinds = edge.kinds
    if any(kind in kinds for kind in _STYLE_KINDS):
        return ResourceType.STYLE
    if "html-import" in kinds:
        return ResourceType.DOCUMENT
    if "html-script" in kinds:
        return ResourceType.SCRIPT
    return classify_by_extension(edge.url)


__all__ = ["classify_by_extension", "classify_import"]
