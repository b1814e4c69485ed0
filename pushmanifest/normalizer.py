"""Rewrites manifest URLs into one relative addressing scheme."""

from __future__ import annotations

import posixpath

from .models import PushManifest, PushManifestEntryCollection


def _posix_join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."
    normalized = posixpath.normpath(joined)
    if joined.endswith("/") and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def normalize_url(url: str, base_path: str = "") -> str:
    """Return ``url`` joined under ``base_path`` with leading slashes removed.

    Source URLs may be rooted or relative depending on how they were written.
    A URL that already sits under ``base_path`` is not prefixed a second time,
    so a source directory named like the base path (``static/x.css`` with base
    ``static``) also stays unprefixed rather than becoming ``static/static/x.css``.
    """
    candidate = _posix_join(url).lstrip("/")
    base = _posix_join(base_path).strip("/") if base_path else ""
    if base and base != "." and (candidate == base or candidate.startswith(f"{base}/")):
        return candidate
    return _posix_join(base_path, url).lstrip("/")


def normalize_manifest(manifest: PushManifest, base_path: str = "") -> PushManifest:
    """Return a copy of ``manifest`` with every key normalized."""
    normalized: PushManifest = {}
    for source, collection in manifest.items():
        targets: PushManifestEntryCollection = {}
        for target, entry in collection.items():
            targets[normalize_url(target, base_path)] = entry
        normalized[normalize_url(source, base_path)] = targets
    return normalized


__all__ = ["normalize_manifest", "normalize_url"]
