"""Conversions between filesystem paths and package-relative URLs."""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from urllib.parse import quote

# Characters encodeURI-style encoding leaves untouched.
_URL_SAFE = "/;,?:@&=+$-_.!~*'()#"


def encode_url_path(path: str) -> str:
    return quote(path, safe=_URL_SAFE)


def url_from_path(root: str | os.PathLike[str], target: str | os.PathLike[str]) -> str:
    """Return the URL of ``target`` relative to ``root``.

    Relative targets are taken relative to ``root``. Raises ``ValueError`` when
    the target lies outside the root.
    """
    root_path = PurePath(os.fspath(root))
    target_path = PurePath(os.fspath(target))
    if not target_path.is_absolute():
        target_path = root_path / target_path

    relative = os.path.relpath(os.fspath(target_path), os.fspath(root_path))
    relative_posix = Path(relative).as_posix()
    if relative_posix == ".." or relative_posix.startswith("../"):
        raise ValueError(f"Target path is not in root: {target} ({root})")
    if relative_posix == ".":
        relative_posix = ""
    return encode_url_path(relative_posix)


__all__ = ["encode_url_path", "url_from_path"]
