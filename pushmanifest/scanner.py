"""Walks a web project and yields its files for the manifest pipeline.

Package directories (``node_modules``, ``bower_components``) are part of the
walk because shells and fragments import documents from them. ``.gitignore``
is not read, as web projects usually list those same directories
there.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .logging import get_logger
from .models import SourceFile

_VCS_DIRS = frozenset({".git", ".hg", ".svn"})


@dataclass(frozen=True)
class ExcludePattern:
    """A configured ``exclude_paths`` glob, matched against root-relative paths."""

    glob: str
    directory_only: bool = False

    @classmethod
    def parse(cls, raw: str) -> Optional["ExcludePattern"]:
        glob = raw.strip().lstrip("/")
        directory_only = glob.endswith("/")
        glob = glob.rstrip("/")
        if not glob:
            return None
        return cls(glob=glob, directory_only=directory_only)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        # Slash-free globs apply to the entry name at any depth.
        target = rel_path if "/" in self.glob else rel_path.rsplit("/", 1)[-1]
        return fnmatchcase(target, self.glob)


def _excluded(rel_path: str, is_dir: bool, patterns: Sequence[ExcludePattern]) -> bool:
    return any(pattern.matches(rel_path, is_dir) for pattern in patterns)


class ProjectScanner:
    """Yields project files, skipping version control and configured exclusions."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def iter_files(
        self,
        root: str | Path,
        *,
        exclude_paths: Iterable[str] = (),
        skip: Iterable[Path] = (),
    ) -> Iterator[SourceFile]:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")

        patterns: List[ExcludePattern] = []
        for raw in exclude_paths:
            pattern = ExcludePattern.parse(raw)
            if pattern is not None:
                patterns.append(pattern)
        skipped = {Path(path).resolve() for path in skip}

        count = 0
        for path in self._walk(root_path, patterns):
            if path in skipped:
                continue
            count += 1
            yield SourceFile(path=path, contents=path.read_bytes())
        self.logger.debug("Scanner yielded %d files from %s", count, root_path)

    @staticmethod
    def _walk(root: Path, patterns: Sequence[ExcludePattern]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            prefix = current.relative_to(root).as_posix()
            prefix = "" if prefix == "." else f"{prefix}/"

            dirnames[:] = [
                name
                for name in sorted(dirnames)
                if name not in _VCS_DIRS and not _excluded(prefix + name, True, patterns)
            ]
            for name in sorted(filenames):
                if not _excluded(prefix + name, False, patterns):
                    yield current / name


__all__ = ["ExcludePattern", "ProjectScanner"]
