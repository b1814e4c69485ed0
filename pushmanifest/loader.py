"""URL loaders that serve analyzer reads from the in-memory file set."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional
from urllib.parse import unquote

from .models import SourceFile
from .paths import encode_url_path


class UrlNotFoundError(FileNotFoundError):
    """Raised when a URL has no backing file."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No file registered for URL {url}")
        self.url = url


class UrlLoader(ABC):
    """Resolves URLs to document text."""

    @abstractmethod
    def can_load(self, url: str) -> bool:
        """Return True when ``url`` can be loaded."""

    @abstractmethod
    def load(self, url: str) -> str:
        """Return the text behind ``url`` or raise :class:`UrlNotFoundError`."""


class FileMapUrlLoader(UrlLoader):
    """Loads URLs from a mapping of canonical URL to :class:`SourceFile`."""

    def __init__(self, files: Mapping[str, SourceFile]) -> None:
        self._files = files

    def can_load(self, url: str) -> bool:
        return self._lookup(url) is not None

    def load(self, url: str) -> str:
        source = self._lookup(url)
        if source is None:
            raise UrlNotFoundError(url)
        return source.text()

    def _lookup(self, url: str) -> Optional[SourceFile]:
        stripped = url.lstrip("/")
        decoded = unquote(stripped)
        for candidate in (url, stripped, decoded, encode_url_path(decoded)):
            source = self._files.get(candidate)
            if source is not None:
                return source
        return None


__all__ = ["FileMapUrlLoader", "UrlLoader", "UrlNotFoundError"]
