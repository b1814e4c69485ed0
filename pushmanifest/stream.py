"""Pipeline stage that collects project files and appends a push manifest."""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import (
    AsyncIterable,
    AsyncIterator,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Union,
)

from .analyzers.base import Analyzer
from .analyzers.static import StaticAnalyzer
from .builder import build_manifest
from .config import ProjectConfig
from .loader import FileMapUrlLoader, UrlLoader
from .logging import get_logger
from .models import PushManifest, SourceFile, manifest_to_dict
from .normalizer import normalize_manifest
from .paths import url_from_path

AnalyzerFactory = Callable[[UrlLoader], Analyzer]
FileSource = Union[AsyncIterable[SourceFile], Iterable[SourceFile]]


def serialize_manifest(manifest: PushManifest) -> str:
    return json.dumps(manifest_to_dict(manifest), indent=2)


async def _iterate(files: FileSource) -> AsyncIterator[SourceFile]:
    if hasattr(files, "__aiter__"):
        async for file in files:  # type: ignore[union-attr]
            yield file
    else:
        for file in files:  # type: ignore[union-attr]
            yield file


class AddPushManifest:
    """Forwards every input file and then emits one generated manifest file.

    Files are registered in a URL-keyed map as they pass through. Once the
    input is exhausted the map is frozen and handed to the analyzer as a
    read-only snapshot; registering files after that point is an error.
    """

    def __init__(
        self,
        config: ProjectConfig,
        out_path: Optional[str] = None,
        base_path: Optional[str] = None,
        analyzer_factory: Optional[AnalyzerFactory] = None,
    ) -> None:
        self.config = config
        self.files: Dict[str, SourceFile] = {}
        self.out_path = config.root / out_path if out_path else config.out_file
        self.base_path = base_path if base_path is not None else config.manifest.base_path
        self._analyzer_factory: AnalyzerFactory = analyzer_factory or StaticAnalyzer
        self.manifest: Optional[PushManifest] = None
        self._frozen = False
        self.logger = get_logger("stream")

    def add_file(self, file: SourceFile) -> str:
        if self._frozen:
            raise RuntimeError("Cannot register files after manifest generation has started")
        url = url_from_path(self.config.root, file.path)
        if url in self.files:
            self.logger.debug("Replacing previously registered file for %s", url)
        self.files[url] = file
        return url

    async def transform(self, files: FileSource) -> AsyncIterator[SourceFile]:
        async for file in _iterate(files):
            self.add_file(file)
            yield file

        # Errors propagate; a partial manifest is never emitted.
        manifest = await self.generate_push_manifest()
        yield SourceFile(path=self.out_path, contents=serialize_manifest(manifest).encode("utf-8"))

    async def generate_push_manifest(self) -> PushManifest:
        self._frozen = True
        self.logger.debug("Generating push manifest from %d files", len(self.files))
        snapshot = MappingProxyType(dict(self.files))
        analyzer = self._analyzer_factory(FileMapUrlLoader(snapshot))
        raw = await build_manifest(self.config, analyzer)
        self.manifest = normalize_manifest(raw, self.base_path)
        return self.manifest


async def add_push_manifest(
    files: FileSource,
    config: ProjectConfig,
    *,
    out_path: Optional[str] = None,
    base_path: Optional[str] = None,
    analyzer_factory: Optional[AnalyzerFactory] = None,
) -> List[SourceFile]:
    """Return ``files`` followed by the generated manifest file."""
    stage = AddPushManifest(config, out_path, base_path, analyzer_factory)
    return [file async for file in stage.transform(files)]


__all__ = ["AddPushManifest", "add_push_manifest", "serialize_manifest"]
