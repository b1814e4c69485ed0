"""Runs the scan -> collect -> generate -> write flow for one project."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .config import load_config
from .logging import get_logger, log_exception
from .models import PushManifest, SourceFile
from .resolver import ResolutionError
from .scanner import ProjectScanner
from .stream import AddPushManifest, AnalyzerFactory


@dataclass
class GenerateOutcome:
    """Result of a manifest generation run."""

    path: Path
    manifest: PushManifest
    contents: str
    files_seen: int
    dry_run: bool


class Orchestrator:
    """Coordinates a full push manifest build for a project directory."""

    def __init__(
        self,
        scanner: ProjectScanner | None = None,
        analyzer_factory: Optional[AnalyzerFactory] = None,
    ) -> None:
        self.scanner = scanner or ProjectScanner()
        self.analyzer_factory = analyzer_factory
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str | Path,
        *,
        out_path: Optional[str] = None,
        base_path: Optional[str] = None,
        dry_run: bool = False,
    ) -> GenerateOutcome:
        """Generate the manifest for the project at ``path`` and write it to disk."""
        config = load_config(Path(path))
        self.logger.info("Starting push manifest run for %s", config.root)

        stage = AddPushManifest(
            config,
            out_path=out_path,
            base_path=base_path,
            analyzer_factory=self.analyzer_factory,
        )
        # A manifest left by an earlier run is output, not input.
        files = self.scanner.iter_files(
            config.root, exclude_paths=config.exclude_paths, skip=[stage.out_path]
        )

        try:
            files_seen, manifest_file = asyncio.run(self._drain(stage, files))
        except ResolutionError as exc:
            log_exception(self.logger, "Push manifest generation failed", exc)
            raise

        contents = manifest_file.text()
        if dry_run:
            self.logger.info("Dry-run completed; manifest not written")
        else:
            manifest_file.path.parent.mkdir(parents=True, exist_ok=True)
            manifest_file.path.write_bytes(manifest_file.contents)
            self.logger.info("Push manifest written to %s", manifest_file.path)

        return GenerateOutcome(
            path=manifest_file.path,
            manifest=stage.manifest or {},
            contents=contents,
            files_seen=files_seen,
            dry_run=dry_run,
        )

    @staticmethod
    async def _drain(
        stage: AddPushManifest, files: Iterable[SourceFile]
    ) -> tuple[int, SourceFile]:
        count = 0
        last: SourceFile | None = None
        async for file in stage.transform(files):
            count += 1
            last = file
        if last is None:
            raise RuntimeError("Push manifest stage finished without emitting a manifest")
        return count - 1, last


__all__ = ["GenerateOutcome", "Orchestrator"]
