"""Assembles the raw push manifest for the shell and every fragment."""

from __future__ import annotations

from typing import List

from .analyzers.base import Analyzer
from .config import ProjectConfig
from .logging import get_logger
from .models import PushManifest
from .paths import url_from_path
from .resolver import resolve_entry

logger = get_logger("builder")


async def build_manifest(config: ProjectConfig, analyzer: Analyzer) -> PushManifest:
    """Return the un-normalized push manifest for ``config``.

    The shell, or the entrypoint when no shell is configured, has a reliable
    URL and is resolved first. Its URL and its dependencies form the ignore
    list for fragments, since those are already pushed with the shell.
    Fragments are resolved one at a time in configured order; the first
    :class:`~pushmanifest.resolver.ResolutionError` aborts the build.
    """
    manifest: PushManifest = {}

    main_entry = config.shell or config.entrypoint
    shell_url = url_from_path(config.root, main_entry)
    manifest[shell_url] = await resolve_entry(analyzer, shell_url)

    fragment_ignore_urls: List[str] = [shell_url, *manifest[shell_url].keys()]
    for fragment in config.fragments:
        fragment_url = url_from_path(config.root, fragment)
        manifest[fragment_url] = await resolve_entry(
            analyzer, fragment_url, fragment_ignore_urls
        )

    logger.debug(
        "Built push manifest for %d entries (shell=%s)", len(manifest), shell_url
    )
    return manifest


__all__ = ["build_manifest"]
