"""Per-entry dependency resolution."""

from __future__ import annotations

from typing import Iterable, Optional

from .analyzers.base import Analyzer, Document
from .classifier import classify_import
from .logging import get_logger
from .models import PUSH_WEIGHT, ImportEdge, PushManifestEntry, PushManifestEntryCollection

logger = get_logger("resolver")


class ResolutionError(RuntimeError):
    """Raised when the analyzer cannot produce a document for an entry URL."""

    def __init__(self, url: str, reason: Optional[str] = None) -> None:
        self.url = url
        self.reason = reason or "unknown"
        super().__init__(f"Unable to get document {url}: {self.reason}")


def create_entry(edge: ImportEdge) -> PushManifestEntry:
    return PushManifestEntry(type=classify_import(edge), weight=PUSH_WEIGHT)


async def resolve_entry(
    analyzer: Analyzer,
    url: str,
    ignore_urls: Optional[Iterable[str]] = None,
) -> PushManifestEntryCollection:
    """Analyze ``url`` and return the push entries for its imports.

    Imports whose URL is in ``ignore_urls`` are skipped. When the same URL is
    imported more than once the first classification is kept. URLs are
    returned as the analyzer reports them.
    """
    analysis = await analyzer.analyze([url])
    document = analysis.get_document(url)
    if not isinstance(document, Document):
        reason = getattr(document, "message", None) if document is not None else None
        raise ResolutionError(url, reason)

    ignored = set(ignore_urls or ())
    entries: PushManifestEntryCollection = {}
    for edge in document.get_features("import", external_packages=True, imported=True):
        # TODO: honour the document's <base href> when the analyzer starts reporting it.
        if edge.url in ignored:
            logger.debug("Ignoring %s for %s", edge.url, url)
            continue
        if edge.url in entries:
            continue
        entries[edge.url] = create_entry(edge)

    logger.debug("Resolved %d push dependencies for %s", len(entries), url)
    return entries


__all__ = ["ResolutionError", "create_entry", "resolve_entry"]
