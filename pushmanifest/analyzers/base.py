"""Contracts for document analyzers consumed by manifest resolution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Union

from ..models import ImportEdge

EXTERNAL_PACKAGE_DIRS = ("node_modules", "bower_components")


@dataclass
class AnalysisWarning:
    """Returned in place of a document that could not be produced."""

    url: str
    message: str


@dataclass
class Document:
    """An analyzed document and the import edges found in it.

    ``imported_documents`` holds the documents this one directly imports, when
    the analyzer was able to parse them.
    """

    url: str
    imports: List[ImportEdge] = field(default_factory=list)
    imported_documents: List["Document"] = field(default_factory=list)

    def get_features(
        self,
        kind: str = "import",
        *,
        external_packages: bool = False,
        imported: bool = False,
    ) -> List[ImportEdge]:
        """Return features of ``kind``; only ``"import"`` is supported."""
        if kind != "import":
            return []
        edges = list(self.imports)
        if imported:
            for child in self.imported_documents:
                edges.extend(child.imports)
        if not external_packages:
            edges = [edge for edge in edges if not is_external_package(edge.url)]
        return edges


DocumentOrWarning = Union[Document, AnalysisWarning]


class AnalysisResult:
    """Documents produced by one ``Analyzer.analyze`` call, keyed by URL."""

    def __init__(self, documents: Mapping[str, DocumentOrWarning] | None = None) -> None:
        self._documents: Dict[str, DocumentOrWarning] = dict(documents or {})

    def get_document(self, url: str) -> Optional[DocumentOrWarning]:
        return self._documents.get(url)

    def __contains__(self, url: object) -> bool:
        return url in self._documents


class Analyzer(ABC):
    """Contract for analyzers that parse documents and report their imports."""

    @abstractmethod
    async def analyze(self, urls: Sequence[str]) -> AnalysisResult:
        """Analyze ``urls`` and return their documents or warnings."""


def is_external_package(url: str) -> bool:
    segments = url.split("/")
    return any(segment in EXTERNAL_PACKAGE_DIRS for segment in segments)


__all__ = [
    "AnalysisResult",
    "AnalysisWarning",
    "Analyzer",
    "Document",
    "DocumentOrWarning",
    "is_external_package",
]
