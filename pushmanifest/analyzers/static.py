"""Regex and html.parser based analyzer for HTML, CSS and JavaScript documents."""

from __future__ import annotations

import posixpath
import re
from html.parser import HTMLParser
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from .base import AnalysisResult, AnalysisWarning, Analyzer, Document, DocumentOrWarning
from ..loader import UrlLoader, UrlNotFoundError
from ..logging import get_logger
from ..models import ImportEdge

Reference = Tuple[str, str]

_CSS_COMMENT = re.compile(r"/\*.*?\*/", re.S)
_CSS_IMPORT = re.compile(
    r"""@import\s+(?:url\(\s*)?(["']?)([^"')\s;]+)\1\s*\)?[^;]*;?""",
    re.I,
)
_CSS_URL = re.compile(r"""url\(\s*(["']?)([^"')]+?)\1\s*\)""", re.I)

_JS_FROM = re.compile(r"""\b(?:import|export)\s[^'";]*?\bfrom\s*(["'])([^"']+)\1""")
_JS_SIDE_EFFECT = re.compile(r"""\bimport\s*(["'])([^"']+)\1""")
_JS_DYNAMIC = re.compile(r"""\bimport\(\s*(["'])([^"']+)\1\s*\)""")

# Edge kinds whose targets are analyzed as documents in their own right.
_DOCUMENT_KINDS = frozenset(
    {"html-import", "html-style", "html-script", "css-import", "js-import"}
)


def _css_references(text: str) -> List[Reference]:
    text = _CSS_COMMENT.sub("", text)
    references: List[Reference] = []
    import_spans: List[Tuple[int, int]] = []
    for match in _CSS_IMPORT.finditer(text):
        import_spans.append(match.span())
        references.append((match.group(2), "css-import"))
    for match in _CSS_URL.finditer(text):
        start = match.start()
        if any(low <= start < high for low, high in import_spans):
            continue
        references.append((match.group(2), "css-url"))
    return references


def _js_references(text: str) -> List[Reference]:
    found: List[Tuple[int, str]] = []
    for pattern in (_JS_FROM, _JS_SIDE_EFFECT, _JS_DYNAMIC):
        for match in pattern.finditer(text):
            specifier = match.group(2)
            # Bare specifiers need package resolution, which is out of reach here.
            if not specifier.startswith((".", "/")):
                continue
            found.append((match.start(2), specifier))
    found.sort()
    return [(specifier, "js-import") for _, specifier in found]


class _HtmlReferenceCollector(HTMLParser):
    """Collects import-like references from an HTML document in source order."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.references: List[Reference] = []
        self._inline_tag: Optional[str] = None
        self._inline_parser: Optional[Callable[[str], List[Reference]]] = None
        self._buffer: List[str] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attr_map = {name.lower(): (value or "") for name, value in attrs if name}
        if tag == "link":
            self._handle_link(attr_map)
        elif tag == "script":
            src = attr_map.get("src", "").strip()
            if src:
                self.references.append((src, "html-script"))
            elif attr_map.get("type", "").lower() == "module":
                self._start_inline("script", _js_references)
        elif tag == "style":
            self._start_inline("style", _css_references)
        elif tag == "img":
            src = attr_map.get("src", "").strip()
            if src:
                self.references.append((src, "html-image"))

    def handle_data(self, data: str) -> None:
        if self._inline_tag is not None:
            self._buffer.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag != self._inline_tag or self._inline_parser is None:
            return
        self.references.extend(self._inline_parser("".join(self._buffer)))
        self._inline_tag = None
        self._inline_parser = None
        self._buffer = []

    def _start_inline(self, tag: str, parser: Callable[[str], List[Reference]]) -> None:
        self._inline_tag = tag
        self._inline_parser = parser
        self._buffer = []

    def _handle_link(self, attr_map: Dict[str, str]) -> None:
        href = attr_map.get("href", "").strip()
        if not href:
            return
        rel = set(attr_map.get("rel", "").lower().split())
        if "import" in rel:
            kind = "html-style" if attr_map.get("type", "").lower() == "css" else "html-import"
        elif "stylesheet" in rel:
            kind = "html-style"
        elif rel & {"preload", "modulepreload"}:
            kind = "html-preload"
        elif "icon" in rel:
            kind = "html-image"
        else:
            return
        self.references.append((href, kind))


def _html_references(text: str) -> List[Reference]:
    collector = _HtmlReferenceCollector()
    collector.feed(text)
    collector.close()
    return collector.references


_PARSERS: Dict[str, Callable[[str], List[Reference]]] = {
    ".html": _html_references,
    ".htm": _html_references,
    ".css": _css_references,
    ".js": _js_references,
    ".mjs": _js_references,
}


def resolve_reference(base_url: str, reference: str) -> Optional[str]:
    """Resolve ``reference`` found in ``base_url`` to a package URL.

    Returns None for references that do not point into the package: anything
    with a scheme or host, fragment-only links and empty paths. Rooted paths
    are made root-relative so they share one spelling with relative references
    and with URLs derived from file paths.
    """
    reference = reference.strip()
    if not reference or reference.startswith("#"):
        return None
    parts = urlsplit(reference)
    if parts.scheme or parts.netloc or not parts.path:
        return None
    if parts.path.startswith("/"):
        resolved = posixpath.normpath(parts.path).lstrip("/")
    else:
        resolved = posixpath.normpath(posixpath.join(posixpath.dirname(base_url), parts.path))
    return resolved or None


class StaticAnalyzer(Analyzer):
    """Analyzes documents served by a :class:`UrlLoader` without executing them."""

    def __init__(self, url_loader: UrlLoader) -> None:
        self._loader = url_loader
        self._parsed: Dict[str, DocumentOrWarning] = {}
        self.logger = get_logger("analyzer")

    async def analyze(self, urls: Sequence[str]) -> AnalysisResult:
        documents: Dict[str, DocumentOrWarning] = {}
        for url in urls:
            documents[url] = self._analyze_url(url)
        return AnalysisResult(documents)

    def _analyze_url(self, url: str) -> DocumentOrWarning:
        parsed = self._parse(url)
        if not isinstance(parsed, Document):
            return parsed
        document = Document(url=parsed.url, imports=list(parsed.imports))
        seen = {url}
        for edge in parsed.imports:
            if edge.url in seen or not edge.kinds & _DOCUMENT_KINDS:
                continue
            seen.add(edge.url)
            child = self._parse(edge.url)
            if isinstance(child, Document):
                document.imported_documents.append(child)
            else:
                self.logger.debug("Skipping imported document %s: %s", edge.url, child.message)
        return document

    def _parse(self, url: str) -> DocumentOrWarning:
        cached = self._parsed.get(url)
        if cached is not None:
            return cached

        extension = posixpath.splitext(urlsplit(url).path)[1].lower()
        parser = _PARSERS.get(extension)
        if parser is None:
            result: DocumentOrWarning = AnalysisWarning(url, f"Unsupported document type: {url}")
        else:
            try:
                text = self._loader.load(url)
            except UrlNotFoundError as exc:
                result = AnalysisWarning(url, str(exc))
            else:
                result = Document(url=url, imports=self._edges(url, parser(text)))

        self._parsed[url] = result
        return result

    @staticmethod
    def _edges(url: str, references: Sequence[Reference]) -> List[ImportEdge]:
        edges: List[ImportEdge] = []
        for reference, kind in references:
            resolved = resolve_reference(url, reference)
            if resolved is None:
                continue
            edges.append(ImportEdge(url=resolved, kinds=frozenset({kind})))
        return edges


__all__ = ["StaticAnalyzer", "resolve_reference"]
