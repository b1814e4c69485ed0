"""Tests for the StaticAnalyzer default analyzer."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict

import pytest

from pushmanifest.analyzers.base import AnalysisWarning, Document
from pushmanifest.analyzers.static import StaticAnalyzer, resolve_reference
from pushmanifest.loader import FileMapUrlLoader
from pushmanifest.models import SourceFile


def _analyzer(files: Dict[str, str]) -> StaticAnalyzer:
    mapping = {
        url: SourceFile(path=Path("/app") / url, contents=text.encode("utf-8"))
        for url, text in files.items()
    }
    return StaticAnalyzer(FileMapUrlLoader(mapping))


def _document(analyzer: StaticAnalyzer, url: str):
    return asyncio.run(analyzer.analyze([url])).get_document(url)


def _edges(document: Document, **options):
    return [(edge.url, sorted(edge.kinds)) for edge in document.get_features("import", **options)]


def test_html_references_are_tagged_by_kind() -> None:
    analyzer = _analyzer(
        {
            "index.html": """
<html>
<head>
  <link rel="import" href="elements/app.html">
  <link rel="import" type="css" href="theme.css">
  <link rel="stylesheet" href="/css/main.css">
  <link rel="preload" href="fonts/roboto.woff2" as="font">
  <link rel="icon" href="favicon.png">
  <link rel="canonical" href="https://example.com/">
  <script src="js/app.js"></script>
  <script>var inline = "ignored.js";</script>
</head>
<body><img src="img/hero.jpg"><a href="about.html">About</a></body>
</html>
""",
        }
    )

    document = _document(analyzer, "index.html")

    assert isinstance(document, Document)
    assert _edges(document) == [
        ("elements/app.html", ["html-import"]),
        ("theme.css", ["html-style"]),
        ("css/main.css", ["html-style"]),
        ("fonts/roboto.woff2", ["html-preload"]),
        ("favicon.png", ["html-image"]),
        ("js/app.js", ["html-script"]),
        ("img/hero.jpg", ["html-image"]),
    ]


def test_inline_style_and_module_script_are_scanned() -> None:
    analyzer = _analyzer(
        {
            "src/page.html": """
<style>@import "page.css"; .hero { background: url('../img/bg.png'); }</style>
<script type="module">
  import { run } from './main.js';
  import 'lit';
</script>
""",
        }
    )

    document = _document(analyzer, "src/page.html")

    assert _edges(document) == [
        ("src/page.css", ["css-import"]),
        ("img/bg.png", ["css-url"]),
        ("src/main.js", ["js-import"]),
    ]


def test_css_imports_urls_and_comments() -> None:
    analyzer = _analyzer(
        {
            "css/app.css": """
/* @import "commented.css"; */
@import url("base.css");
@import 'print.css' print;
@font-face { src: url(../fonts/body.woff2) format("woff2"); }
.logo { background: url("data:image/png;base64,AAAA"); }
.remote { background: url(https://cdn.example.com/x.png); }
""",
        }
    )

    document = _document(analyzer, "css/app.css")

    assert _edges(document) == [
        ("css/base.css", ["css-import"]),
        ("css/print.css", ["css-import"]),
        ("fonts/body.woff2", ["css-url"]),
    ]


def test_js_static_and_dynamic_imports() -> None:
    analyzer = _analyzer(
        {
            "js/app.js": """
import { a } from './a.js';
import b from "../lib/b.js";
import './side-effect.js';
export * from './reexport.js';
import React from 'react';
const lazy = () => import('./lazy.js');
""",
        }
    )

    document = _document(analyzer, "js/app.js")

    assert [url for url, _ in _edges(document)] == [
        "js/a.js",
        "lib/b.js",
        "js/side-effect.js",
        "js/reexport.js",
        "js/lazy.js",
    ]


def test_imported_flag_adds_one_level_of_child_edges() -> None:
    analyzer = _analyzer(
        {
            "index.html": '<link rel="import" href="a.html">',
            "a.html": '<link rel="import" href="b.html"><script src="a.js"></script>',
            "b.html": '<script src="b.js"></script>',
            "a.js": "",
        }
    )

    document = _document(analyzer, "index.html")

    assert [url for url, _ in _edges(document)] == ["a.html"]
    assert [url for url, _ in _edges(document, imported=True)] == ["a.html", "b.html", "a.js"]


def test_external_packages_are_filtered_unless_requested() -> None:
    analyzer = _analyzer(
        {
            "index.html": """
<script src="node_modules/lit/lit.js"></script>
<link rel="import" href="bower_components/polymer/polymer.html">
<script src="app.js"></script>
""",
        }
    )

    document = _document(analyzer, "index.html")

    assert [url for url, _ in _edges(document)] == ["app.js"]
    assert len(_edges(document, external_packages=True)) == 3


def test_missing_document_yields_warning() -> None:
    analyzer = _analyzer({})

    result = _document(analyzer, "index.html")

    assert isinstance(result, AnalysisWarning)
    assert "index.html" in result.message


def test_unsupported_document_type_yields_warning() -> None:
    analyzer = _analyzer({"logo.png": "binary"})

    result = _document(analyzer, "logo.png")

    assert isinstance(result, AnalysisWarning)
    assert result.message.startswith("Unsupported document type")


def test_missing_children_are_skipped() -> None:
    analyzer = _analyzer({"index.html": '<link rel="stylesheet" href="gone.css">'})

    document = _document(analyzer, "index.html")

    assert isinstance(document, Document)
    assert document.imported_documents == []
    assert [url for url, _ in _edges(document, imported=True)] == ["gone.css"]


def test_non_import_features_are_empty() -> None:
    analyzer = _analyzer({"index.html": '<script src="a.js"></script>'})

    document = _document(analyzer, "index.html")

    assert document.get_features("element") == []


@pytest.mark.parametrize(
    ("base", "reference", "expected"),
    [
        ("index.html", "css/app.css", "css/app.css"),
        ("src/views/page.html", "../shared.css", "src/shared.css"),
        ("src/page.html", "/img/logo.png", "img/logo.png"),
        ("src/page.html", "/", None),
        ("src/page.html", "./app.js?v=2#top", "src/app.js"),
        ("index.html", "https://cdn.example.com/a.js", None),
        ("index.html", "//cdn.example.com/a.js", None),
        ("index.html", "data:image/png;base64,AAAA", None),
        ("index.html", "#section", None),
        ("index.html", "   ", None),
    ],
)
def test_resolve_reference(base: str, reference: str, expected) -> None:
    assert resolve_reference(base, reference) == expected
