"""Tests for the analyzer boundary types."""

from __future__ import annotations

from pushmanifest.analyzers.base import AnalysisResult, AnalysisWarning, Document, is_external_package
from tests._fixtures.stub_analyzer import edge


def test_get_features_orders_own_edges_before_imported_ones() -> None:
    child = Document(url="child.html", imports=[edge("child.css", "html-style")])
    parent = Document(
        url="index.html",
        imports=[edge("child.html", "html-import"), edge("app.js", "html-script")],
        imported_documents=[child],
    )

    urls = [e.url for e in parent.get_features(imported=True, external_packages=True)]

    assert urls == ["child.html", "app.js", "child.css"]


def test_get_features_does_not_recurse_past_one_level() -> None:
    grandchild = Document(url="c.html", imports=[edge("deep.css", "html-style")])
    child = Document(url="b.html", imports=[edge("c.html", "html-import")], imported_documents=[grandchild])
    parent = Document(url="a.html", imports=[edge("b.html", "html-import")], imported_documents=[child])

    urls = [e.url for e in parent.get_features(imported=True)]

    assert urls == ["b.html", "c.html"]


def test_is_external_package() -> None:
    assert is_external_package("node_modules/lit/index.js")
    assert is_external_package("/bower_components/polymer/polymer.html")
    assert not is_external_package("src/node_modules_shim.js")


def test_analysis_result_lookup() -> None:
    warning = AnalysisWarning("a.html", "boom")
    result = AnalysisResult({"a.html": warning})

    assert result.get_document("a.html") is warning
    assert result.get_document("b.html") is None
    assert "a.html" in result
