"""Document analyzers that report import edges for manifest resolution."""

from __future__ import annotations

from .base import AnalysisResult, AnalysisWarning, Analyzer, Document, is_external_package
from .static import StaticAnalyzer, resolve_reference

__all__ = [
    "AnalysisResult",
    "AnalysisWarning",
    "Analyzer",
    "Document",
    "StaticAnalyzer",
    "is_external_package",
    "resolve_reference",
]
