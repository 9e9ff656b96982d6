"""Analysis providers."""

from .base import AnalysisResult, AnalysisStatus, Analyzer
from .http import HttpAnalyzer, HttpAnalyzerConfig
from .static import StaticAnalyzer

__all__ = [
    "AnalysisResult",
    "AnalysisStatus",
    "Analyzer",
    "HttpAnalyzer",
    "HttpAnalyzerConfig",
    "StaticAnalyzer",
]
