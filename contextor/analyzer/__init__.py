"""Project analysis: type, frameworks, languages and layout detection."""

from contextor.analyzer.analyzer import ProjectAnalyzer
from contextor.analyzer.models import ProjectAnalysis

__all__ = [
    "ProjectAnalysis",
    "ProjectAnalyzer",
]
