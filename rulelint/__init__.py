"""Static analysis for AI assistant rules and skill files."""

from .analyzer import RulesAnalyzer, analyze
from .models import Document, DocumentKind, Finding, Frontmatter, Report, Severity, SourceFile
from .reporter import render, render_json

__version__ = "0.1.0"

__all__ = [
    "Document",
    "DocumentKind",
    "Finding",
    "Frontmatter",
    "Report",
    "RulesAnalyzer",
    "Severity",
    "SourceFile",
    "analyze",
    "render",
    "render_json",
]
