"""Renders Reports as Markdown review documents or JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader

from .config import Thresholds
from .models import Finding, Report, Severity

MODE_STANDARD = "standard"
MODE_POSITIVE = "positive"
MODE_EMPTY = "empty"
MODES = (MODE_STANDARD, MODE_POSITIVE, MODE_EMPTY)

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_SCHEMA_VERSION = 1


def select_mode(report: Report) -> str:
    """Pick the template purely from what the report contains."""
    if not report.documents and all(finding.rule_id == "no-rules-found" for finding in report.findings):
        return MODE_EMPTY
    return MODE_STANDARD if report.has_findings else MODE_POSITIVE


class MarkdownReporter:
    """Fills the review templates from a Report."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        title: str = "Rules Review",
        thresholds: Thresholds | None = None,
    ) -> None:
        self.title = title
        self.thresholds = thresholds or Thresholds()
        self._env = self._create_env(templates_dir)

    def render(self, report: Report, mode: Optional[str] = None) -> str:
        resolved = mode or select_mode(report)
        if resolved not in MODES:
            raise ValueError(f"Unknown render mode '{resolved}' (expected one of: {', '.join(MODES)})")
        template = self._env.get_template(f"{resolved}.md.j2")
        rendered = template.render(**self._context(report, resolved))
        return tidy_markdown(rendered)

    def _context(self, report: Report, mode: str) -> Dict[str, object]:
        counts = report.counts_by_severity()
        return {
            "title": self.title,
            "mode": mode,
            "status": _status(counts, mode),
            "thresholds": self.thresholds,
            "checked": set(report.rule_ids),
            "document_count": len(report.documents),
            "finding_count": len(report.findings),
            "counts": [{"label": severity.label, "count": counts[severity]} for severity in Severity],
            "inventory": [
                {
                    "path": document.path,
                    "kind": document.kind.value,
                    "lines": document.line_count,
                    "chars": document.char_count,
                    "findings": len(report.findings_for(document.path)),
                }
                for document in report.documents
            ],
            "file_sections": [
                {"path": path, "findings": [_finding_view(finding) for finding in report.findings_for(path)]}
                for path in report.file_paths()
            ],
            "global_findings": [_finding_view(finding) for finding in report.global_findings()],
            "actions": [
                {
                    "severity": finding.severity.label,
                    "location": f"`{finding.file_path}`" if finding.file_path else "repository",
                    "message": finding.message,
                }
                for finding in sorted(report.findings, key=lambda item: item.severity.rank)
            ],
        }

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_TEMPLATES_DIR))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["cell"] = lambda value: str(value).replace("|", "\\|")
        return env


def render(report: Report, mode: Optional[str] = None) -> str:
    """Render ``report`` as a Markdown review using the bundled templates."""
    return MarkdownReporter().render(report, mode)


def to_dict(report: Report) -> Dict[str, object]:
    counts = report.counts_by_severity()
    return {
        "version": _SCHEMA_VERSION,
        "summary": {
            "documents": len(report.documents),
            "findings": len(report.findings),
            "by_severity": {severity.value: counts[severity] for severity in Severity},
        },
        "rules": list(report.rule_ids),
        "documents": [
            {
                "path": document.path,
                "kind": document.kind.value,
                "lines": document.line_count,
                "chars": document.char_count,
                "has_frontmatter": document.frontmatter.present,
            }
            for document in report.documents
        ],
        "findings": [
            {
                "rule_id": finding.rule_id,
                "severity": finding.severity.value,
                "message": finding.message,
                "file": finding.file_path or None,
                "related_paths": list(finding.related_paths),
            }
            for finding in report.findings
        ],
    }


def render_json(report: Report) -> str:
    return json.dumps(to_dict(report), indent=2) + "\n"


def tidy_markdown(markdown: str) -> str:
    """Collapse blank runs, strip trailing spaces, and keep fenced blocks intact."""
    lines = markdown.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    cleaned: List[str] = []
    in_code = False
    previous_blank = False

    for line in lines:
        stripped = line.rstrip()
        if stripped.startswith("```"):
            in_code = not in_code
            cleaned.append(stripped)
            previous_blank = False
            continue

        if not in_code and not stripped:
            if previous_blank or not cleaned:
                continue
            previous_blank = True
            cleaned.append("")
            continue

        cleaned.append(stripped)
        previous_blank = False

    while cleaned and cleaned[-1] == "":
        cleaned.pop()

    return "\n".join(cleaned) + "\n"


def _finding_view(finding: Finding) -> Dict[str, object]:
    return {
        "severity": finding.severity.label,
        "rule_id": finding.rule_id,
        "message": finding.message,
        "related_paths": list(finding.related_paths),
    }


def _status(counts: Dict[Severity, int], mode: str) -> str:
    if mode == MODE_EMPTY:
        return "No rules files found"
    if counts[Severity.CRITICAL]:
        return "Needs immediate attention"
    if counts[Severity.HIGH]:
        return "Needs work"
    if counts[Severity.MEDIUM] or counts[Severity.LOW]:
        return "Minor improvements suggested"
    return "Healthy"


__all__ = [
    "MODES",
    "MODE_EMPTY",
    "MODE_POSITIVE",
    "MODE_STANDARD",
    "MarkdownReporter",
    "render",
    "render_json",
    "select_mode",
    "tidy_markdown",
    "to_dict",
]
