"""Core data models shared across rulelint components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

FrontmatterValue = Union[str, Tuple[str, ...]]


def split_lines(text: str, *, keepends: bool = False) -> List[str]:
    """Split on newlines only, so form feeds and U+2028 stay inside their line."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    if keepends:
        lines = [line + "\n" for line in lines]
        if not text.endswith("\n"):
            lines[-1] = lines[-1][:-1]
    return lines


class DocumentKind(Enum):
    """Closed set of configuration document kinds, keyed by filename."""

    ROOT_RULES = "root-rules"
    NESTED_RULES = "nested-rules"
    MDC_RULE = "mdc-rule"
    AGENTS_FILE = "agents-file"
    SKILL = "skill"


class Severity(Enum):
    """Finding severity, ordered from most to least urgent."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> "Severity":
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(item.value for item in cls)
            raise ValueError(f"Unknown severity '{value}' (expected one of: {choices})") from None


_SEVERITY_RANKS = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


@dataclass(frozen=True)
class Frontmatter:
    """Parsed header block; ``present`` distinguishes an empty block from none."""

    present: bool
    fields: Mapping[str, FrontmatterValue] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def absent(cls) -> "Frontmatter":
        return NO_FRONTMATTER

    @classmethod
    def of(cls, fields: Mapping[str, FrontmatterValue]) -> "Frontmatter":
        return cls(present=True, fields=MappingProxyType(dict(fields)))

    def get(self, key: str) -> Optional[FrontmatterValue]:
        return self.fields.get(key)

    def has(self, key: str) -> bool:
        return key in self.fields

    def as_list(self, key: str) -> List[str]:
        """Return a field as a list, splitting comma-separated scalars."""
        value = self.fields.get(key)
        if value is None:
            return []
        if isinstance(value, tuple):
            return [item for item in value if item]
        return [part.strip() for part in value.split(",") if part.strip()]


NO_FRONTMATTER = Frontmatter(present=False)


@dataclass(frozen=True)
class Document:
    """One parsed rules or skill file. Size metrics derive from ``raw_text``."""

    path: str
    kind: DocumentKind
    raw_text: str
    frontmatter: Frontmatter
    body: str
    frontmatter_error: Optional[str] = None
    duplicate_keys: Tuple[str, ...] = ()

    @property
    def line_count(self) -> int:
        return len(split_lines(self.raw_text))

    @property
    def char_count(self) -> int:
        return len(self.raw_text)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class SourceFile:
    """A discovered file handed to the analyzer; ``error`` marks unreadable input."""

    path: str
    text: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Finding:
    """A single issue reported by one catalog rule."""

    rule_id: str
    severity: Severity
    message: str
    file_path: str = ""
    related_paths: Tuple[str, ...] = ()

    @property
    def is_global(self) -> bool:
        return not self.file_path


@dataclass(frozen=True)
class Report:
    """Outcome of one analysis run. ``rule_ids`` lists the catalog rules that ran."""

    documents: Tuple[Document, ...] = ()
    findings: Tuple[Finding, ...] = ()
    rule_ids: Tuple[str, ...] = ()

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def counts_by_severity(self) -> Dict[Severity, int]:
        counts = {severity: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts

    def findings_for(self, path: str) -> List[Finding]:
        return [finding for finding in self.findings if finding.file_path == path]

    def global_findings(self) -> List[Finding]:
        return [finding for finding in self.findings if finding.is_global]

    def file_paths(self) -> List[str]:
        """Paths with file-level findings, in report order."""
        ordered: List[str] = []
        for finding in self.findings:
            if finding.file_path and finding.file_path not in ordered:
                ordered.append(finding.file_path)
        return ordered

    def at_or_above(self, threshold: Severity) -> Sequence[Finding]:
        return [finding for finding in self.findings if finding.severity.rank <= threshold.rank]


__all__ = [
    "Document",
    "DocumentKind",
    "Finding",
    "Frontmatter",
    "FrontmatterValue",
    "NO_FRONTMATTER",
    "Report",
    "Severity",
    "SourceFile",
    "split_lines",
]
