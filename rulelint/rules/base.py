"""Catalog entry types shared by all rules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import LintConfig
from ..models import Document, Finding, Severity


class RuleScope(Enum):
    """Where a rule runs in the pipeline."""

    INTAKE = "intake"
    FILE = "file"
    REPOSITORY = "repository"


@dataclass(frozen=True)
class Violation:
    """A raw hit yielded by a check, before the rule stamps id and severity."""

    message: str
    paths: Tuple[str, ...] = ()


FileCheck = Callable[[Document, LintConfig], Iterable[Violation]]
RepositoryCheck = Callable[[Sequence[Document], LintConfig], Iterable[Violation]]


@dataclass(frozen=True)
class Rule:
    """A catalog entry: identity, severity, and a pure check function."""

    rule_id: str
    severity: Severity
    title: str
    scope: RuleScope
    check: Optional[Union[FileCheck, RepositoryCheck]] = None

    def finding(self, message: str, file_path: str = "", related_paths: Sequence[str] = ()) -> Finding:
        return Finding(
            rule_id=self.rule_id,
            severity=self.severity,
            message=message,
            file_path=file_path,
            related_paths=tuple(related_paths),
        )

    def evaluate(self, document: Document, config: LintConfig) -> List[Finding]:
        """Run a file-scoped rule against one document."""
        if self.scope is not RuleScope.FILE or self.check is None:
            raise TypeError(f"Rule '{self.rule_id}' is not a file rule")
        return [
            self.finding(violation.message, document.path, violation.paths)
            for violation in self.check(document, config)  # type: ignore[arg-type]
        ]

    def evaluate_all(self, documents: Sequence[Document], config: LintConfig) -> List[Finding]:
        """Run a repository-scoped rule against the full document set."""
        if self.scope is not RuleScope.REPOSITORY or self.check is None:
            raise TypeError(f"Rule '{self.rule_id}' is not a repository rule")
        return [
            self.finding(violation.message, "", violation.paths)
            for violation in self.check(documents, config)  # type: ignore[arg-type]
        ]


__all__ = ["FileCheck", "RepositoryCheck", "Rule", "RuleScope", "Violation"]
