"""Runs the rule catalog over discovered documents and assembles a Report."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import LintConfig
from .documents import build_document, classify_kind, normalize_path
from .logging import get_logger
from .models import Document, Finding, Report, SourceFile
from .rules import NO_RULES_FOUND, UNREADABLE_FILE, UNRECOGNIZED_FILE, Rule, RuleScope, discover_rules

SourceInput = Union[SourceFile, Tuple[str, str]]


class RulesAnalyzer:
    """Coordinates document building, rule evaluation, and finding order."""

    def __init__(
        self,
        config: LintConfig | None = None,
        rules: Optional[Iterable[Rule]] = None,
        workers: int | None = None,
    ) -> None:
        self.config = config or LintConfig()
        if rules is None:
            rules = discover_rules(self.config.rules.enabled, self.config.rules.disabled)
        self.rules = list(rules)
        self.workers = max(1, workers if workers is not None else self.config.workers)
        self.logger = get_logger("analyzer")
        self._file_rules = [rule for rule in self.rules if rule.scope is RuleScope.FILE]
        self._repository_rules = [rule for rule in self.rules if rule.scope is RuleScope.REPOSITORY]
        self._order: Dict[str, int] = {rule.rule_id: index for index, rule in enumerate(self.rules)}
        for rule in (UNREADABLE_FILE, UNRECOGNIZED_FILE, NO_RULES_FOUND):
            self._order.setdefault(rule.rule_id, -1)

    def analyze(self, sources: Iterable[SourceInput]) -> Report:
        """Return a fresh Report for ``sources``; the same input yields an equal Report."""
        inputs = [_coerce_source(source) for source in sources]
        if not inputs:
            self.logger.info("No rules files found")
            return Report(
                documents=(),
                findings=(NO_RULES_FOUND.finding("No rules files found; nothing to review"),),
                rule_ids=self._rule_ids(),
            )

        intake: List[List[Finding]] = [[] for _ in inputs]
        buildable: List[Tuple[int, SourceFile]] = []
        for index, source in enumerate(inputs):
            if source.error is not None or source.text is None:
                reason = source.error or "no content supplied"
                intake[index].append(UNREADABLE_FILE.finding(f"Could not read file: {reason}", source.path))
                continue
            if classify_kind(source.path) is None:
                intake[index].append(
                    UNRECOGNIZED_FILE.finding("Not a recognized rules or skill filename; skipped", source.path)
                )
                continue
            buildable.append((index, source))

        per_file = self._run_file_rules([source for _, source in buildable])
        documents = tuple(document for document, _ in per_file)
        for (index, _), (_, findings) in zip(buildable, per_file):
            intake[index].extend(findings)

        # Repository rules need every document, so they run after the join.
        repository_findings: List[Finding] = []
        for rule in self._repository_rules:
            found = rule.evaluate_all(documents, self.config)
            if found:
                self.logger.debug("Rule %s produced %d findings", rule.rule_id, len(found))
            repository_findings.extend(found)

        ordered: List[Finding] = []
        for group in intake:
            ordered.extend(self._sorted(group))
        ordered.extend(self._sorted(repository_findings))

        self.logger.info(
            "Analyzed %d documents (%d inputs) with %d findings",
            len(documents),
            len(inputs),
            len(ordered),
        )
        return Report(documents=documents, findings=tuple(ordered), rule_ids=self._rule_ids())

    def _rule_ids(self) -> Tuple[str, ...]:
        return tuple(rule.rule_id for rule in self.rules)

    def _run_file_rules(self, sources: Sequence[SourceFile]) -> List[Tuple[Document, List[Finding]]]:
        if self.workers > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                return list(pool.map(self._check_source, sources))
        return [self._check_source(source) for source in sources]

    def _check_source(self, source: SourceFile) -> Tuple[Document, List[Finding]]:
        document = build_document(source.path, source.text or "")
        findings: List[Finding] = []
        for rule in self._file_rules:
            findings.extend(rule.evaluate(document, self.config))
        if findings:
            self.logger.debug("%s: %d findings", document.path, len(findings))
        return document, findings

    def _sorted(self, findings: Sequence[Finding]) -> List[Finding]:
        # sorted() is stable, so emission order survives within a rule.
        return sorted(
            findings,
            key=lambda finding: (finding.severity.rank, self._order.get(finding.rule_id, len(self._order))),
        )


def analyze(sources: Iterable[SourceInput], config: LintConfig | None = None) -> Report:
    """Analyze ``(path, text)`` pairs or SourceFile records with the default catalog."""
    return RulesAnalyzer(config).analyze(sources)


def _coerce_source(source: SourceInput) -> SourceFile:
    if isinstance(source, SourceFile):
        return SourceFile(path=normalize_path(source.path), text=source.text, error=source.error)
    path, text = source
    return SourceFile(path=normalize_path(path), text=text)


__all__ = ["RulesAnalyzer", "SourceInput", "analyze"]
