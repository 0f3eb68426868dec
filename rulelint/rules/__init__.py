"""Rule catalog and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Iterable, List, Sequence, Set

from ..models import Severity
from .base import FileCheck, RepositoryCheck, Rule, RuleScope, Violation
from .file_checks import (
    check_duplicate_frontmatter_key,
    check_malformed_frontmatter,
    check_missing_description,
    check_missing_frontmatter,
    check_missing_skill_name,
    check_no_code_examples,
    check_overbroad_glob,
    check_oversized,
    check_size_warning,
    check_unknown_frontmatter_key,
    check_vague_content,
    check_wrong_filename,
)
from .repository_checks import check_always_apply_overuse, check_duplicate_content

_ENTRY_POINT_GROUP = "rulelint.rules"

UNREADABLE_FILE = Rule("unreadable-file", Severity.HIGH, "Unreadable file", RuleScope.INTAKE)
UNRECOGNIZED_FILE = Rule("unrecognized-file", Severity.LOW, "Unrecognized file", RuleScope.INTAKE)
NO_RULES_FOUND = Rule("no-rules-found", Severity.LOW, "No rules files found", RuleScope.INTAKE)

# Declaration order breaks severity ties when findings are sorted.
CATALOG: tuple[Rule, ...] = (
    UNREADABLE_FILE,
    UNRECOGNIZED_FILE,
    NO_RULES_FOUND,
    Rule("oversized-file", Severity.CRITICAL, "Oversized file", RuleScope.FILE, check_oversized),
    Rule("size-warning", Severity.MEDIUM, "Size warning", RuleScope.FILE, check_size_warning),
    Rule("wrong-filename", Severity.CRITICAL, "Wrong filename", RuleScope.FILE, check_wrong_filename),
    Rule(
        "malformed-frontmatter",
        Severity.HIGH,
        "Malformed frontmatter",
        RuleScope.FILE,
        check_malformed_frontmatter,
    ),
    Rule("missing-frontmatter", Severity.HIGH, "Missing frontmatter", RuleScope.FILE, check_missing_frontmatter),
    Rule("missing-description", Severity.HIGH, "Missing description", RuleScope.FILE, check_missing_description),
    Rule("missing-skill-name", Severity.HIGH, "Missing skill name", RuleScope.FILE, check_missing_skill_name),
    Rule("vague-content", Severity.HIGH, "Vague content", RuleScope.FILE, check_vague_content),
    Rule("overbroad-glob", Severity.MEDIUM, "Overbroad glob", RuleScope.FILE, check_overbroad_glob),
    Rule(
        "duplicate-frontmatter-key",
        Severity.LOW,
        "Duplicate frontmatter key",
        RuleScope.FILE,
        check_duplicate_frontmatter_key,
    ),
    Rule(
        "unknown-frontmatter-key",
        Severity.LOW,
        "Unknown frontmatter key",
        RuleScope.FILE,
        check_unknown_frontmatter_key,
    ),
    Rule("no-code-examples", Severity.LOW, "No code examples", RuleScope.FILE, check_no_code_examples),
    Rule(
        "always-apply-overuse",
        Severity.CRITICAL,
        "alwaysApply overuse",
        RuleScope.REPOSITORY,
        check_always_apply_overuse,
    ),
    Rule(
        "duplicate-content",
        Severity.MEDIUM,
        "Cross-file duplicate",
        RuleScope.REPOSITORY,
        check_duplicate_content,
    ),
)

_INTAKE_IDS = {rule.rule_id for rule in CATALOG if rule.scope is RuleScope.INTAKE}


def get_rule(rule_id: str) -> Rule:
    for rule in CATALOG:
        if rule.rule_id == rule_id:
            return rule
    raise KeyError(rule_id)


def discover_rules(
    enabled: Sequence[str] | None = None,
    disabled: Sequence[str] | None = None,
) -> List[Rule]:
    """Return catalog rules in declaration order, then plugin rules, honoring selections.

    Intake rules are always kept; they describe the input rather than judge it.
    """
    enabled_set: Set[str] | None = {name.lower() for name in enabled} if enabled else None
    disabled_set: Set[str] = {name.lower() for name in disabled or ()}

    candidates: List[Rule] = list(CATALOG)
    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load rule entry point '{entry.name}': {exc}") from exc
        candidates.append(_coerce_rule(entry.name, loaded))

    known = {rule.rule_id for rule in candidates}
    unknown = sorted(((enabled_set or set()) | disabled_set) - known)
    if unknown:
        raise ValueError(f"Unknown rules requested: {', '.join(unknown)}")

    rules: List[Rule] = []
    seen: Set[str] = set()
    for rule in candidates:
        key = rule.rule_id
        if key in seen:
            continue
        seen.add(key)
        if key not in _INTAKE_IDS:
            if enabled_set is not None and key not in enabled_set:
                continue
            if key in disabled_set:
                continue
        rules.append(rule)
    return rules


def _coerce_rule(name: str, obj: object) -> Rule:
    if isinstance(obj, Rule):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, Rule):
            return instance
    raise TypeError(f"Rule entry point '{name}' must be a Rule or a factory returning one")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "CATALOG",
    "FileCheck",
    "NO_RULES_FOUND",
    "RepositoryCheck",
    "Rule",
    "RuleScope",
    "UNREADABLE_FILE",
    "UNRECOGNIZED_FILE",
    "Violation",
    "discover_rules",
    "get_rule",
]
