"""Per-document checks. Each is a pure function of one Document and the config."""

from __future__ import annotations

import re
from typing import Iterator

from ..config import LintConfig
from ..documents import AGENTS_NAME, MISSPELLED_RULES_NAME, in_rules_directory
from ..models import Document, DocumentKind, split_lines
from .base import Violation

KNOWN_MDC_KEYS = ("description", "globs", "alwaysApply")

_CATCH_ALL_GLOBS = {"*", "**", "**/*", "/**/*", "./**/*"}
_EXTENSION_CATCH_ALL = re.compile(r"^(\./|/)?\*\*/\*\.[A-Za-z0-9]+$")
_FENCE = re.compile(r"^\s{0,3}(```|~~~)")


def _is_oversized(document: Document, config: LintConfig) -> bool:
    limits = config.thresholds
    return document.line_count > limits.max_lines or document.char_count > limits.max_chars


def check_oversized(document: Document, config: LintConfig) -> Iterator[Violation]:
    if not _is_oversized(document, config):
        return
    limits = config.thresholds
    yield Violation(
        f"File has {document.line_count} lines and {document.char_count} characters "
        f"(limit {limits.max_lines} lines / {limits.max_chars} characters); split it into focused files"
    )


def check_size_warning(document: Document, config: LintConfig) -> Iterator[Violation]:
    if _is_oversized(document, config):
        return
    limits = config.thresholds
    near_lines = limits.warn_lines <= document.line_count <= limits.max_lines
    near_chars = limits.warn_chars <= document.char_count <= limits.max_chars
    if near_lines or near_chars:
        yield Violation(
            f"File is approaching the size limit ({document.line_count} lines, "
            f"{document.char_count} characters)"
        )


def check_wrong_filename(document: Document, config: LintConfig) -> Iterator[Violation]:
    name = document.name
    if name == MISSPELLED_RULES_NAME:
        yield Violation(f"'{name}' is missing the trailing 's'; rename it to '.builderrules'")
    elif name.lower() == AGENTS_NAME and name != AGENTS_NAME:
        yield Violation(f"'{name}' must be lowercase; rename it to '{AGENTS_NAME}'")
    elif name.lower().endswith(".md") and document.kind is DocumentKind.MDC_RULE and in_rules_directory(
        document.path
    ):
        yield Violation(f"Rules directory files need the '.mdc' extension; rename '{name}'")


def check_malformed_frontmatter(document: Document, config: LintConfig) -> Iterator[Violation]:
    if document.frontmatter_error:
        yield Violation(f"Malformed frontmatter: {document.frontmatter_error}")


def check_missing_frontmatter(document: Document, config: LintConfig) -> Iterator[Violation]:
    if document.kind is DocumentKind.MDC_RULE and not document.frontmatter.present:
        yield Violation("Rule file has no frontmatter block; add description, globs and alwaysApply")


def check_missing_description(document: Document, config: LintConfig) -> Iterator[Violation]:
    frontmatter = document.frontmatter
    if frontmatter.present:
        if not frontmatter.has("description"):
            yield Violation("Frontmatter has no 'description' key")
    elif document.kind is DocumentKind.MDC_RULE:
        yield Violation("Rule file has no 'description' because frontmatter is missing")


def check_missing_skill_name(document: Document, config: LintConfig) -> Iterator[Violation]:
    if document.kind is not DocumentKind.SKILL:
        return
    if not document.frontmatter.present:
        yield Violation("Skill has no frontmatter declaring its 'name'")
    elif not document.frontmatter.get("name"):
        yield Violation("Skill frontmatter has no 'name' key")


def check_vague_content(document: Document, config: LintConfig) -> Iterator[Violation]:
    lowered = document.body.lower()
    matches = [phrase for phrase in config.vague_phrases if phrase.lower() in lowered]
    if matches:
        quoted = ", ".join(f"'{phrase}'" for phrase in matches)
        yield Violation(f"Generic guidance found ({quoted}); replace it with concrete, checkable instructions")


def is_overbroad_glob(pattern: str) -> bool:
    candidate = pattern.strip()
    return candidate in _CATCH_ALL_GLOBS or bool(_EXTENSION_CATCH_ALL.match(candidate))


def check_overbroad_glob(document: Document, config: LintConfig) -> Iterator[Violation]:
    offending = [pattern for pattern in document.frontmatter.as_list("globs") if is_overbroad_glob(pattern)]
    if offending:
        quoted = ", ".join(f"'{pattern}'" for pattern in offending)
        yield Violation(f"Glob {quoted} matches the whole tree; scope it to the directories it applies to")


def check_duplicate_frontmatter_key(document: Document, config: LintConfig) -> Iterator[Violation]:
    for key in document.duplicate_keys:
        yield Violation(f"Frontmatter key '{key}' appears more than once; the last value wins")


def check_unknown_frontmatter_key(document: Document, config: LintConfig) -> Iterator[Violation]:
    if document.kind is not DocumentKind.MDC_RULE:
        return
    unknown = [key for key in document.frontmatter.fields if key not in KNOWN_MDC_KEYS]
    if unknown:
        yield Violation(
            f"Unknown frontmatter keys: {', '.join(unknown)} (expected {', '.join(KNOWN_MDC_KEYS)})"
        )


def count_code_blocks(text: str) -> int:
    """Count fenced code blocks, treating an unclosed fence as a block."""
    blocks = 0
    open_fence: str | None = None
    for line in split_lines(text):
        match = _FENCE.match(line)
        if not match:
            continue
        fence = match.group(1)
        if open_fence is None:
            open_fence = fence
            blocks += 1
        elif fence == open_fence:
            open_fence = None
    return blocks


def check_no_code_examples(document: Document, config: LintConfig) -> Iterator[Violation]:
    if document.kind not in (DocumentKind.MDC_RULE, DocumentKind.SKILL):
        return
    if count_code_blocks(document.body) == 0:
        yield Violation("No fenced code examples; show a good and a bad example")


__all__ = [
    "KNOWN_MDC_KEYS",
    "check_duplicate_frontmatter_key",
    "check_malformed_frontmatter",
    "check_missing_description",
    "check_missing_frontmatter",
    "check_missing_skill_name",
    "check_no_code_examples",
    "check_overbroad_glob",
    "check_oversized",
    "check_size_warning",
    "check_unknown_frontmatter_key",
    "check_vague_content",
    "check_wrong_filename",
    "count_code_blocks",
    "is_overbroad_glob",
]
