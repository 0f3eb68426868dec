"""Filename classification and Document construction."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from .frontmatter import parse_frontmatter
from .models import Document, DocumentKind

ROOT_RULES_NAME = ".builderrules"
AGENTS_NAME = "agents.md"
SKILL_NAME = "skill.md"
RULES_DIR_PARTS = (".builder", "rules")

# Misspellings that still classify, so the wrong-filename rule can flag them.
MISSPELLED_RULES_NAME = ".builderrule"


def normalize_path(path: str) -> str:
    """Return ``path`` as a POSIX-style path without a leading ``./``."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def in_rules_directory(path: str) -> bool:
    """True when ``path`` sits directly inside a ``.builder/rules`` directory."""
    parent = PurePosixPath(normalize_path(path)).parent.parts
    return parent[-2:] == RULES_DIR_PARTS


def classify_kind(path: str) -> Optional[DocumentKind]:
    """Classify a document by its filename, or ``None`` when unrecognized."""
    normalized = normalize_path(path)
    pure = PurePosixPath(normalized)
    name = pure.name
    if name in {ROOT_RULES_NAME, MISSPELLED_RULES_NAME}:
        at_root = pure.parent == PurePosixPath(".")
        return DocumentKind.ROOT_RULES if at_root else DocumentKind.NESTED_RULES
    if pure.suffix == ".mdc":
        return DocumentKind.MDC_RULE
    lowered = name.lower()
    if lowered == AGENTS_NAME:
        return DocumentKind.AGENTS_FILE
    if lowered == SKILL_NAME:
        return DocumentKind.SKILL
    if pure.suffix.lower() == ".md" and in_rules_directory(normalized):
        return DocumentKind.MDC_RULE
    return None


def build_document(path: str, raw_text: str, kind: Optional[DocumentKind] = None) -> Document:
    """Parse ``raw_text`` into an immutable Document."""
    normalized = normalize_path(path)
    resolved_kind = kind or classify_kind(normalized)
    if resolved_kind is None:
        raise ValueError(f"Unrecognized rules file: {normalized}")
    parsed = parse_frontmatter(raw_text)
    return Document(
        path=normalized,
        kind=resolved_kind,
        raw_text=raw_text,
        frontmatter=parsed.frontmatter,
        body=parsed.body,
        frontmatter_error=parsed.error,
        duplicate_keys=parsed.duplicate_keys,
    )


__all__ = [
    "MISSPELLED_RULES_NAME",
    "build_document",
    "classify_kind",
    "in_rules_directory",
    "normalize_path",
]
