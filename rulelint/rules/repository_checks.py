"""Checks that need the complete document set."""

from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from ..config import LintConfig
from ..models import Document, split_lines
from .base import Violation


def is_always_apply(document: Document) -> bool:
    value = document.frontmatter.get("alwaysApply")
    return isinstance(value, str) and value.strip().lower() == "true"


def check_always_apply_overuse(documents: Sequence[Document], config: LintConfig) -> Iterator[Violation]:
    flagged = [document.path for document in documents if is_always_apply(document)]
    limit = config.thresholds.max_always_apply
    if len(flagged) > limit:
        yield Violation(
            f"{len(flagged)} files set alwaysApply: true (limit {limit}); every one of them is loaded "
            "for every request, so scope the rest with globs",
            tuple(flagged),
        )


def _content_lines(body: str) -> List[str]:
    return [line.strip() for line in split_lines(body) if line.strip()]


def _windows(lines: Sequence[str], size: int) -> Dict[Tuple[str, ...], int]:
    windows: Dict[Tuple[str, ...], int] = {}
    for start in range(len(lines) - size + 1):
        windows.setdefault(tuple(lines[start : start + size]), start)
    return windows


def _first_shared(
    first: Dict[Tuple[str, ...], int], second: Dict[Tuple[str, ...], int]
) -> Tuple[str, ...] | None:
    # dicts keep insertion order, which is the window start order
    for window in first:
        if window in second:
            return window
    return None


def find_shared_block(first: Sequence[str], second: Sequence[str], size: int) -> Tuple[str, ...] | None:
    """Return the earliest run of ``size`` identical lines in ``first`` also in ``second``."""
    if size < 1:
        return None
    return _first_shared(_windows(first, size), _windows(second, size))


def check_duplicate_content(documents: Sequence[Document], config: LintConfig) -> Iterator[Violation]:
    size = config.thresholds.min_duplicate_lines
    windows = [_windows(_content_lines(document.body), size) for document in documents]
    for i, first in enumerate(documents):
        if not windows[i]:
            continue
        for j in range(i + 1, len(documents)):
            second = documents[j]
            shared = _first_shared(windows[i], windows[j])
            if shared is None:
                continue
            yield Violation(
                f"{first.path} and {second.path} share a block of {size}+ identical lines "
                f"starting with '{shared[0]}'; keep it in one file",
                (first.path, second.path),
            )


__all__ = [
    "check_always_apply_overuse",
    "check_duplicate_content",
    "find_shared_block",
    "is_always_apply",
]
