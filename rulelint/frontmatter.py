"""Frontmatter extraction for rules and skill documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from .logging import get_logger
from .models import NO_FRONTMATTER, Frontmatter, FrontmatterValue, split_lines

DELIMITER = "---"

_logger = get_logger("frontmatter")


class MalformedFrontmatter(ValueError):
    """Raised when a frontmatter block is opened but never closed."""


@dataclass(frozen=True)
class FrontmatterResult:
    """Outcome of splitting a document into header and body."""

    frontmatter: Frontmatter
    body: str
    error: Optional[str] = None
    duplicate_keys: Tuple[str, ...] = ()


def parse_frontmatter(text: str) -> FrontmatterResult:
    """Split ``text`` into frontmatter and body. Never raises.

    The header is read with PyYAML's ``BaseLoader`` so every scalar stays a
    string and comments, quoting and flow lists follow YAML. Headers YAML
    rejects, such as an unquoted ``globs: **/*.ts``, are read line by line.
    """
    try:
        span = _split(text)
    except MalformedFrontmatter as exc:
        _logger.debug("Degrading to no frontmatter: %s", exc)
        return FrontmatterResult(frontmatter=NO_FRONTMATTER, body=text, error=str(exc))

    if span is None:
        return FrontmatterResult(frontmatter=NO_FRONTMATTER, body=text)

    header_lines, body = span
    parsed = _load_yaml("\n".join(header_lines))
    if parsed is None:
        parsed = _parse_mapping(header_lines)
    fields, duplicates = parsed
    return FrontmatterResult(
        frontmatter=Frontmatter.of(fields),
        body=body,
        duplicate_keys=tuple(duplicates),
    )


def _split(text: str) -> Optional[Tuple[List[str], str]]:
    lines = split_lines(text, keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        return None
    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            header = [line.rstrip("\r\n") for line in lines[1:index]]
            return header, "".join(lines[index + 1 :])
    raise MalformedFrontmatter("frontmatter block opened with '---' but never closed")


def _load_yaml(block: str) -> Optional[Tuple[Dict[str, FrontmatterValue], List[str]]]:
    """Read ``block`` as a YAML mapping, or return None when YAML cannot."""
    try:
        node = yaml.compose(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        _logger.debug("Frontmatter is not valid YAML, reading it line by line: %s", exc)
        return None
    if node is None:
        return {}, []
    if not isinstance(node, yaml.MappingNode):
        return None

    result: Dict[str, FrontmatterValue] = {}
    duplicates: List[str] = []
    for key_node, value_node in node.value:
        if not isinstance(key_node, yaml.ScalarNode) or not key_node.value:
            continue
        key = key_node.value
        if key in result and key not in duplicates:
            duplicates.append(key)
        result[key] = _node_value(value_node)
    return result, duplicates


def _node_value(node: yaml.Node) -> FrontmatterValue:
    if isinstance(node, yaml.ScalarNode):
        return node.value
    if isinstance(node, yaml.SequenceNode):
        return tuple(item.value for item in node.value if isinstance(item, yaml.ScalarNode))
    # Nested mappings carry nothing the rules read.
    return ""


def _parse_mapping(lines: Sequence[str]) -> Tuple[Dict[str, FrontmatterValue], List[str]]:
    result: Dict[str, FrontmatterValue] = {}
    duplicates: List[str] = []
    index = 0
    while index < len(lines):
        raw = lines[index]
        stripped = raw.strip()
        index += 1
        if not stripped or stripped.startswith("#"):
            continue
        current_indent = len(raw) - len(raw.lstrip(" "))
        if current_indent > 0 or ":" not in stripped or stripped.startswith("- "):
            continue
        key_part, value_part = stripped.split(":", 1)
        key = _unquote(key_part.strip())
        value_part = _strip_comment(value_part).strip()
        if not key:
            continue
        if key in result and key not in duplicates:
            duplicates.append(key)

        if value_part:
            if value_part.startswith("[") and value_part.endswith("]"):
                result[key] = tuple(_parse_inline_sequence(value_part))
            else:
                result[key] = _unquote(value_part)
            continue

        items, index = _parse_sequence(lines, index)
        result[key] = tuple(items) if items is not None else ""
    return result, duplicates


def _parse_sequence(lines: Sequence[str], start: int) -> Tuple[Optional[List[str]], int]:
    items: Optional[List[str]] = None
    index = start
    while index < len(lines):
        raw = lines[index]
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            index += 1
            continue
        if not stripped.startswith("-"):
            break
        if stripped != "-" and not stripped.startswith("- "):
            break
        if items is None:
            items = []
        value = _strip_comment(stripped[1:]).strip()
        if value:
            items.append(_unquote(value))
        index += 1
    return items, index


def _parse_inline_sequence(value: str) -> List[str]:
    inner = value[1:-1].strip()
    if not inner:
        return []
    parts: List[str] = []
    current: List[str] = []
    in_quote: Optional[str] = None
    for char in inner:
        if char in {'"', "'"}:
            if in_quote == char:
                in_quote = None
            elif in_quote is None:
                in_quote = char
            current.append(char)
            continue
        if char == "," and in_quote is None:
            part = "".join(current).strip()
            if part:
                parts.append(part)
            current = []
            continue
        current.append(char)
    if current:
        parts.append("".join(current).strip())
    return [_unquote(part) for part in parts if part]


def _strip_comment(value: str) -> str:
    """Drop a YAML trailing comment: `` #`` outside quotes."""
    in_quote: Optional[str] = None
    for index, char in enumerate(value):
        if char in {'"', "'"}:
            if in_quote == char:
                in_quote = None
            elif in_quote is None:
                in_quote = char
        elif char == "#" and in_quote is None and (index == 0 or value[index - 1] in " \t"):
            return value[:index]
    return value


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


__all__ = ["DELIMITER", "FrontmatterResult", "MalformedFrontmatter", "parse_frontmatter"]
