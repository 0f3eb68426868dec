"""Repository walking that finds and reads rules and skill files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import LintConfig, load_config
from .documents import classify_kind
from .logging import get_logger
from .models import SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    ".idea",
    ".next",
    "dist",
    "build",
}

_logger = get_logger("discovery")


class UnreadableFile(OSError):
    """Raised when a discovered file cannot be read as UTF-8 text."""


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .rulelint.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_ignore_lines(lines: Sequence[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def load_ignore_rules(root: Path, config: LintConfig) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        try:
            rules.extend(_parse_ignore_lines(gitignore.read_text(encoding="utf-8").splitlines()))
        except (OSError, UnicodeDecodeError) as exc:
            _logger.warning("Ignoring unreadable .gitignore: %s", exc)
    rules.extend(_parse_ignore_lines(config.exclude_paths))
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def is_candidate(rel_path: str) -> bool:
    """True when ``rel_path`` names a rules, agents, or skill document."""
    return classify_kind(rel_path) is not None


def _iter_candidates(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if not is_candidate(rel_path):
                continue
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


def read_source(path: Path) -> str:
    """Read ``path`` as UTF-8, raising UnreadableFile on any failure."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise UnreadableFile(f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise UnreadableFile(exc.strerror or str(exc)) from exc


class RulesScanner:
    """Walks a repository and reads every rules, agents, and skill file."""

    def scan(self, root: str | Path, config: LintConfig | None = None) -> List[SourceFile]:
        """Return discovered files in walk order; unreadable ones carry an error."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        if config is None:
            config = load_config(root_path)
        rules = load_ignore_rules(root_path, config)

        sources: List[SourceFile] = []
        for rel_path in _iter_candidates(root_path, rules):
            try:
                text = read_source(root_path / rel_path)
            except UnreadableFile as exc:
                _logger.warning("Could not read %s: %s", rel_path, exc)
                sources.append(SourceFile(path=rel_path, error=str(exc)))
                continue
            sources.append(SourceFile(path=rel_path, text=text))

        _logger.debug("Discovered %d rules files under %s", len(sources), root_path)
        return sources


__all__ = ["IgnoreRule", "RulesScanner", "UnreadableFile", "is_candidate", "load_ignore_rules", "read_source"]
