"""Configuration loading for rulelint (.rulelint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".rulelint.yml"

DEFAULT_VAGUE_PHRASES = (
    "write clean code",
    "follow best practices",
    "be consistent",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class Thresholds:
    """Size and count limits used by the rule catalog."""

    max_lines: int = 200
    max_chars: int = 6000
    warn_lines: int = 150
    warn_chars: int = 5000
    max_always_apply: int = 5
    min_duplicate_lines: int = 5


@dataclass(frozen=True)
class RuleSelection:
    """Rule enablement by id; an empty ``enabled`` list means all rules."""

    enabled: List[str] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LintConfig:
    """Represents the settings defined in .rulelint.yml."""

    root: Optional[Path] = None
    thresholds: Thresholds = field(default_factory=Thresholds)
    vague_phrases: Sequence[str] = DEFAULT_VAGUE_PHRASES
    rules: RuleSelection = field(default_factory=RuleSelection)
    exclude_paths: List[str] = field(default_factory=list)
    workers: int = 1


def load_config(config_path: Path) -> LintConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LintConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = Thresholds()
    threshold_data = _as_dict(data.get("thresholds"))
    thresholds = Thresholds(
        max_lines=_positive_int(threshold_data, "max_lines", defaults.max_lines),
        max_chars=_positive_int(threshold_data, "max_chars", defaults.max_chars),
        warn_lines=_positive_int(threshold_data, "warn_lines", defaults.warn_lines),
        warn_chars=_positive_int(threshold_data, "warn_chars", defaults.warn_chars),
        max_always_apply=_positive_int(threshold_data, "max_always_apply", defaults.max_always_apply),
        min_duplicate_lines=_positive_int(
            threshold_data, "min_duplicate_lines", defaults.min_duplicate_lines
        ),
    )
    if thresholds.warn_lines > thresholds.max_lines:
        raise ConfigError("thresholds.warn_lines must not exceed thresholds.max_lines")
    if thresholds.warn_chars > thresholds.max_chars:
        raise ConfigError("thresholds.warn_chars must not exceed thresholds.max_chars")

    vague_phrases: Sequence[str] = DEFAULT_VAGUE_PHRASES
    if "vague_phrases" in data:
        vague_phrases = tuple(phrase for phrase in _as_str_list(data.get("vague_phrases")) if phrase.strip())

    rules_data = _as_dict(data.get("rules"))
    rules = RuleSelection(
        enabled=_as_str_list(rules_data.get("enabled")),
        disabled=_as_str_list(rules_data.get("disabled")),
    )

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        raise ConfigError("workers must be at least 1")

    return LintConfig(
        root=root,
        thresholds=thresholds,
        vague_phrases=vague_phrases,
        rules=rules,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        workers=workers or 1,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _positive_int(data: Dict[str, Any], key: str, default: int) -> int:
    if key not in data:
        return default
    value = _as_int(data.get(key))
    if value is None or value < 1:
        raise ConfigError(f"thresholds.{key} must be a positive integer")
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_VAGUE_PHRASES",
    "LintConfig",
    "RuleSelection",
    "Thresholds",
    "load_config",
]
