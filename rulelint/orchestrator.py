"""Pipeline orchestration: configuration, discovery, then analysis."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from .analyzer import RulesAnalyzer
from .config import LintConfig, load_config
from .discovery import RulesScanner
from .logging import get_logger
from .models import Report
from .rules import Rule


class Orchestrator:
    """Runs a full lint pass over a repository path."""

    def __init__(
        self,
        scanner: RulesScanner | None = None,
        rules: Optional[Iterable[Rule]] = None,
    ) -> None:
        self.scanner = scanner or RulesScanner()
        self._rule_overrides = list(rules) if rules is not None else None
        self.logger = get_logger("orchestrator")

    def load_config(self, path: str | Path) -> LintConfig:
        repo_path = Path(path).expanduser().resolve()
        return load_config(repo_path if repo_path.is_dir() else repo_path.parent)

    def run(self, path: str | Path, *, config: LintConfig | None = None, workers: int | None = None) -> Report:
        """Discover and analyze rules files under ``path``."""
        repo_path = Path(path).expanduser().resolve()
        self.logger.info("Reviewing rules files in %s", repo_path)
        if config is None:
            config = self.load_config(repo_path)
        if workers is not None:
            config = replace(config, workers=workers)

        sources = self.scanner.scan(repo_path, config)
        self.logger.debug("Scanner discovered %d files", len(sources))

        analyzer = RulesAnalyzer(config, rules=self._rule_overrides)
        return analyzer.analyze(sources)


__all__ = ["Orchestrator"]
