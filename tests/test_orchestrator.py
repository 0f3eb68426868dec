"""Tests for rulelint.orchestrator."""

from __future__ import annotations

from rulelint.config import LintConfig
from rulelint.models import SourceFile
from rulelint.orchestrator import Orchestrator
from rulelint.rules import get_rule


class RecordingScanner:
    """Test double that returns canned sources and records scan calls."""

    def __init__(self, sources) -> None:
        self.sources = list(sources)
        self.calls = []

    def scan(self, root, config=None):
        self.calls.append((root, config))
        return list(self.sources)


def test_run_reviews_repository_end_to_end(repo_builder) -> None:
    repo_builder.write(
        {
            ".builderrules": "# Project\n\n- Use pnpm.\n",
            ".builder/rules/api.mdc": "# API\n\nBe consistent.\n",
            "skills/pdf/SKILL.md": "---\nname: pdf\ndescription: PDF tools\n---\n```py\nimport pypdf\n```\n",
        }
    )

    report = Orchestrator().run(repo_builder.path())

    assert [document.path for document in report.documents] == [
        ".builderrules",
        ".builder/rules/api.mdc",
        "skills/pdf/SKILL.md",
    ]
    assert [finding.rule_id for finding in report.findings] == [
        "missing-frontmatter",
        "missing-description",
        "vague-content",
        "no-code-examples",
    ]


def test_run_applies_repository_config(repo_builder) -> None:
    repo_builder.write(
        {
            ".rulelint.yml": "thresholds:\n  max_lines: 3\n  warn_lines: 2\nrules:\n  disabled: [size-warning]\n",
            ".builderrules": "a\nb\nc\nd\n",
        }
    )

    report = Orchestrator().run(repo_builder.path())

    assert [finding.rule_id for finding in report.findings] == ["oversized-file"]


def test_run_passes_config_and_workers_to_scanner(tmp_path) -> None:
    scanner = RecordingScanner([SourceFile(path=".builderrules", text="# Root\n")])
    config = LintConfig(workers=1)

    report = Orchestrator(scanner=scanner).run(tmp_path, config=config, workers=3)

    assert len(scanner.calls) == 1
    assert scanner.calls[0][1].workers == 3
    assert report.findings == ()


def test_rule_overrides_replace_catalog(tmp_path) -> None:
    scanner = RecordingScanner([SourceFile(path="AGENTS.md", text="Write clean code.\n")])

    report = Orchestrator(scanner=scanner, rules=[get_rule("wrong-filename")]).run(tmp_path)

    assert [finding.rule_id for finding in report.findings] == ["wrong-filename"]
