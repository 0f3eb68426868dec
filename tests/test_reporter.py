"""Tests for rulelint.reporter."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rulelint.analyzer import RulesAnalyzer, analyze
from rulelint.reporter import MarkdownReporter, render, render_json, select_mode, tidy_markdown


def _problem_report():
    return analyze(
        [
            (".builderrules", "x\n" * 201),
            (".builder/rules/api.mdc", "# API\n\nFollow best practices.\n"),
            ("apps/web/.builderrules", "a\nb\nc\nd\ne\n"),
            ("apps/api/.builderrules", "a\nb\nc\nd\ne\n"),
        ]
    )


def _clean_report():
    return analyze(
        [
            (".builderrules", "# Project\n\n- Use pnpm for installs.\n"),
            (
                ".builder/rules/api.mdc",
                "---\ndescription: API handlers\nglobs: app/api/**/*.ts\n---\n```ts\nexport const GET = handler;\n```\n",
            ),
        ]
    )


def test_mode_selection_follows_findings() -> None:
    assert select_mode(_problem_report()) == "standard"
    assert select_mode(_clean_report()) == "positive"
    assert select_mode(analyze([])) == "empty"


def test_standard_report_sections() -> None:
    output = render(_problem_report())

    assert output.startswith("# Rules Review\n")
    assert "## Summary" in output
    assert "| Critical | 1 |" in output
    assert "## File Inventory" in output
    assert "## Per-File Findings" in output
    assert "### `.builderrules`" in output
    assert "**[Critical]** `oversized-file`" in output
    assert "## Repository-Wide Issues" in output
    assert "`apps/web/.builderrules`, `apps/api/.builderrules`" in output
    assert "## Prioritized Actions" in output
    assert "1. **Critical** (`.builderrules`)" in output


def test_prioritized_actions_are_in_severity_order() -> None:
    output = render(_problem_report())
    actions = output.split("## Prioritized Actions", 1)[1]

    critical = actions.index("**Critical**")
    high = actions.index("**High**")
    medium = actions.index("**Medium**")
    low = actions.index("**Low**")
    assert critical < high < medium < low


def test_positive_report_has_no_findings_sections() -> None:
    output = render(_clean_report())

    assert "**Total findings:** 0" in output
    assert "## What's Working" in output
    assert "## Per-File Findings" not in output
    assert "`.builder/rules/api.mdc`" in output


def test_empty_report_uses_distinct_wording() -> None:
    output = render(analyze([]))

    assert "No rules files found" in output
    assert "## Getting Started" in output
    assert "## What's Working" not in output
    assert output != render(_clean_report())


def test_explicit_mode_overrides_selection() -> None:
    output = render(_problem_report(), mode="positive")
    assert "## What's Working" in output


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError):
        render(_clean_report(), mode="fancy")


def test_render_has_no_blank_runs_or_trailing_spaces() -> None:
    output = render(_problem_report())

    assert "\n\n\n" not in output
    assert all(line == line.rstrip() for line in output.splitlines())
    assert output.endswith("\n") and not output.endswith("\n\n")


def test_table_cells_escape_pipes() -> None:
    report = analyze([("docs|old/.builderrules", "# Rules\n")])
    output = render(report, mode="positive")

    assert "`docs\\|old/.builderrules`" in output


def test_custom_templates_override_bundled(tmp_path: Path) -> None:
    (tmp_path / "positive.md.j2").write_text("All clear: {{ document_count }} files\n", encoding="utf-8")

    output = MarkdownReporter(templates_dir=tmp_path).render(_clean_report())

    assert output == "All clear: 2 files\n"


def test_json_rendering_is_deterministic() -> None:
    report = _problem_report()
    payload = json.loads(render_json(report))

    assert payload["summary"]["documents"] == 4
    assert payload["summary"]["by_severity"]["critical"] == 1
    duplicate = [item for item in payload["findings"] if item["rule_id"] == "duplicate-content"][0]
    assert duplicate["file"] is None
    assert duplicate["related_paths"] == ["apps/web/.builderrules", "apps/api/.builderrules"]
    assert render_json(report) == render_json(_problem_report())


def test_tidy_markdown_preserves_code_blocks() -> None:
    markdown = "# Title  \n\n\n\nText\n```\n\n\ncode\n```\n\n"

    assert tidy_markdown(markdown) == "# Title\n\nText\n```\n\n\ncode\n```\n"


def test_positive_report_only_claims_checks_that_ran() -> None:
    skipped = {"oversized-file", "size-warning", "always-apply-overuse", "duplicate-content"}
    analyzer = RulesAnalyzer()
    report = RulesAnalyzer(rules=[rule for rule in analyzer.rules if rule.rule_id not in skipped]).analyze(
        [(".builderrules", "# Project\n\n- Use pnpm for installs.\n")]
    )
    output = render(report)

    assert "## What's Working" in output
    assert "lines and" not in output
    assert "alwaysApply" not in output
    assert "repeated across files" not in output
    assert "- No glob matches the whole repository." in output


def test_positive_report_lists_default_checks() -> None:
    output = render(_clean_report())

    assert "- Every file stays under 150 lines and 5000 characters." in output
    assert "- At most 5 files use `alwaysApply: true`." in output
    assert "- No block of 5 or more lines is repeated across files." in output
    assert json.loads(render_json(_clean_report()))["rules"][0] == "unreadable-file"
