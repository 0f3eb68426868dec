"""Tests for rulelint.frontmatter."""

from __future__ import annotations

import pytest

from rulelint.frontmatter import parse_frontmatter
from rulelint.models import NO_FRONTMATTER


@pytest.mark.parametrize(
    ("key", "value", "body"),
    [
        ("description", "React component rules", "# Components\n\nUse hooks.\n"),
        ("alwaysApply", "false", ""),
        ("name", "pdf-tools", "no trailing newline"),
        ("description", "Has: a colon", "\n\nLeading blank lines\n"),
    ],
)
def test_round_trip_yields_single_field_and_exact_body(key: str, value: str, body: str) -> None:
    result = parse_frontmatter(f"---\n{key}: {value}\n---\n{body}")

    assert result.frontmatter.present is True
    assert dict(result.frontmatter.fields) == {key: value}
    assert result.body == body
    assert result.error is None


def test_text_without_delimiter_is_all_body() -> None:
    text = "# Rules\n\n- Prefer named exports\n"
    result = parse_frontmatter(text)

    assert result.frontmatter is NO_FRONTMATTER
    assert result.frontmatter.present is False
    assert result.body == text


def test_delimiter_not_on_first_line_is_ignored() -> None:
    text = "\n---\ndescription: late\n---\nBody\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.present is False
    assert result.body == text


def test_unclosed_block_degrades_with_error() -> None:
    text = "---\ndescription: never closed\n# Body\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.present is False
    assert result.body == text
    assert result.error is not None
    assert "never closed" in result.error


def test_empty_block_is_present_but_empty() -> None:
    result = parse_frontmatter("---\n---\nBody\n")

    assert result.frontmatter.present is True
    assert dict(result.frontmatter.fields) == {}
    assert result.body == "Body\n"


def test_list_values_are_ordered_strings() -> None:
    text = (
        "---\n"
        "description: API rules\n"
        "globs:\n"
        "  - src/api/**/*.ts\n"
        "  - 'src/routes/*.ts'\n"
        "alwaysApply: false\n"
        "---\n"
        "Body\n"
    )
    result = parse_frontmatter(text)

    assert result.frontmatter.get("globs") == ("src/api/**/*.ts", "src/routes/*.ts")
    assert result.frontmatter.get("alwaysApply") == "false"
    assert result.frontmatter.get("description") == "API rules"


def test_inline_list_and_quoted_scalars() -> None:
    text = '---\nglobs: ["app/**/*.tsx", components/*.tsx]\ndescription: "Quoted"\n---\n'
    result = parse_frontmatter(text)

    assert result.frontmatter.get("globs") == ("app/**/*.tsx", "components/*.tsx")
    assert result.frontmatter.get("description") == "Quoted"
    assert result.body == ""


def test_duplicate_keys_last_wins_and_are_recorded() -> None:
    text = "---\ndescription: first\ndescription: second\n---\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.get("description") == "second"
    assert result.duplicate_keys == ("description",)


def test_comments_and_non_pairs_are_skipped() -> None:
    text = "---\n# comment\njust words\ndescription: kept\n  nested: ignored\n---\n"
    result = parse_frontmatter(text)

    assert dict(result.frontmatter.fields) == {"description": "kept"}


def test_crlf_delimiters_are_recognized() -> None:
    result = parse_frontmatter("---\r\ndescription: windows\r\n---\r\nBody\r\n")

    assert result.frontmatter.get("description") == "windows"
    assert result.body == "Body\r\n"


def test_comma_separated_globs_split_into_list() -> None:
    result = parse_frontmatter("---\nglobs: src/**/*.ts, lib/*.ts\n---\n")

    assert result.frontmatter.as_list("globs") == ["src/**/*.ts", "lib/*.ts"]


def test_empty_string_never_raises() -> None:
    result = parse_frontmatter("")

    assert result.frontmatter.present is False
    assert result.body == ""


def test_trailing_comments_are_dropped() -> None:
    text = (
        "---\n"
        'description: "Testing rules" # short\n'
        "alwaysApply: true  # load everywhere\n"
        "globs: \"**/*\" # everything\n"
        "---\n"
        "Body # not a comment\n"
    )
    result = parse_frontmatter(text)

    assert dict(result.frontmatter.fields) == {
        "description": "Testing rules",
        "alwaysApply": "true",
        "globs": "**/*",
    }
    assert result.body == "Body # not a comment\n"


def test_scalars_stay_strings() -> None:
    result = parse_frontmatter("---\nalwaysApply: yes\nversion: 1.10\nname: null\n---\n")

    assert dict(result.frontmatter.fields) == {"alwaysApply": "yes", "version": "1.10", "name": "null"}


def test_unquoted_glob_star_is_read_line_by_line() -> None:
    text = "---\ndescription: TS rules\nglobs: **/*.ts  # all TypeScript\nalwaysApply: false\n---\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.get("globs") == "**/*.ts"
    assert result.frontmatter.get("description") == "TS rules"
    assert result.frontmatter.get("alwaysApply") == "false"


def test_commented_list_items_in_line_reader() -> None:
    text = "---\nglobs:\n  - **/*  # everything\n  - 'src/#hash/*.ts'\n---\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.get("globs") == ("**/*", "src/#hash/*.ts")


def test_form_feed_does_not_split_header_or_body() -> None:
    text = "---\ndescription: page\n---\nfirst\x0cpage\nsecond\u2028line\n"
    result = parse_frontmatter(text)

    assert result.frontmatter.get("description") == "page"
    assert result.body == "first\x0cpage\nsecond\u2028line\n"
