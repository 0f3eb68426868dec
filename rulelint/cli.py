"""CLI entrypoints for rulelint commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging, get_logger
from .models import Severity
from .orchestrator import Orchestrator
from .reporter import MODES, MarkdownReporter, render_json
from .rules import discover_rules

EXIT_FINDINGS = 1
EXIT_ERROR = 2


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rulelint",
        description="Review AI assistant rules and skill files for size, structure, and content issues.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Scan a repository and report findings.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_quiet_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    check_parser.add_argument(
        "--format",
        choices=("markdown", "json"),
        default="markdown",
        help="Output format for the report.",
    )
    check_parser.add_argument(
        "--mode",
        choices=MODES,
        default=None,
        help="Force a Markdown template instead of choosing one from the findings.",
    )
    check_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    check_parser.add_argument(
        "--fail-on",
        choices=[severity.value for severity in Severity] + ["none"],
        default=Severity.CRITICAL.value,
        help="Exit non-zero when a finding at or above this severity exists.",
    )
    check_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Check files concurrently with this many threads.",
    )

    rules_parser = subparsers.add_parser(
        "rules",
        help="List the rules in the catalog.",
    )
    _add_verbose_option(rules_parser, suppress_default=True)
    _add_quiet_option(rules_parser, suppress_default=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for rulelint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)
    logger = get_logger("cli")

    if args.command == "rules":
        for rule in discover_rules():
            print(f"{rule.rule_id:<28} {rule.severity.label:<9} {rule.scope.value:<11} {rule.title}")
        return 0

    if args.command != "check":  # pragma: no cover - argparse enforces choices
        parser.exit(EXIT_ERROR, "Unknown command\n")

    orchestrator = Orchestrator()
    try:
        config = orchestrator.load_config(args.path)
        report = orchestrator.run(args.path, config=config, workers=args.workers)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(EXIT_ERROR, f"{exc}\n")
    except (ConfigError, ValueError) as exc:
        parser.exit(EXIT_ERROR, f"rulelint check failed: {exc}\n")

    if args.format == "json":
        output = render_json(report)
    else:
        output = MarkdownReporter(thresholds=config.thresholds).render(report, args.mode)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        logger.info("Report written to %s", args.output)
    else:
        sys.stdout.write(output)

    if args.fail_on == "none":
        return 0
    blocking = report.at_or_above(Severity.parse(args.fail_on))
    return EXIT_FINDINGS if blocking else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
