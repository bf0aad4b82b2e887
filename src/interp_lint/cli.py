from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict, replace
from pathlib import Path

from interp_lint.config import ConfigError, load_config, validate_rule_ids
from interp_lint.models import LintConfig
from interp_lint.reporting import build_summary, format_text, write_report
from interp_lint.rules import RULES
from interp_lint.scanner import scan_paths


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interp-lint",
        description="Flag suspicious interpolated strings in Python sources",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Check files or directories")
    check_parser.add_argument("paths", nargs="+", help="Python files, notebooks or directories")
    check_parser.add_argument("--config", default=None, help="JSON config path")
    check_parser.add_argument("--format", choices=["text", "json"], default="text")
    check_parser.add_argument("--output-dir", default=None, help="Also write summary.json and diagnostics.csv here")
    check_parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE",
        help="Rule id to suppress; may be repeated",
    )
    check_parser.add_argument("-v", "--verbose", action="store_true")

    subparsers.add_parser("rules", help="List the available rules")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "rules":
        print(json.dumps([asdict(rule) for rule in RULES], indent=2))
        return 0

    if args.command == "check":
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        try:
            config = load_config(args.config) if args.config else LintConfig()
            disabled = validate_rule_ids(list(config.analysis.disabled_rules) + list(args.disable))
        except ConfigError as exc:
            parser.error(str(exc))
            return 2
        config = replace(config, analysis=replace(config.analysis, disabled_rules=disabled))

        missing = [item for item in args.paths if not Path(item).exists()]
        if missing:
            parser.error(f"Path does not exist: {', '.join(missing)}")
            return 2

        result = scan_paths(args.paths, config)

        if args.format == "json":
            print(json.dumps(build_summary(result), indent=2, ensure_ascii=True))
        else:
            for line in format_text(result.diagnostics):
                print(line)
            print(f"{len(result.diagnostics)} diagnostic(s) in {result.files_scanned} file(s) checked")

        if args.output_dir:
            write_report(result, args.output_dir)

        return 1 if result.diagnostics else 0

    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
