from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from interp_lint.models import Diagnostic, FileDiagnostic, Finding, ScanResult
from interp_lint.rules import RULE_PRECEDENCE, get_rule


def build_diagnostics(findings: Iterable[Finding]) -> list[Diagnostic]:
    """Turn detector findings into ordered, de-duplicated diagnostics.

    Ordering is by start line and column, then rule precedence, then the order
    in which the findings were discovered.
    """
    unique: dict[tuple, tuple[int, Finding]] = {}
    for order, item in enumerate(findings):
        key = (item.rule_id, item.location)
        if key not in unique:
            unique[key] = (order, item)

    ranked = sorted(
        unique.values(),
        key=lambda pair: (
            pair[1].location.start_line,
            pair[1].location.start_column,
            RULE_PRECEDENCE[pair[1].rule_id],
            pair[0],
        ),
    )

    diagnostics: list[Diagnostic] = []
    for _, item in ranked:
        rule = get_rule(item.rule_id)
        diagnostics.append(
            Diagnostic(
                rule_id=rule.rule_id,
                message=rule.message,
                severity=rule.severity,
                location=item.location,
            )
        )
    return diagnostics


def format_text(items: Iterable[FileDiagnostic]) -> list[str]:
    lines: list[str] = []
    for item in items:
        location = item.diagnostic.location
        where = item.file_path if item.cell is None else f"{item.file_path}[cell {item.cell}]"
        lines.append(
            f"{where}:{location.start_line}:{location.start_column}: "
            f"{item.diagnostic.severity} [{item.diagnostic.rule_id}] {item.diagnostic.message}"
        )
    return lines


def build_summary(result: ScanResult) -> dict:
    by_rule: dict[str, int] = {}
    files: set[str] = set()
    for item in result.diagnostics:
        by_rule[item.diagnostic.rule_id] = by_rule.get(item.diagnostic.rule_id, 0) + 1
        files.add(item.file_path)

    summary = result.to_dict()
    summary["generated_at"] = datetime.now(timezone.utc).isoformat()
    summary["counts"] = {
        "by_rule": dict(sorted(by_rule.items())),
        "files_with_diagnostics": len(files),
    }
    return summary


def write_report(result: ScanResult, output_dir: str | Path) -> dict:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    summary = build_summary(result)
    summary_json = out / "summary.json"
    diagnostics_csv = out / "diagnostics.csv"

    _write_csv(diagnostics_csv, [item.to_dict() for item in result.diagnostics])
    summary["files"] = {
        "summary": str(summary_json.resolve()),
        "diagnostics": str(diagnostics_csv.resolve()),
    }
    _write_json(summary_json, summary)
    return summary


def _write_json(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=True)


def _write_csv(path: Path, rows: list[dict]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        if not rows:
            return

        fieldnames: list[str] = []
        seen = set()
        for row in rows:
            for key in row:
                if key not in seen:
                    seen.add(key)
                    fieldnames.append(key)

        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
