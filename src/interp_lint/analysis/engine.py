from __future__ import annotations

from typing import Callable

from interp_lint.analysis.dollar_brace import find_dollar_brace
from interp_lint.analysis.locator import locate_interpolated_strings
from interp_lint.analysis.unnecessary import find_unnecessary_interpolation
from interp_lint.analysis.validation import validate_node
from interp_lint.models import AnalysisSettings, Diagnostic, Finding, InterpolatedStringNode, Node
from interp_lint.reporting import build_diagnostics
from interp_lint.rules import DOLLAR_BRACE, RULES_BY_ID, UNNECESSARY_INTERPOLATION


DETECTORS: tuple[tuple[str, Callable[[InterpolatedStringNode], list[Finding]]], ...] = (
    (DOLLAR_BRACE, find_dollar_brace),
    (UNNECESSARY_INTERPOLATION, find_unnecessary_interpolation),
)


def analyze_tree(
    root: Node | None,
    settings: AnalysisSettings | None = None,
    *,
    sink: Callable[[Diagnostic], None] | None = None,
) -> list[Diagnostic]:
    settings = settings or AnalysisSettings()
    unknown = [rule_id for rule_id in settings.disabled_rules if rule_id not in RULES_BY_ID]
    if unknown:
        raise ValueError(f"Unknown rule ids: {', '.join(sorted(unknown))}")

    nodes = locate_interpolated_strings(root)
    for node in nodes:
        validate_node(node)

    findings: list[Finding] = []
    for rule_id, detector in DETECTORS:
        if rule_id in settings.disabled_rules:
            continue
        for node in nodes:
            findings.extend(detector(node))

    diagnostics = build_diagnostics(findings)
    if sink is not None:
        for diagnostic in diagnostics:
            sink(diagnostic)
    return diagnostics
