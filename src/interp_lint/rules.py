from __future__ import annotations

from dataclasses import dataclass


DOLLAR_BRACE = "DollarBrace"
UNNECESSARY_INTERPOLATION = "UnnecessaryInterpolation"

WARNING = "warning"


@dataclass(frozen=True)
class RuleDescriptor:
    rule_id: str
    title: str
    message: str
    category: str
    severity: str


# Table order is rule precedence when two diagnostics share a location.
RULES: tuple[RuleDescriptor, ...] = (
    RuleDescriptor(
        rule_id=DOLLAR_BRACE,
        title="Avoid ${}",
        message="Avoid using ${} in interpolated strings.",
        category="Usage",
        severity=WARNING,
    ),
    RuleDescriptor(
        rule_id=UNNECESSARY_INTERPOLATION,
        title="Unnecessary interpolation",
        message="Avoid using an interpolated string where an equivalent literal string exists.",
        category="Usage",
        severity=WARNING,
    ),
)

RULES_BY_ID = {rule.rule_id: rule for rule in RULES}

RULE_PRECEDENCE = {rule.rule_id: index for index, rule in enumerate(RULES)}


def get_rule(rule_id: str) -> RuleDescriptor:
    try:
        return RULES_BY_ID[rule_id]
    except KeyError:
        raise KeyError(f"Unknown rule id: {rule_id}") from None
