from __future__ import annotations

from interp_lint.models import Finding, HoleSegment, InterpolatedStringNode, LiteralSegment, SourceSpan
from interp_lint.rules import DOLLAR_BRACE


class LocationError(RuntimeError):
    pass


def find_dollar_brace(node: InterpolatedStringNode) -> list[Finding]:
    """Flag each literal ending in ``$`` that is immediately followed by a hole."""
    findings: list[Finding] = []
    segments = node.segments

    for current, following in zip(segments, segments[1:]):
        if not isinstance(current, LiteralSegment) or not isinstance(following, HoleSegment):
            continue
        if not current.text.endswith("$"):
            continue
        findings.append(Finding(rule_id=DOLLAR_BRACE, location=_trailing_char_span(current), node_id=node.id))

    return findings


def _trailing_char_span(segment: LiteralSegment) -> SourceSpan:
    span = segment.span
    column = span.end_column - 1
    if column < 1 or span.end < (span.start_line, span.start_column + 1):
        raise LocationError(
            f"cannot place trailing {segment.text[-1]!r} of literal {segment.text!r} within span "
            f"{span.start_line}:{span.start_column}-{span.end_line}:{span.end_column}"
        )
    return SourceSpan(span.end_line, column, span.end_line, span.end_column)
