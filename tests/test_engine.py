import pytest

from interp_lint.analysis import MalformedTreeError, analyze_tree
from interp_lint.models import (
    AnalysisSettings,
    Finding,
    HoleSegment,
    InterpolatedStringNode,
    LiteralSegment,
    SourceSpan,
    SyntaxNode,
)
from interp_lint.reporting import build_diagnostics
from interp_lint.rules import DOLLAR_BRACE, UNNECESSARY_INTERPOLATION


def _span(line: int, start: int, end: int) -> SourceSpan:
    return SourceSpan(line, start, line, end)


def _hole(line: int, start: int, end: int, *children) -> HoleSegment:
    return HoleSegment(expression=SyntaxNode("expression", tuple(children)), span=_span(line, start, end))


def _dollar_node(node_id: int = 0, line: int = 9) -> InterpolatedStringNode:
    # f"${one}" at column 17
    return InterpolatedStringNode(
        id=node_id,
        segments=(LiteralSegment("$", _span(line, 19, 20)), _hole(line, 20, 25)),
        span=_span(line, 17, 26),
        opener=_span(line, 17, 19),
    )


def _sample_tree() -> SyntaxNode:
    # line 8: f"Hello World"
    # line 9: f"${one}"
    # line 10: f"{f'x' + 'y'}"  (outer has a hole, inner has none)
    hello = InterpolatedStringNode(
        id=0,
        segments=(LiteralSegment("Hello World", _span(8, 19, 30)),),
        span=_span(8, 17, 31),
        opener=_span(8, 17, 19),
    )
    inner = InterpolatedStringNode(
        id=3,
        segments=(LiteralSegment("x", _span(10, 21, 22)),),
        span=_span(10, 19, 23),
        opener=_span(10, 19, 21),
    )
    outer = InterpolatedStringNode(
        id=2,
        segments=(_hole(10, 18, 31, SyntaxNode("binop", (inner,))),),
        span=_span(10, 16, 32),
        opener=_span(10, 16, 18),
    )
    return SyntaxNode("module", (hello, _dollar_node(node_id=1), outer))


def test_engine_reports_both_rules_in_location_order():
    diagnostics = analyze_tree(_sample_tree())

    assert [(item.rule_id, item.location.start) for item in diagnostics] == [
        (UNNECESSARY_INTERPOLATION, (8, 17)),
        (DOLLAR_BRACE, (9, 19)),
        (UNNECESSARY_INTERPOLATION, (10, 19)),
    ]
    assert {item.severity for item in diagnostics} == {"warning"}
    assert diagnostics[1].message == "Avoid using ${} in interpolated strings."
    assert diagnostics[0].message == (
        "Avoid using an interpolated string where an equivalent literal string exists."
    )


def test_engine_is_deterministic():
    tree = _sample_tree()

    assert analyze_tree(tree) == analyze_tree(tree)


def test_engine_without_nodes_reports_nothing():
    assert analyze_tree(SyntaxNode("module")) == []
    assert analyze_tree(None) == []


def test_disabled_rules_are_not_reported():
    diagnostics = analyze_tree(_sample_tree(), AnalysisSettings(disabled_rules=(UNNECESSARY_INTERPOLATION,)))

    assert [item.rule_id for item in diagnostics] == [DOLLAR_BRACE]


def test_unknown_disabled_rule_is_rejected():
    with pytest.raises(ValueError):
        analyze_tree(_sample_tree(), AnalysisSettings(disabled_rules=("NoSuchRule",)))


def test_sink_receives_the_ordered_diagnostics():
    received = []

    diagnostics = analyze_tree(_sample_tree(), sink=received.append)

    assert received == diagnostics


def test_reporter_breaks_ties_by_rule_then_discovery():
    location = _span(1, 5, 6)
    findings = [
        Finding(rule_id=UNNECESSARY_INTERPOLATION, location=location, node_id=1),
        Finding(rule_id=DOLLAR_BRACE, location=location, node_id=0),
        Finding(rule_id=DOLLAR_BRACE, location=_span(1, 2, 3), node_id=4),
        Finding(rule_id=DOLLAR_BRACE, location=location, node_id=2),
    ]

    diagnostics = build_diagnostics(findings)

    assert [(item.rule_id, item.location.start) for item in diagnostics] == [
        (DOLLAR_BRACE, (1, 2)),
        (DOLLAR_BRACE, (1, 5)),
        (UNNECESSARY_INTERPOLATION, (1, 5)),
    ]


def test_gap_between_segments_is_malformed():
    node = InterpolatedStringNode(
        id=0,
        segments=(LiteralSegment("$", _span(1, 3, 4)), _hole(1, 5, 10)),
        span=_span(1, 1, 11),
    )

    with pytest.raises(MalformedTreeError):
        analyze_tree(node)


def test_overlapping_segments_are_malformed():
    node = InterpolatedStringNode(
        id=0,
        segments=(LiteralSegment("ab$", _span(1, 3, 6)), _hole(1, 5, 10)),
        span=_span(1, 1, 11),
    )

    with pytest.raises(MalformedTreeError):
        analyze_tree(node)


def test_segment_outside_node_is_malformed():
    node = InterpolatedStringNode(id=0, segments=(LiteralSegment("x", _span(2, 1, 2)),), span=_span(1, 1, 5))

    with pytest.raises(MalformedTreeError):
        analyze_tree(node)


def test_unknown_segment_type_is_malformed():
    node = InterpolatedStringNode(id=0, segments=("text",), span=_span(1, 1, 5))

    with pytest.raises(MalformedTreeError):
        analyze_tree(node)


def test_malformed_nested_node_fails_before_any_diagnostic_is_sent():
    broken = InterpolatedStringNode(
        id=1,
        segments=(LiteralSegment("a", _span(1, 12, 13)), LiteralSegment("b", _span(1, 12, 13))),
        span=_span(1, 10, 15),
    )
    outer = InterpolatedStringNode(
        id=0,
        segments=(LiteralSegment("$", _span(1, 3, 4)), _hole(1, 4, 16, broken)),
        span=_span(1, 1, 17),
    )
    received = []

    with pytest.raises(MalformedTreeError):
        analyze_tree(outer, sink=received.append)
    assert received == []


def test_dollar_in_nested_node_is_reported_at_its_own_position():
    # x = f"a{f'${y}'}": the outer node has a hole, the nested one has "$" before {y}
    inner = InterpolatedStringNode(
        id=1,
        segments=(LiteralSegment("$", _span(1, 11, 12)), _hole(1, 12, 15)),
        span=_span(1, 9, 16),
        opener=_span(1, 9, 11),
    )
    outer = InterpolatedStringNode(
        id=0,
        segments=(LiteralSegment("a", _span(1, 7, 8)), _hole(1, 8, 17, inner)),
        span=_span(1, 5, 18),
        opener=_span(1, 5, 7),
    )

    diagnostics = analyze_tree(SyntaxNode("module", (outer,)))

    assert [(item.rule_id, item.location) for item in diagnostics] == [(DOLLAR_BRACE, _span(1, 11, 12))]
