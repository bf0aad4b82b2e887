from __future__ import annotations

from interp_lint.models import HoleSegment, InterpolatedStringNode, LiteralSegment, SourceSpan


class MalformedTreeError(ValueError):
    pass


def validate_node(node: InterpolatedStringNode) -> None:
    """Raise MalformedTreeError unless the node's segments tile its span in order."""
    _check_span(node.span, f"node {node.id}")

    previous: SourceSpan | None = None
    for index, segment in enumerate(node.segments):
        if not isinstance(segment, (LiteralSegment, HoleSegment)):
            raise MalformedTreeError(
                f"node {node.id}: segment {index} has unsupported type {type(segment).__name__}"
            )

        span = segment.span
        _check_span(span, f"node {node.id} segment {index}")

        if span.start < node.span.start or span.end > node.span.end:
            raise MalformedTreeError(
                f"node {node.id}: segment {index} at {span} lies outside the node span {node.span}"
            )

        if previous is not None:
            if span.start < previous.end:
                raise MalformedTreeError(
                    f"node {node.id}: segment {index} at {span} overlaps or precedes the previous segment"
                )
            if span.start > previous.end:
                raise MalformedTreeError(
                    f"node {node.id}: gap before segment {index} at {span}"
                )

        previous = span


def _check_span(span: SourceSpan, owner: str) -> None:
    if span.start_line < 1 or span.start_column < 1:
        raise MalformedTreeError(f"{owner}: positions are 1-based, got {span.start}")
    if span.end < span.start:
        raise MalformedTreeError(f"{owner}: span ends before it starts ({span.start} > {span.end})")
