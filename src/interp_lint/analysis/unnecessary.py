from __future__ import annotations

from interp_lint.models import Finding, InterpolatedStringNode
from interp_lint.rules import UNNECESSARY_INTERPOLATION


def find_unnecessary_interpolation(node: InterpolatedStringNode) -> list[Finding]:
    # Only direct segments count; nested nodes are reported on their own.
    if node.hole_count:
        return []
    return [Finding(rule_id=UNNECESSARY_INTERPOLATION, location=node.marker_span, node_id=node.id)]
