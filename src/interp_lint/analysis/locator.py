from __future__ import annotations

from interp_lint.models import HoleSegment, InterpolatedStringNode, Node, SyntaxNode


def locate_interpolated_strings(root: Node | None) -> list[InterpolatedStringNode]:
    """Return every interpolated-string node under ``root`` in pre-order.

    Outer nodes come before the nodes nested in their holes, and siblings keep
    source order. A node object reachable through several parents is returned
    once.
    """
    if root is None:
        return []

    found: list[InterpolatedStringNode] = []
    seen: set[int] = set()
    stack: list[Node] = [root]

    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))

        if isinstance(node, InterpolatedStringNode):
            found.append(node)
            holes = [segment.expression for segment in node.segments if isinstance(segment, HoleSegment)]
            stack.extend(reversed(holes))
        elif isinstance(node, SyntaxNode):
            stack.extend(reversed(node.children))

    return found
