"""Build the interpolated-string tree from Python source text.

Every f-string token becomes an ``InterpolatedStringNode``. Implicitly
concatenated neighbours are kept as separate nodes, so an ``f"..."`` next to a
plain ``"..."`` is judged on its own contents. Template strings (``t"..."``)
evaluate to template objects rather than ``str`` and are therefore only
searched for nested f-strings.

Columns are 1-based character offsets; a tab is one column.
"""
from __future__ import annotations

import bisect
import itertools

from interp_lint.models import HoleSegment, InterpolatedStringNode, LiteralSegment, SourceSpan, SyntaxNode


STRING_PREFIXES = {"", "r", "u", "b", "br", "rb", "f", "fr", "rf", "t", "tr", "rt"}


class SourceSyntaxError(ValueError):
    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column


def parse_source(source: str) -> SyntaxNode:
    return _Lexer(source).parse_module()


def _is_word_char(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


class _Lexer:
    def __init__(self, source: str):
        self.text = source.replace("\r\n", "\n").replace("\r", "\n")
        self.line_starts = [0]
        self.line_starts.extend(index + 1 for index, ch in enumerate(self.text) if ch == "\n")
        self.ids = itertools.count()

    def parse_module(self) -> SyntaxNode:
        children, _ = self._scan_code(0, in_hole=False)
        return SyntaxNode(kind="module", children=tuple(children), span=self._span(0, len(self.text)))

    def _position(self, offset: int) -> tuple[int, int]:
        line_index = bisect.bisect_right(self.line_starts, offset) - 1
        return line_index + 1, offset - self.line_starts[line_index] + 1

    def _span(self, start: int, end: int) -> SourceSpan:
        start_line, start_column = self._position(start)
        end_line, end_column = self._position(end)
        return SourceSpan(start_line, start_column, end_line, end_column)

    def _error(self, message: str, offset: int) -> SourceSyntaxError:
        line, column = self._position(offset)
        return SourceSyntaxError(message, line, column)

    def _scan_code(self, pos: int, *, in_hole: bool) -> tuple[list, int]:
        # Inside a hole, stop at the first depth-0 "}", ":" or "!" conversion marker.
        text = self.text
        size = len(text)
        children: list = []
        depth = 0

        while pos < size:
            ch = text[pos]

            if ch == "#":
                newline = text.find("\n", pos)
                pos = size if newline == -1 else newline
                continue

            if ch in "'\"":
                node, pos = self._read_string(pos, pos, "")
                if node is not None:
                    children.append(node)
                continue

            if _is_word_char(ch):
                end = pos
                while end < size and _is_word_char(text[end]):
                    end += 1
                prefix = text[pos:end].lower()
                if end < size and text[end] in "'\"" and prefix in STRING_PREFIXES:
                    node, pos = self._read_string(pos, end, prefix)
                    if node is not None:
                        children.append(node)
                else:
                    pos = end
                continue

            if in_hole:
                if ch in "([{":
                    depth += 1
                elif ch in ")]":
                    depth = max(depth - 1, 0)
                elif ch == "}":
                    if depth == 0:
                        return children, pos
                    depth -= 1
                elif depth == 0 and ch == ":":
                    return children, pos
                elif depth == 0 and ch == "!" and text[pos + 1 : pos + 2] != "=":
                    return children, pos

            pos += 1

        return children, pos

    def _read_string(self, start: int, quote_pos: int, prefix: str):
        quote = self.text[quote_pos]
        delimiter = quote * 3 if self.text.startswith(quote * 3, quote_pos) else quote
        body_start = quote_pos + len(delimiter)
        raw = "r" in prefix

        if "f" in prefix or "t" in prefix:
            return self._read_interpolated(start, body_start, delimiter, raw=raw, template="t" in prefix)
        return None, self._skip_plain_string(start, body_start, delimiter)

    def _skip_plain_string(self, start: int, pos: int, delimiter: str) -> int:
        text = self.text
        while pos < len(text):
            if text[pos] == "\\":
                pos += 2
                continue
            if text.startswith(delimiter, pos):
                return pos + len(delimiter)
            if text[pos] == "\n" and len(delimiter) == 1:
                break
            pos += 1
        raise self._error("unterminated string literal", start)

    def _read_interpolated(self, start: int, body_start: int, delimiter: str, *, raw: bool, template: bool):
        text = self.text
        node_id = None if template else next(self.ids)
        segments: list = []
        pos = body_start
        literal_start = pos

        while True:
            if pos >= len(text) or (text[pos] == "\n" and len(delimiter) == 1):
                raise self._error("unterminated string literal", start)
            if text.startswith(delimiter, pos):
                break

            ch = text[pos]
            if ch == "\\":
                following = text[pos + 1 : pos + 2]
                if not raw and following == "N" and text[pos + 2 : pos + 3] == "{":
                    close = text.find("}", pos + 3)
                    if close == -1:
                        raise self._error("malformed \\N character escape", pos)
                    pos = close + 1
                elif following in ("{", "}"):
                    pos += 1
                else:
                    pos += 2
                continue

            if ch == "{":
                if text[pos + 1 : pos + 2] == "{":
                    pos += 2
                    continue
                if pos > literal_start:
                    segments.append(LiteralSegment(text[literal_start:pos], self._span(literal_start, pos)))
                hole, pos = self._read_hole(pos)
                segments.append(hole)
                literal_start = pos
                continue

            if ch == "}":
                if text[pos + 1 : pos + 2] == "}":
                    pos += 2
                    continue
                raise self._error("single '}' is not allowed", pos)

            pos += 1

        if pos > literal_start:
            segments.append(LiteralSegment(text[literal_start:pos], self._span(literal_start, pos)))
        end = pos + len(delimiter)

        if template:
            expressions = tuple(segment.expression for segment in segments if isinstance(segment, HoleSegment))
            return SyntaxNode(kind="template", children=expressions, span=self._span(start, end)), end

        node = InterpolatedStringNode(
            id=node_id,
            segments=tuple(segments),
            span=self._span(start, end),
            opener=self._span(start, body_start),
        )
        return node, end

    def _read_hole(self, brace: int) -> tuple[HoleSegment, int]:
        text = self.text
        expression_start = brace + 1
        children, pos = self._scan_code(expression_start, in_hole=True)
        if pos >= len(text):
            raise self._error("unterminated replacement field", brace)
        expression_end = pos

        conversion = None
        if text[pos] == "!":
            pos += 1
            conversion_start = pos
            while pos < len(text) and text[pos] not in ":}":
                pos += 1
            conversion = text[conversion_start:pos]

        format_spec = None
        if pos < len(text) and text[pos] == ":":
            spec_start = pos + 1
            spec_children, pos = self._read_format_spec(spec_start, brace)
            children.extend(spec_children)
            format_spec = text[spec_start:pos]

        if pos >= len(text) or text[pos] != "}":
            raise self._error("unterminated replacement field", brace)
        pos += 1

        expression = SyntaxNode(
            kind="expression",
            children=tuple(children),
            span=self._span(expression_start, expression_end),
            text=text[expression_start:expression_end],
        )
        hole = HoleSegment(
            expression=expression,
            span=self._span(brace, pos),
            format_spec=format_spec,
            conversion=conversion,
        )
        return hole, pos

    def _read_format_spec(self, pos: int, brace: int) -> tuple[list, int]:
        # Nested replacement fields may hold f-strings of their own.
        text = self.text
        children: list = []
        while pos < len(text):
            ch = text[pos]
            if ch == "}":
                return children, pos
            if ch == "{":
                hole, pos = self._read_hole(pos)
                children.extend(hole.expression.children)
                continue
            pos += 2 if ch == "\\" else 1
        raise self._error("unterminated replacement field", brace)
