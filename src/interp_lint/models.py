from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class SourceSpan:
    """1-based character span; the end position is exclusive."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_column)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_column)

    def __str__(self) -> str:
        return f"{self.start_line}:{self.start_column}"


@dataclass(frozen=True)
class SyntaxNode:
    kind: str
    children: tuple[Node, ...] = ()
    span: SourceSpan | None = None
    text: str | None = None


@dataclass(frozen=True)
class LiteralSegment:
    text: str
    span: SourceSpan


@dataclass(frozen=True)
class HoleSegment:
    expression: Node
    span: SourceSpan
    alignment: str | None = None
    format_spec: str | None = None
    conversion: str | None = None


Segment = Union[LiteralSegment, HoleSegment]


@dataclass(frozen=True)
class InterpolatedStringNode:
    id: int
    segments: tuple[Segment, ...]
    span: SourceSpan
    opener: SourceSpan | None = None

    @property
    def hole_count(self) -> int:
        return sum(1 for segment in self.segments if isinstance(segment, HoleSegment))

    @property
    def marker_span(self) -> SourceSpan:
        if self.opener is not None:
            return self.opener
        return SourceSpan(
            self.span.start_line,
            self.span.start_column,
            self.span.start_line,
            self.span.start_column + 1,
        )


Node = Union[SyntaxNode, InterpolatedStringNode]


@dataclass(frozen=True)
class Finding:
    rule_id: str
    location: SourceSpan
    node_id: int


@dataclass(frozen=True)
class Diagnostic:
    rule_id: str
    message: str
    severity: str
    location: SourceSpan

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FileDiagnostic:
    file_path: str
    diagnostic: Diagnostic
    cell: int | None = None

    def to_dict(self) -> dict[str, Any]:
        location = self.diagnostic.location
        return {
            "file_path": self.file_path,
            "cell": self.cell,
            "line": location.start_line,
            "column": location.start_column,
            "end_line": location.end_line,
            "end_column": location.end_column,
            "rule_id": self.diagnostic.rule_id,
            "severity": self.diagnostic.severity,
            "message": self.diagnostic.message,
        }


@dataclass(frozen=True)
class AnalysisSettings:
    disabled_rules: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScanSettings:
    include_exts: tuple[str, ...] = (".py", ".ipynb")
    exclude_dirs: tuple[str, ...] = (".git", ".venv", "node_modules", "build", "dist", "__pycache__")
    max_file_size_bytes: int = 2_000_000
    max_files: int = 40_000


@dataclass(frozen=True)
class LintConfig:
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    scan: ScanSettings = field(default_factory=ScanSettings)


@dataclass(frozen=True)
class ScanResult:
    files_scanned: int
    files_skipped: int
    diagnostics: tuple[FileDiagnostic, ...]
    # Notebook cells that did not parse; their notebook still counts as scanned.
    cells_skipped: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_scanned": self.files_scanned,
            "files_skipped": self.files_skipped,
            "cells_skipped": self.cells_skipped,
            "diagnostics_count": len(self.diagnostics),
            "diagnostics": [item.to_dict() for item in self.diagnostics],
        }
