from __future__ import annotations

import ast
import json
import logging
from pathlib import Path
from typing import Iterable, Iterator

from interp_lint.analysis import analyze_tree
from interp_lint.models import AnalysisSettings, Diagnostic, FileDiagnostic, LintConfig, ScanResult, ScanSettings
from interp_lint.python_source import parse_source


logger = logging.getLogger(__name__)

MAGIC_PREFIXES = ("%", "!")


def analyze_source(source: str, settings: AnalysisSettings | None = None) -> list[Diagnostic]:
    return analyze_tree(parse_source(source), settings)


def scan_paths(paths: Iterable[str | Path], config: LintConfig | None = None) -> ScanResult:
    config = config or LintConfig()
    files_scanned = 0
    files_skipped = 0
    cells_skipped = 0
    diagnostics: list[FileDiagnostic] = []

    for file_path in iter_candidate_files(paths, config.scan):
        if files_scanned >= config.scan.max_files:
            logger.warning("Stopping after %d files (max_files)", config.scan.max_files)
            break
        files_scanned += 1

        try:
            if file_path.stat().st_size > config.scan.max_file_size_bytes:
                logger.info("Skipping %s: larger than %d bytes", file_path, config.scan.max_file_size_bytes)
                files_skipped += 1
                continue
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
            files_skipped += 1
            continue

        if file_path.suffix.lower() == ".ipynb":
            notebook = _scan_notebook(file_path, text, config.analysis)
            if notebook is None:
                files_skipped += 1
                continue
            found, skipped = notebook
            cells_skipped += skipped
        else:
            found = _scan_python(str(file_path), text, config.analysis)
            if found is None:
                files_skipped += 1
                continue
        diagnostics.extend(found)

    return ScanResult(
        files_scanned=files_scanned,
        files_skipped=files_skipped,
        diagnostics=tuple(diagnostics),
        cells_skipped=cells_skipped,
    )


def iter_candidate_files(paths: Iterable[str | Path], scan: ScanSettings) -> Iterator[Path]:
    include = {ext.lower() for ext in scan.include_exts}
    exclude = set(scan.exclude_dirs)

    for item in paths:
        root = Path(item)
        if root.is_file():
            yield root
            continue
        if not root.is_dir():
            raise ValueError(f"Path does not exist: {root}")

        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            if any(part in exclude for part in path.relative_to(root).parts):
                continue
            if path.suffix.lower() in include:
                yield path


def _scan_python(file_path: str, source: str, settings: AnalysisSettings) -> list[FileDiagnostic] | None:
    if not _parses(file_path, source):
        return None
    return [FileDiagnostic(file_path=file_path, diagnostic=item) for item in analyze_source(source, settings)]


def _scan_notebook(
    file_path: Path, text: str, settings: AnalysisSettings
) -> tuple[list[FileDiagnostic], int] | None:
    try:
        notebook = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Skipping %s: invalid notebook JSON: %s", file_path, exc)
        return None

    cells = notebook.get("cells", []) if isinstance(notebook, dict) else []
    if not isinstance(cells, list):
        logger.warning("Skipping %s: notebook has no cell list", file_path)
        return None

    found: list[FileDiagnostic] = []
    cells_skipped = 0
    for cell_index, cell in enumerate(cells, start=1):
        if not isinstance(cell, dict):
            continue
        if str(cell.get("cell_type", "")).strip().lower() != "code":
            continue

        source = _neutralize_magics(_read_cell_source(cell.get("source")))
        if not source.strip():
            continue
        if not _parses(f"{file_path} cell {cell_index}", source):
            cells_skipped += 1
            continue

        found.extend(
            FileDiagnostic(file_path=str(file_path), diagnostic=item, cell=cell_index)
            for item in analyze_source(source, settings)
        )
    return found, cells_skipped


def _parses(label: str, source: str) -> bool:
    try:
        ast.parse(source)
    except (SyntaxError, ValueError) as exc:
        logger.warning("Skipping %s: not valid Python: %s", label, exc)
        return False
    return True


def _read_cell_source(source: object) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, list):
        return "".join(str(item) for item in source)
    return ""


def _neutralize_magics(source: str) -> str:
    """Replace IPython magic lines with ``pass`` at the same indentation.

    A line starting with ``%`` or ``!`` is only a magic when it opens a new
    statement. Inside brackets, a backslash continuation or a triple-quoted
    string it is ordinary code (``!= b)``, ``% width``), so it is kept when the
    lines before it plus ``pass`` do not parse. Line numbers are unchanged.
    """
    kept: list[str] = []
    for line in source.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith(MAGIC_PREFIXES):
            replacement = line[: len(line) - len(stripped)] + "pass"
            if _is_complete("\n".join(kept + [replacement])):
                kept.append(replacement)
                continue
        kept.append(line)
    return "\n".join(kept)


def _is_complete(source: str) -> bool:
    try:
        ast.parse(source)
    except (SyntaxError, ValueError):
        return False
    return True
