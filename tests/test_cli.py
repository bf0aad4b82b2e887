import json
from pathlib import Path

import pytest

from interp_lint.cli import main


def _write_sample(tmp_path: Path) -> Path:
    path = tmp_path / "sample.py"
    path.write_text("name = 'x'\ngreeting = f\"${name}\"\nempty = f\"\"\n", encoding="utf-8")
    return path


def test_check_prints_text_diagnostics(tmp_path: Path, capsys):
    path = _write_sample(tmp_path)

    exit_code = main(["check", str(path)])

    lines = capsys.readouterr().out.splitlines()
    assert exit_code == 1
    assert lines == [
        f"{path}:2:14: warning [DollarBrace] Avoid using ${{}} in interpolated strings.",
        f"{path}:3:9: warning [UnnecessaryInterpolation] "
        "Avoid using an interpolated string where an equivalent literal string exists.",
        "2 diagnostic(s) in 1 file(s) checked",
    ]


def test_check_json_and_report_files(tmp_path: Path, capsys):
    path = _write_sample(tmp_path)
    out_dir = tmp_path / "report"

    exit_code = main(["check", str(path), "--format", "json", "--output-dir", str(out_dir)])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert payload["diagnostics_count"] == 2
    assert payload["counts"]["by_rule"] == {"DollarBrace": 1, "UnnecessaryInterpolation": 1}
    assert payload["diagnostics"][0]["line"] == 2
    assert (out_dir / "summary.json").exists()
    assert "rule_id" in (out_dir / "diagnostics.csv").read_text(encoding="utf-8")


def test_check_with_all_rules_disabled_is_clean(tmp_path: Path, capsys):
    path = _write_sample(tmp_path)

    exit_code = main(
        ["check", str(path), "--disable", "DollarBrace", "--disable", "UnnecessaryInterpolation"]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "0 diagnostic(s) in 1 file(s) checked"


def test_check_rejects_unknown_rule_and_missing_path(tmp_path: Path):
    path = _write_sample(tmp_path)

    with pytest.raises(SystemExit) as unknown_rule:
        main(["check", str(path), "--disable", "NoSuchRule"])
    with pytest.raises(SystemExit) as missing_path:
        main(["check", str(tmp_path / "missing.py")])

    assert unknown_rule.value.code == 2
    assert missing_path.value.code == 2


def test_rules_lists_rule_table(capsys):
    assert main(["rules"]) == 0

    rules = json.loads(capsys.readouterr().out)
    assert [rule["rule_id"] for rule in rules] == ["DollarBrace", "UnnecessaryInterpolation"]
    assert {rule["severity"] for rule in rules} == {"warning"}


def test_clean_check_writes_empty_diagnostics_csv(tmp_path: Path, capsys):
    path = _write_sample(tmp_path)
    out_dir = tmp_path / "report"

    exit_code = main(
        ["check", str(path), "--disable", "DollarBrace", "--disable", "UnnecessaryInterpolation", "--output-dir", str(out_dir)]
    )

    capsys.readouterr()
    assert exit_code == 0
    assert (out_dir / "diagnostics.csv").read_text(encoding="utf-8") == ""
    assert json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))["diagnostics_count"] == 0
