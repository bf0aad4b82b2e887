from __future__ import annotations

import json
from pathlib import Path

from interp_lint.models import AnalysisSettings, LintConfig, ScanSettings
from interp_lint.rules import RULES_BY_ID


class ConfigError(ValueError):
    pass


def load_config(path: str | Path) -> LintConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    analysis_raw = raw.get("analysis", {})
    if not isinstance(analysis_raw, dict):
        raise ConfigError("'analysis' must be an object")

    scan_raw = raw.get("scan", {})
    if not isinstance(scan_raw, dict):
        raise ConfigError("'scan' must be an object")

    defaults = ScanSettings()
    scan = ScanSettings(
        include_exts=tuple(
            item.lower() for item in _ensure_string_list(scan_raw.get("include_exts", list(defaults.include_exts)))
        ),
        exclude_dirs=tuple(_ensure_string_list(scan_raw.get("exclude_dirs", list(defaults.exclude_dirs)))),
        max_file_size_bytes=_positive_int(scan_raw.get("max_file_size_bytes", defaults.max_file_size_bytes), "max_file_size_bytes"),
        max_files=_positive_int(scan_raw.get("max_files", defaults.max_files), "max_files"),
    )

    return LintConfig(
        analysis=AnalysisSettings(
            disabled_rules=validate_rule_ids(_ensure_string_list(analysis_raw.get("disabled_rules", []))),
        ),
        scan=scan,
    )


def validate_rule_ids(rule_ids: list[str]) -> tuple[str, ...]:
    unknown = [rule_id for rule_id in rule_ids if rule_id not in RULES_BY_ID]
    if unknown:
        raise ConfigError(
            f"Unknown rule ids: {', '.join(unknown)} (expected one of: {', '.join(RULES_BY_ID)})"
        )
    return tuple(dict.fromkeys(rule_ids))


def _positive_int(value: object, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be an integer") from None
    if number <= 0:
        raise ConfigError(f"'{key}' must be positive")
    return number


def _ensure_string_list(value: object) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError("Expected a list of strings")
    return [str(item) for item in value]
