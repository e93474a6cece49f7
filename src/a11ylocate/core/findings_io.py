"""Load and save remediation items (finding + fix + path) as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from a11ylocate.core.models import Finding, FindingWithFix, Fix, OriginalCode, Severity
from a11ylocate.errors import InputError


def _require(data: dict, key: str, where: str) -> Any:
    if key not in data:
        raise InputError(f"{where}: missing '{key}'")
    return data[key]


def _strings(data: dict, key: str, where: str) -> tuple[str, ...]:
    values = data.get(key) or ()
    if not isinstance(values, (list, tuple)):
        raise InputError(f"{where}: '{key}' must be a list")
    return tuple(str(v) for v in values)


def finding_from_dict(data: dict, where: str = "finding") -> Finding:
    if not isinstance(data, dict):
        raise InputError(f"{where}: expected an object")
    severity_raw = str(data.get("severity", "moderate")).lower()
    try:
        severity = Severity(severity_raw)
    except ValueError:
        raise InputError(f"{where}: unknown severity '{severity_raw}'") from None

    return Finding(
        id=str(_require(data, "id", where)),
        rule_id=str(data.get("rule_id", "")),
        rule_title=str(data.get("rule_title", "")),
        severity=severity,
        selector=str(data.get("selector", "")),
        html=str(data.get("html", "")),
        wcag_tags=_strings(data, "wcag_tags", where),
        help_url=str(data.get("help_url", "")),
        page=str(data.get("page", "")),
    )


def fix_from_dict(data: dict, finding: Finding, where: str = "fix") -> Fix:
    if not isinstance(data, dict):
        raise InputError(f"{where}: expected an object")
    original = data.get("original") or {}
    if not isinstance(original, dict):
        raise InputError(f"{where}.original: expected an object")
    fixes = data.get("fixes")
    if not isinstance(fixes, dict) or not fixes:
        raise InputError(f"{where}: 'fixes' must map languages to code")

    return Fix(
        finding_id=str(data.get("finding_id", finding.id)),
        original=OriginalCode(
            code=str(original.get("code", finding.html)),
            selector=str(original.get("selector", finding.selector)),
            language=str(original.get("language", "html")),
        ),
        fixes={str(k): str(v) for k, v in fixes.items()},
        explanation=str(data.get("explanation", "")),
        confidence=str(data.get("confidence", "medium")),
        effort=str(data.get("effort", "medium")),
        wcag_criteria=_strings(data, "wcag_criteria", where),
    )


def item_from_dict(data: dict, index: int = 0) -> FindingWithFix:
    where = f"item {index}"
    if not isinstance(data, dict):
        raise InputError(f"{where}: expected an object")
    finding = finding_from_dict(_require(data, "finding", where), f"{where}.finding")
    fix_data = data.get("fix")
    fix = fix_from_dict(fix_data, finding, f"{where}.fix") if fix_data else None
    return FindingWithFix(
        finding=finding,
        fix=fix,
        file_path=str(data.get("file_path", "") or ""),
    )


def item_to_dict(item: FindingWithFix) -> dict:
    f = item.finding
    data: dict[str, Any] = {
        "finding": {
            "id": f.id,
            "rule_id": f.rule_id,
            "rule_title": f.rule_title,
            "severity": f.severity.value,
            "selector": f.selector,
            "html": f.html,
            "wcag_tags": list(f.wcag_tags),
            "help_url": f.help_url,
            "page": f.page,
        },
        "file_path": item.file_path,
    }
    if item.fix is not None:
        fix = item.fix
        data["fix"] = {
            "finding_id": fix.finding_id,
            "original": {
                "code": fix.original.code,
                "selector": fix.original.selector,
                "language": fix.original.language,
            },
            "fixes": dict(fix.fixes),
            "explanation": fix.explanation,
            "confidence": fix.confidence,
            "effort": fix.effort,
            "wcag_criteria": list(fix.wcag_criteria),
        }
    return data


def load_items(path: Path) -> list[FindingWithFix]:
    """Read a JSON list of items from ``path``."""
    try:
        raw = json.loads(Path(path).read_text())
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise InputError(f"{path}: expected a JSON list of items")
    return [item_from_dict(entry, i) for i, entry in enumerate(raw)]


def save_items(path: Path, items: list[FindingWithFix]) -> None:
    Path(path).write_text(json.dumps([item_to_dict(i) for i in items], indent=2) + "\n")
