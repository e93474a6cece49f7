"""Tests for reading and writing remediation items."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from a11ylocate.core.findings_io import item_from_dict, item_to_dict, load_items, save_items
from a11ylocate.core.models import Severity
from a11ylocate.errors import InputError

from conftest import make_item

RAW_ITEM = {
    "finding": {
        "id": "scan-1-0",
        "rule_id": "image-alt",
        "rule_title": "Images must have alternate text",
        "severity": "Critical",
        "selector": "img.hero-image",
        "html": '<img class="hero-image" src="hero.png">',
        "wcag_tags": ["wcag2a", "wcag111"],
    },
    "fix": {
        "fixes": {"html": '<img class="hero-image" src="hero.png" alt="Team photo">'},
        "explanation": "Describe the image",
        "confidence": "high",
    },
}


class TestItemFromDict:
    def test_parses_finding_and_fix(self):
        item = item_from_dict(RAW_ITEM)

        assert item.finding.id == "scan-1-0"
        assert item.finding.severity == Severity.CRITICAL
        assert item.finding.wcag_tags == ("wcag2a", "wcag111")
        assert item.fix.finding_id == "scan-1-0"
        assert item.fix.original.code == RAW_ITEM["finding"]["html"]
        assert item.fix.original.selector == "img.hero-image"
        assert item.fix.confidence == "high"
        assert item.file_path == ""

    def test_item_without_fix(self):
        item = item_from_dict({"finding": {"id": "x"}, "file_path": None})

        assert item.fix is None
        assert item.file_path == ""
        assert item.finding.severity == Severity.MODERATE

    @pytest.mark.parametrize("data, message", [
        ([], "expected an object"),
        ({}, "missing 'finding'"),
        ({"finding": {"rule_id": "x"}}, "missing 'id'"),
        ({"finding": {"id": "x", "severity": "urgent"}}, "unknown severity"),
        ({"finding": {"id": "x"}, "fix": {"fixes": {}}}, "'fixes' must map"),
        ({"finding": "not-an-object"}, r"item 3\.finding: expected an object"),
        ({"finding": {"id": "x"}, "fix": ["html"]}, r"item 3\.fix: expected an object"),
        (
            {"finding": {"id": "x"}, "fix": {"original": "<a>", "fixes": {"html": "<a>"}}},
            r"fix\.original: expected an object",
        ),
        ({"finding": {"id": "x", "wcag_tags": 412}}, "'wcag_tags' must be a list"),
    ])
    def test_rejects_malformed(self, data, message: str):
        with pytest.raises(InputError, match=message):
            item_from_dict(data, 3)

    def test_dict_round_trip(self):
        item = make_item(file_path="src/Button.tsx")

        assert item_from_dict(item_to_dict(item)) == item


class TestFiles:
    def test_save_then_load(self, tmp_path: Path):
        path = tmp_path / "items.json"
        items = [make_item("a", file_path="src/A.tsx"), make_item("b", with_fix=False)]

        save_items(path, items)

        assert load_items(path) == items
        assert json.loads(path.read_text())[0]["file_path"] == "src/A.tsx"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(InputError, match="Cannot read"):
            load_items(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "items.json"
        path.write_text("{not json")

        with pytest.raises(InputError, match="not valid JSON"):
            load_items(path)

    def test_top_level_must_be_list(self, tmp_path: Path):
        path = tmp_path / "items.json"
        path.write_text(json.dumps(RAW_ITEM))

        with pytest.raises(InputError, match="expected a JSON list"):
            load_items(path)
