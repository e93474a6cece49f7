"""Tests for branch names and change descriptions."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from a11ylocate.change.metadata import (
    BatchEntry,
    ChangeDescription,
    batch_change_description,
    branch_name,
    branch_suffix,
    build_change_request,
    change_description,
    commit_message,
    default_change_title,
    line_label,
    slugify,
)
from a11ylocate.core.config import ChangeConfig
from a11ylocate.errors import ChangeMetadataError

from conftest import make_item

BRANCH_PATTERN = re.compile(r"^fix/a11y-[a-z0-9-]+-[a-z0-9-]+(-l\d+)?-[a-z0-9]{1,4}$")
TS = 1_704_067_200_000


class TestSlugAndSuffix:
    @pytest.mark.parametrize("value, expected", [
        ("color-contrast", "color-contrast"),
        ("color-contrast@2.0", "color-contrast-2-0"),
        ("Image Alt!!", "image-alt"),
        ("--aria__label--", "aria-label"),
        ("", ""),
    ])
    def test_slugify(self, value: str, expected: str):
        assert slugify(value) == expected

    def test_suffix_is_last_four_base36_digits(self):
        assert branch_suffix(0) == "0"
        assert branch_suffix(35) == "z"
        assert branch_suffix(36) == "10"
        assert branch_suffix(36 ** 4) == "0000"
        assert branch_suffix(36 ** 4 + 1) == "0001"

    def test_suffix_accepts_datetime(self):
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert branch_suffix(moment) == branch_suffix(TS)

    def test_negative_timestamps_terminate(self):
        assert branch_suffix(-5) == "5"
        assert branch_suffix(-(36 ** 4) - 1) == "0001"
        assert branch_name("label", "Form.jsx", timestamp=-5) == "fix/a11y-label-form-5"

    def test_pre_epoch_datetime(self):
        moment = datetime(1960, 6, 1, tzinfo=timezone.utc)

        assert branch_suffix(moment) == branch_suffix(-int(moment.timestamp() * 1000))
        assert BRANCH_PATTERN.match(branch_name("label", "Form.jsx", timestamp=moment))


class TestBranchName:
    def test_sanitizes_rule_id(self):
        name = branch_name("color-contrast@2.0", "file.tsx", timestamp=TS)

        assert name.startswith("fix/a11y-color-contrast-2-0-")
        assert name == f"fix/a11y-color-contrast-2-0-file-{branch_suffix(TS)}"

    def test_uses_file_base_name(self):
        name = branch_name("image-alt", "src/components/Hero.Banner.tsx", timestamp=TS)

        assert name == f"fix/a11y-image-alt-hero-banner-{branch_suffix(TS)}"

    def test_fallback_without_file(self):
        assert branch_name("label", None, timestamp=TS) == f"fix/a11y-label-fix-{branch_suffix(TS)}"
        assert branch_name("label", "", timestamp=TS) == f"fix/a11y-label-fix-{branch_suffix(TS)}"

    def test_line_marker(self):
        name = branch_name("label", "Form.jsx", 42, timestamp=TS)

        assert name == f"fix/a11y-label-form-l42-{branch_suffix(TS)}"

    def test_no_line_marker_for_zero(self):
        assert "-l0" not in branch_name("label", "Form.jsx", 0, timestamp=TS)

    @pytest.mark.parametrize("rule_id, path, line", [
        ("Color-Contrast", "src/App.TSX", None),
        ("ARIA_Roles", "Nav Menu.vue", 7),
        ("", None, None),
        ("!!!", "....", 3),
    ])
    def test_always_lower_case_and_matches_pattern(self, rule_id, path, line):
        name = branch_name(rule_id, path, line, timestamp=TS)

        assert name == name.lower()
        assert BRANCH_PATTERN.match(name), name

    def test_timestamps_only_change_suffix(self):
        first = branch_name("color-contrast", "Button.tsx", timestamp=36 ** 4 + 1)
        second = branch_name("color-contrast", "Button.tsx", timestamp=36 ** 4 + 2)

        assert first != second
        assert first.rsplit("-", 1)[0] == second.rsplit("-", 1)[0]

    def test_custom_prefix(self):
        config = ChangeConfig(branch_prefix="A11Y/Fix", fallback_file_token="page")

        assert branch_name("label", None, timestamp=0, config=config) == "a11y/fix-label-page-0"

    def test_defaults_to_current_time(self):
        assert BRANCH_PATTERN.match(branch_name("label", "Form.jsx"))


def _params(**overrides) -> ChangeDescription:
    values = dict(
        rule_title="Elements must have sufficient color contrast",
        file_path="src/components/Button.tsx",
        original_code='<button class="btn">Go</button>',
        fixed_code='<button class="btn btn-dark">Go</button>',
        rule_id="color-contrast",
    )
    values.update(overrides)
    return ChangeDescription(**values)


class TestLineLabel:
    def test_variants(self):
        assert line_label(None) == ""
        assert line_label(12) == "Line 12"
        assert line_label(12, 12) == "Line 12"
        assert line_label(12, 18) == "Lines 12-18"


class TestChangeDescription:
    def test_fixed_sections_present(self):
        body = change_description(_params())

        assert body.startswith(
            "## Accessibility Fix: color-contrast - Elements must have sufficient color contrast"
        )
        assert "**Rule:** color-contrast - Elements must have sufficient color contrast" in body
        assert "**File:** `src/components/Button.tsx`" in body
        assert "<details>" in body and "</details>" in body
        assert "**Before:**\n```html\n<button class=\"btn\">Go</button>\n```" in body
        assert "**After:**\n```html\n<button class=\"btn btn-dark\">Go</button>\n```" in body
        assert "- [ ] Keyboard navigation works as expected" in body
        assert "- [WCAG Guidelines](https://www.w3.org/WAI/WCAG21/quickref/)" in body
        assert body.rstrip().endswith("*Generated by a11ylocate from an automated accessibility scan*")

    def test_single_line_when_start_equals_end(self):
        body = change_description(_params(line_start=10, line_end=10))

        assert "**Location:** Line 10" in body
        assert "Lines" not in body

    def test_line_range(self):
        body = change_description(_params(line_start=10, line_end=14))

        assert "**Location:** Lines 10-14" in body

    def test_no_location_without_lines(self):
        assert "**Location:**" not in change_description(_params())

    def test_scan_link_only_with_url(self):
        with_url = change_description(_params(scan_url="https://scans.example/42"))
        without = change_description(_params())

        assert "- [View scan results](https://scans.example/42)" in with_url
        assert "View scan results" not in without

    def test_without_rule_id(self):
        body = change_description(_params(rule_id=None))

        assert "**Rule:** accessibility - Elements must have sufficient color contrast" in body
        assert "rule documentation" not in body
        assert "dequeuniversity" not in body

    def test_rule_documentation_link(self):
        body = change_description(_params())

        assert (
            "- [color-contrast rule documentation]"
            "(https://dequeuniversity.com/rules/axe/4.4/color-contrast)"
        ) in body

    def test_wcag_line(self):
        assert "**WCAG:** 1.4.3 (Level AA)" in change_description(
            _params(wcag_criteria="1.4.3", wcag_level="aa")
        )
        assert "**WCAG:** 4.1.2" in change_description(_params(wcag_criteria="4.1.2"))
        assert "**WCAG:**" not in change_description(_params())

    def test_level_only(self):
        body = change_description(_params(wcag_level="a"))

        assert "**WCAG:** (Level A)" in body

    def test_code_language_in_fence(self):
        body = change_description(_params(code_language="tsx"))

        assert "```tsx" in body


class TestBatchMetadata:
    def test_batch_description_lists_every_fix(self):
        body = batch_change_description([
            BatchEntry("Images must have alternate text", "src/Hero.tsx"),
            BatchEntry("Form elements must have labels", "src/Form.tsx"),
        ])

        assert "- **Images must have alternate text** in `src/Hero.tsx`" in body
        assert "- **Form elements must have labels** in `src/Form.tsx`" in body
        assert "- [ ] Run accessibility scan to confirm" in body

    def test_default_title_pluralizes(self):
        assert default_change_title(1) == "Accessibility fixes (1 issue)"
        assert default_change_title(3) == "Accessibility fixes (3 issues)"

    def test_commit_message(self):
        assert commit_message("Buttons need names", "f-9").splitlines() == [
            "fix(a11y): Buttons need names",
            "",
            "Finding ID: f-9",
            "Generated by a11ylocate",
        ]


class TestBuildChangeRequest:
    def test_single_item(self, repo):
        item = make_item(file_path="src/Button.tsx")

        request = build_change_request([item], repo, line_start=3, line_end=5, timestamp=TS)

        assert request.owner == "acme" and request.repo == "web"
        assert request.base_branch == "develop"
        assert request.branch_name == f"fix/a11y-button-name-button-l3-{branch_suffix(TS)}"
        assert request.title == "fix(a11y): Buttons must have discernible text"
        assert "**Location:** Lines 3-5" in request.description
        assert "**WCAG:** wcag2a, wcag412" in request.description
        assert request.edits[0].path == "src/Button.tsx"
        assert 'aria-label="Submit"' in request.edits[0].fixed_code

    def test_several_items(self, repo):
        items = [make_item("a", file_path="src/A.tsx"), make_item("b", file_path="src/B.tsx")]

        request = build_change_request(items, repo, timestamp=TS)

        assert request.title == "Accessibility fixes (2 issues)"
        assert request.branch_name == f"fix/a11y-accessibility-fix-{branch_suffix(TS)}"
        assert [e.path for e in request.edits] == ["src/A.tsx", "src/B.tsx"]
        assert "### Issues Fixed" in request.description

    def test_requires_path(self, repo):
        with pytest.raises(ChangeMetadataError, match="no file path"):
            build_change_request([make_item()], repo)

    def test_requires_fix(self, repo):
        with pytest.raises(ChangeMetadataError, match="no fix"):
            build_change_request([make_item(with_fix=False, file_path="a.tsx")], repo)

    def test_requires_items(self, repo):
        with pytest.raises(ChangeMetadataError):
            build_change_request([], repo)
