"""Shared fixtures for a11ylocate tests."""

from __future__ import annotations

import pytest

from a11ylocate.core.models import (
    Finding,
    FindingWithFix,
    Fix,
    OriginalCode,
    RepositoryContext,
    Severity,
)


def make_item(
    finding_id: str = "f-1",
    html: str = "<button>Click</button>",
    selector: str = "button.submit-button",
    rule_id: str = "button-name",
    rule_title: str = "Buttons must have discernible text",
    with_fix: bool = True,
    file_path: str = "",
) -> FindingWithFix:
    """Build a remediation item with a simple html fix."""
    finding = Finding(
        id=finding_id,
        rule_id=rule_id,
        rule_title=rule_title,
        severity=Severity.SERIOUS,
        selector=selector,
        html=html,
        wcag_tags=("wcag2a", "wcag412"),
    )
    fix = None
    if with_fix:
        fix = Fix(
            finding_id=finding_id,
            original=OriginalCode(code=html, selector=selector),
            fixes={"html": html.replace("<button>", '<button aria-label="Submit">')},
            explanation="Give the button an accessible name",
        )
    return FindingWithFix(finding=finding, fix=fix, file_path=file_path)


@pytest.fixture
def repo() -> RepositoryContext:
    return RepositoryContext(owner="acme", name="web", branch="develop", default_branch="main")


@pytest.fixture
def item() -> FindingWithFix:
    return make_item()
