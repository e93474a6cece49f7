"""Branch names, commit messages and pull-request descriptions for fixes.

Everything here is a pure function of its arguments. The only time input is
the ``timestamp`` passed to :func:`branch_name`; callers that omit it get the
current time.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from typing import Sequence, Union

from a11ylocate.core.config import ChangeConfig
from a11ylocate.core.models import FindingWithFix, RepositoryContext
from a11ylocate.errors import ChangeMetadataError

Timestamp = Union[datetime, int, float]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

GENERIC_RULE = "accessibility"
TOOL_NAME = "a11ylocate"

REVIEW_CHECKLIST = (
    "Visual appearance is correct",
    "Screen reader announces content properly",
    "Keyboard navigation works as expected",
    "Color contrast meets WCAG requirements",
    "No new accessibility issues introduced",
)

BATCH_REVIEW_CHECKLIST = (
    "Verify fixes render correctly",
    "Test with screen reader",
    "Check keyboard navigation",
    "Run accessibility scan to confirm",
)

FOOTER = f"*Generated by {TOOL_NAME} from an automated accessibility scan*"


def slugify(value: str) -> str:
    """Lower-case ``value`` and collapse every non-alphanumeric run to one hyphen."""
    return _NON_ALNUM.sub("-", value.lower()).strip("-")


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _epoch_ms(timestamp: Timestamp | None) -> int:
    if timestamp is None:
        return int(time.time() * 1000)
    if isinstance(timestamp, datetime):
        timestamp = timestamp.timestamp() * 1000
    # pre-1970 times are folded onto their magnitude
    return abs(int(timestamp))


def branch_suffix(timestamp: Timestamp | None = None) -> str:
    """Last four base-36 digits of the timestamp in milliseconds."""
    return _to_base36(_epoch_ms(timestamp))[-4:]


def branch_name(
    rule_id: str,
    file_path: str | None = None,
    line_number: int | None = None,
    *,
    timestamp: Timestamp | None = None,
    config: ChangeConfig | None = None,
) -> str:
    """Branch name of the form ``fix/a11y-<rule>-<file>[-l<line>]-<suffix>``."""
    config = config or ChangeConfig()

    rule = slugify(rule_id) or GENERIC_RULE
    file_token = ""
    if file_path:
        file_token = slugify(PurePosixPath(file_path.replace("\\", "/")).stem)
    file_token = file_token or slugify(config.fallback_file_token)

    line = f"-l{line_number}" if line_number and line_number > 0 else ""
    name = f"{config.branch_prefix}-{rule}-{file_token}{line}-{branch_suffix(timestamp)}"
    return name.lower()


def line_label(line_start: int | None, line_end: int | None = None) -> str:
    """``Line N`` or ``Lines N-M``; empty without a start line."""
    if not line_start:
        return ""
    if line_end and line_end != line_start:
        return f"Lines {line_start}-{line_end}"
    return f"Line {line_start}"


@dataclass
class ChangeDescription:
    """Inputs for a single-fix pull-request description."""

    rule_title: str
    file_path: str
    original_code: str
    fixed_code: str
    rule_id: str | None = None
    wcag_level: str | None = None
    wcag_criteria: str | None = None
    line_start: int | None = None
    line_end: int | None = None
    scan_url: str | None = None
    code_language: str = "html"


def change_description(
    params: ChangeDescription, config: ChangeConfig | None = None
) -> str:
    """Markdown body describing one accessibility fix."""
    config = config or ChangeConfig()
    rule_label = params.rule_id or GENERIC_RULE

    lines = [
        f"## Accessibility Fix: {rule_label} - {params.rule_title}",
        "",
        f"This change fixes an accessibility issue detected by {TOOL_NAME}.",
        "",
        "### Issue Details",
        f"**Rule:** {rule_label} - {params.rule_title}",
    ]

    if params.wcag_level or params.wcag_criteria:
        wcag = params.wcag_criteria or ""
        if params.wcag_level:
            wcag = f"{wcag} (Level {params.wcag_level.upper()})".strip()
        lines.append(f"**WCAG:** {wcag}")

    lines += ["", "### Changes", f"**File:** `{params.file_path}`"]
    location = line_label(params.line_start, params.line_end)
    if location:
        lines.append(f"**Location:** {location}")

    fence = params.code_language or config.code_language
    lines += [
        "",
        "<details>",
        "<summary>View code changes</summary>",
        "",
        "**Before:**",
        f"```{fence}",
        params.original_code,
        "```",
        "",
        "**After:**",
        f"```{fence}",
        params.fixed_code,
        "```",
        "",
        "</details>",
        "",
        "### Review Checklist",
    ]
    lines += [f"- [ ] {entry}" for entry in REVIEW_CHECKLIST]

    lines += ["", "### References"]
    if params.scan_url:
        lines.append(f"- [View scan results]({params.scan_url})")
    lines.append(f"- [WCAG Guidelines]({config.standards_url})")
    if params.rule_id:
        lines.append(
            f"- [{params.rule_id} rule documentation]({config.rule_docs_url}{params.rule_id})"
        )

    lines += ["", "---", FOOTER]
    return "\n".join(lines)


@dataclass
class BatchEntry:
    rule_title: str
    file_path: str


def batch_change_description(entries: Sequence[BatchEntry]) -> str:
    """Markdown body for a change that bundles several fixes."""
    lines = [
        "## Accessibility Fixes",
        "",
        f"This change was generated by {TOOL_NAME} to fix accessibility issues.",
        "",
        "### Issues Fixed",
    ]
    lines += [f"- **{e.rule_title}** in `{e.file_path}`" for e in entries]
    lines += ["", "### Review Checklist"]
    lines += [f"- [ ] {entry}" for entry in BATCH_REVIEW_CHECKLIST]
    lines += ["", "---", FOOTER]
    return "\n".join(lines)


def default_change_title(count: int) -> str:
    return f"Accessibility fixes ({count} issue{'' if count == 1 else 's'})"


def commit_message(rule_title: str, finding_id: str) -> str:
    return f"fix(a11y): {rule_title}\n\nFinding ID: {finding_id}\nGenerated by {TOOL_NAME}"


@dataclass
class FileEdit:
    path: str
    original_code: str
    fixed_code: str
    commit_message: str


@dataclass
class ChangeRequest:
    """Everything a hosting client needs to open a pull/merge request."""

    owner: str
    repo: str
    base_branch: str
    branch_name: str
    title: str
    description: str
    edits: list[FileEdit]


def build_change_request(
    items: Sequence[FindingWithFix],
    repo: RepositoryContext,
    *,
    title: str | None = None,
    line_start: int | None = None,
    line_end: int | None = None,
    scan_url: str | None = None,
    timestamp: Timestamp | None = None,
    config: ChangeConfig | None = None,
) -> ChangeRequest:
    """Assemble a change request from items whose paths have been resolved.

    A single item gets the detailed description and a file-specific branch;
    several items get the bundled description.
    """
    config = config or ChangeConfig()
    if not items:
        raise ChangeMetadataError("No items to include in the change")

    for item in items:
        if item.fix is None:
            raise ChangeMetadataError(f"Finding {item.finding.id} has no fix")
        if not item.has_path:
            raise ChangeMetadataError(f"Finding {item.finding.id} has no file path")

    edits = [
        FileEdit(
            path=item.file_path.strip(),
            original_code=item.fix.original.code,
            fixed_code=item.fix.primary_code,
            commit_message=commit_message(item.finding.rule_title, item.finding.id),
        )
        for item in items
    ]

    if len(items) == 1:
        item = items[0]
        finding = item.finding
        wcag = ", ".join(item.fix.wcag_criteria or finding.wcag_tags) or None
        description = change_description(
            ChangeDescription(
                rule_title=finding.rule_title,
                file_path=edits[0].path,
                original_code=edits[0].original_code,
                fixed_code=edits[0].fixed_code,
                rule_id=finding.rule_id or None,
                wcag_criteria=wcag,
                line_start=line_start,
                line_end=line_end,
                scan_url=scan_url,
                code_language=item.fix.original.language or config.code_language,
            ),
            config,
        )
        branch = branch_name(
            finding.rule_id or GENERIC_RULE,
            edits[0].path,
            line_start,
            timestamp=timestamp,
            config=config,
        )
        change_title = title or f"fix(a11y): {finding.rule_title}"
    else:
        description = batch_change_description(
            [BatchEntry(i.finding.rule_title, e.path) for i, e in zip(items, edits)]
        )
        branch = branch_name(GENERIC_RULE, None, timestamp=timestamp, config=config)
        change_title = title or default_change_title(len(items))

    return ChangeRequest(
        owner=repo.owner,
        repo=repo.name,
        base_branch=repo.branch or repo.default_branch,
        branch_name=branch,
        title=change_title,
        description=description,
        edits=edits,
    )
