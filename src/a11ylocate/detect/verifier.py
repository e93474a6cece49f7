"""Structural verifier: locate an HTML fragment inside component source.

The scanner reports rendered HTML, while repositories hold JSX/TSX (or
templates) where ``class`` is spelled ``className`` and attributes may be
split across lines. The matcher below therefore compares on text content and
class names rather than on raw markup, trying three strategies in order of
reliability:

1. the element's visible text,
2. a combination of significant classes,
3. the element's tag plus any shared class.

Any callable with the same signature as :func:`verify_match` can stand in for
it when a :class:`~a11ylocate.detect.resolver.FileResolver` is built.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from a11ylocate.core.models import Confidence

_CLASS_ATTR = re.compile(r"""(?:class|className)=(?:\{\s*[`"']|["'{`])([^"'}`]+)["'}`]""", re.IGNORECASE)
_FIRST_TAG = re.compile(r"<(\w+)")
_OPEN_TAG = re.compile(r"<\w+")
_CLOSE_TAG = re.compile(r"</\w+>")
_RESPONSIVE = re.compile(r"^(sm:|md:|lg:|xl:)")


@dataclass
class CodeLocation:
    """Where a fragment was found inside a file (1-based, inclusive lines)."""

    line_start: int
    line_end: int
    is_comment: bool = False


@dataclass
class VerifyResult:
    confidence: Confidence
    reason: str
    line_start: int | None = None
    line_end: int | None = None
    matched_code: str = ""
    is_comment: bool = False
    instances: list[CodeLocation] = field(default_factory=list)


def extract_all_classes(code: str) -> list[str]:
    """All class names in ``class=``/``className=`` attributes, de-duplicated in order."""
    seen: dict[str, None] = {}
    for match in _CLASS_ATTR.finditer(code):
        for name in match.group(1).split():
            seen.setdefault(name, None)
    return list(seen)


def is_comment_line(line: str) -> bool:
    stripped = line.strip()
    return (
        stripped.startswith(("//", "/*", "*", "<!--"))
        or ("// " in stripped and "<" not in stripped)
    )


def is_non_code_context(lines: list[str], index: int) -> bool:
    """True if ``lines[index]`` sits in a comment or a type declaration."""
    line = lines[index]
    stripped = line.strip()

    if is_comment_line(line):
        return True
    if stripped.startswith("|") and "//" in stripped:
        return True
    if stripped.startswith(("type ", "interface ")):
        return True

    in_block = False
    for previous in lines[max(0, index - 10): index + 1]:
        if "/*" in previous:
            in_block = True
        if "*/" in previous:
            in_block = False
    return in_block


def _closes_element(line: str) -> bool:
    return ">" in line and ("/>" in line or "</" in line)


def find_all_instances(
    file_content: str,
    original_html: str,
    text_content: str | None,
) -> list[CodeLocation]:
    """Every place the fragment plausibly occurs, real code before comments."""
    lines = file_content.split("\n")
    significant = [
        c for c in extract_all_classes(original_html)
        if len(c) > 5 and not _RESPONSIVE.match(c)
    ]
    instances: list[CodeLocation] = []

    for i, line in enumerate(lines):
        has_text = bool(text_content) and text_content in line
        line_classes = extract_all_classes(line)
        has_classes = sum(1 for c in significant if c in line_classes) >= 2
        if not (has_text or has_classes):
            continue

        start = end = i
        for j in range(i, max(0, i - 5) - 1, -1):
            if "<" in lines[j] and not is_comment_line(lines[j]):
                start = j
                break
        for j in range(i, min(len(lines), i + 5)):
            if _closes_element(lines[j]):
                end = j
                break

        location = CodeLocation(start + 1, end + 1, is_non_code_context(lines, i))
        if not any(
            inst.line_start == location.line_start and inst.line_end == location.line_end
            for inst in instances
        ):
            instances.append(location)

    instances.sort(key=lambda inst: (inst.is_comment, inst.line_start))
    return instances


def verify_match(
    file_content: str,
    original_html: str,
    text_content: str | None,
) -> VerifyResult | None:
    """Find ``original_html`` in ``file_content``; ``None`` when it is not there."""
    lines = file_content.split("\n")
    html_classes = extract_all_classes(original_html)
    tag_match = _FIRST_TAG.search(original_html)
    html_tag = tag_match.group(1).lower() if tag_match else None

    instances = find_all_instances(file_content, original_html, text_content)
    extra = instances if len(instances) > 1 else []
    has_real_code = any(not inst.is_comment for inst in instances)

    # Strategy 1: visible text
    if text_content and len(text_content) >= 3:
        for i, line in enumerate(lines):
            if text_content not in line:
                continue
            in_comment = is_non_code_context(lines, i)
            if in_comment and has_real_code:
                continue

            start = end = i
            for j in range(i, max(0, i - 5) - 1, -1):
                if _OPEN_TAG.search(lines[j]) and not is_comment_line(lines[j]):
                    start = j
                    break
            for j in range(i, min(len(lines), i + 5)):
                if _closes_element(lines[j]):
                    end = j
                    break

            matched = "\n".join(lines[start: end + 1])
            overlap = sum(1 for c in extract_all_classes(matched) if c in html_classes)
            if overlap > 2:
                confidence = Confidence.HIGH
            elif in_comment:
                confidence = Confidence.LOW
            else:
                confidence = Confidence.MEDIUM

            return VerifyResult(
                confidence=confidence,
                reason=f'Text "{text_content}" found with {overlap} matching classes',
                line_start=start + 1,
                line_end=end + 1,
                matched_code=matched,
                is_comment=in_comment,
                instances=extra,
            )

    # Strategy 2: class combination
    if len(html_classes) >= 2:
        significant = [c for c in html_classes if not _RESPONSIVE.match(c) and len(c) > 4]
        needed = min(2, len(significant))

        for i, line in enumerate(lines):
            line_classes = extract_all_classes(line)
            matches = [c for c in significant if c in line_classes]
            if not matches or len(matches) < needed:
                continue
            if is_non_code_context(lines, i):
                continue

            start = end = i
            for j in range(i, max(0, i - 10) - 1, -1):
                if "<" in lines[j] and not lines[j].strip().startswith("//"):
                    start = j
                    break
            depth = 0
            for j in range(i, min(len(lines), i + 10)):
                current = lines[j]
                depth += current.count("<")
                depth -= current.count("/>")
                depth -= current.count("</")
                if depth <= 0 or "/>" in current or _CLOSE_TAG.search(current):
                    end = j
                    break

            return VerifyResult(
                confidence=Confidence.HIGH if len(matches) >= 3 else Confidence.MEDIUM,
                reason=f"{len(matches)} matching classes: {', '.join(matches[:3])}",
                line_start=start + 1,
                line_end=end + 1,
                matched_code="\n".join(lines[start: end + 1]),
                instances=extra,
            )

    # Strategy 3: same tag with any shared class
    if html_tag:
        tag_pattern = re.compile(rf"<{re.escape(html_tag)}[\s>]", re.IGNORECASE)
        for i, line in enumerate(lines):
            if not tag_pattern.search(line) or is_non_code_context(lines, i):
                continue
            shared = [c for c in extract_all_classes(line) if c in html_classes]
            if shared:
                return VerifyResult(
                    confidence=Confidence.LOW,
                    reason=f"<{html_tag}> tag with {len(shared)} matching classes",
                    line_start=i + 1,
                    line_end=i + 1,
                    matched_code=line,
                    instances=extra,
                )

    return None
