"""Search query construction from a finding's markup and selector.

Text content is tried first because it usually appears verbatim in the
component source; selector classes are the fallback.
"""

from __future__ import annotations

import re

from a11ylocate.core.config import DetectionConfig

_TEXT_RUN = re.compile(r">([^<]+)<")
_PUNCTUATION_ONLY = re.compile(r"^[\s.,;:!?\-_|/\\*•·…]+$")
_SELECTOR_CLASS = re.compile(r"\.([a-zA-Z](?:\\.|[\w-])+)")
_CSS_ESCAPE = re.compile(r"\\(.)")


def extract_text_content(
    html: str,
    min_length: int = 3,
    max_length: int = 100,
) -> str | None:
    """Return the first visible text run in ``html`` if it is a usable query.

    The trimmed text must be longer than ``min_length``, no longer than
    ``max_length`` and contain something other than whitespace/punctuation.
    """
    text = next(
        (m.group(1).strip() for m in _TEXT_RUN.finditer(html) if m.group(1).strip()),
        "",
    )
    if not text or _PUNCTUATION_ONLY.match(text):
        return None
    if len(text) <= min_length or len(text) > max_length:
        return None
    return text


def extract_selector_classes(
    selector: str,
    min_length: int = 5,
    denylist: list[str] | tuple[str, ...] = (),
    limit: int = 2,
) -> list[str]:
    """Return up to ``limit`` significant class tokens from a CSS selector."""
    classes = []
    for raw in _SELECTOR_CLASS.findall(selector):
        # `.md\:flex` is how escaped utility classes appear in selectors
        token = _CSS_ESCAPE.sub(r"\1", raw)
        if len(token) <= min_length:
            continue
        if any(token.startswith(prefix) for prefix in denylist):
            continue
        classes.append(token)
        if len(classes) == limit:
            break
    return classes


def build_queries(
    html: str,
    selector: str,
    config: DetectionConfig | None = None,
) -> list[str]:
    """Build the ordered search queries for a finding, most specific first."""
    config = config or DetectionConfig()
    queries: list[str] = []

    text = extract_text_content(html, config.min_text_length, config.max_text_length)
    if text:
        queries.append(text)

    classes = extract_selector_classes(
        selector,
        min_length=config.min_class_length,
        denylist=config.class_prefix_denylist,
        limit=config.max_class_tokens,
    )
    if classes:
        queries.append(" ".join(classes))

    return queries
