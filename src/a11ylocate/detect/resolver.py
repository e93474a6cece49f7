"""Search-and-verify pipeline that resolves one finding to a repository file.

Usage::

    from a11ylocate.detect.resolver import FileResolver

    resolver = FileResolver(search_code=client.search_code,
                            get_file_content=client.get_file_content)
    outcome = await resolver.resolve(item, repo)

``search_code`` and ``get_file_content`` are supplied by the caller (a
hosting-platform client, or :class:`~a11ylocate.detect.local_repo.LocalRepository`).
Failures of either, or of the verifier, are logged and only skip the query
they occurred in; :meth:`FileResolver.resolve` never raises for them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Protocol

from a11ylocate.core.config import DetectionConfig
from a11ylocate.core.models import (
    Confidence,
    DetectionOutcome,
    FindingWithFix,
    Match,
    NoMatch,
    NoSignal,
    RepositoryContext,
    WeakMatch,
)
from a11ylocate.detect.queries import build_queries, extract_text_content
from a11ylocate.detect.state import DetectionStore
from a11ylocate.detect.verifier import verify_match

logger = logging.getLogger(__name__)


class SearchCode(Protocol):
    async def __call__(self, owner: str, repo: str, query: str) -> list[Any]: ...


class GetFileContent(Protocol):
    async def __call__(
        self, owner: str, repo: str, path: str, branch: str
    ) -> Optional[str]: ...


class Verifier(Protocol):
    def __call__(
        self, file_content: str, original_html: str, text_content: Optional[str]
    ) -> Any: ...


PathCallback = Callable[[FindingWithFix, str], None]


def result_path(result: Any) -> str:
    """Path of a search hit given as a mapping or an object with ``.path``."""
    if isinstance(result, dict):
        return str(result.get("path") or "")
    return str(getattr(result, "path", "") or "")


def to_match(path: str, verdict: Any) -> Match:
    """Build a :class:`Match` from a verifier result (object or mapping)."""
    if isinstance(verdict, dict):
        get = verdict.get
    else:
        def get(key, default=None):
            return getattr(verdict, key, default)

    confidence = get("confidence", Confidence.MEDIUM)
    if not isinstance(confidence, Confidence):
        confidence = Confidence(str(confidence).lower())
    return Match(
        path=path,
        confidence=confidence,
        reason=get("reason", "") or "",
        line_start=get("line_start", get("lineStart")),
        line_end=get("line_end", get("lineEnd")),
    )


def is_source_path(path: str, config: DetectionConfig) -> bool:
    """True for component sources; vendored code and tests are rejected."""
    normalized = path.replace("\\", "/")
    if not normalized.lower().endswith(tuple(ext.lower() for ext in config.source_extensions)):
        return False
    segments = normalized.split("/")
    if any(segment in segments for segment in config.vendor_segments):
        return False
    return not any(marker in normalized for marker in config.test_markers)


def filter_candidates(results: Iterable[Any], config: DetectionConfig) -> list[str]:
    """Source-like paths from raw search results, in result order."""
    paths = (result_path(r) for r in results)
    return [p for p in paths if p and is_source_path(p, config)]


class FileResolver:
    """Resolves a :class:`FindingWithFix` to the file that renders it.

    Queries are tried most-specific first. The first candidate the verifier
    confirms wins; a candidate the verifier cannot confirm is kept as a weak
    match, and only the first such weak match is kept.
    """

    def __init__(
        self,
        search_code: SearchCode | None = None,
        get_file_content: GetFileContent | None = None,
        verifier: Verifier = verify_match,
        store: DetectionStore | None = None,
        config: DetectionConfig | None = None,
        on_path_resolved: PathCallback | None = None,
    ) -> None:
        self.search_code = search_code
        self.get_file_content = get_file_content
        self.verifier = verifier
        self.store = store if store is not None else DetectionStore()
        self.config = config or DetectionConfig()
        self.on_path_resolved = on_path_resolved

    @property
    def has_search_capability(self) -> bool:
        return self.search_code is not None and self.get_file_content is not None

    def can_resolve(self, item: FindingWithFix) -> bool:
        return self.has_search_capability and item.fix is not None

    async def resolve(
        self, item: FindingWithFix, repo: RepositoryContext
    ) -> DetectionOutcome | None:
        """Run detection for one item and record the outcome in the store.

        Returns ``None`` (and leaves the store untouched) when the item has
        no fix or the resolver has no search capability.
        """
        if not self.can_resolve(item):
            return None

        finding_id = item.finding.id
        self.store.begin(finding_id)
        outcome: DetectionOutcome = NoMatch()
        try:
            outcome = await self._detect(item, repo)
        except Exception:
            logger.exception("Detection failed for finding %s", finding_id)
            outcome = NoMatch()
        finally:
            self.store.complete(finding_id, outcome)

        logger.info(
            "Finding %s: %s %s (%s)",
            finding_id,
            type(outcome).__name__,
            outcome.path or "-",
            outcome.reason,
        )

        if isinstance(outcome, Match) or (
            isinstance(outcome, WeakMatch) and self.config.accept_weak_matches
        ):
            self._write_path(item, outcome.path)
        return outcome

    async def _detect(
        self, item: FindingWithFix, repo: RepositoryContext
    ) -> DetectionOutcome:
        assert item.fix is not None
        original_html = item.fix.original.code
        selector = item.finding.selector

        queries = build_queries(original_html, selector, self.config)
        if not queries:
            return NoSignal()

        text_content = extract_text_content(
            original_html, self.config.min_text_length, self.config.max_text_length
        )
        weak: WeakMatch | None = None

        for query in queries:
            logger.debug("Searching %s for %r", repo.full_name, query)
            path = await self._first_candidate(repo, query)
            if path is None:
                continue

            content = await self._fetch(repo, path)
            if not content:
                continue

            try:
                verdict = self.verifier(content, original_html, text_content)
                match = to_match(path, verdict) if verdict else None
            except Exception as exc:
                logger.warning("Verification of %s failed for %r: %s", path, query, exc)
                continue
            if match is not None:
                return match

            if weak is None:
                weak = WeakMatch(path=path)

        if weak is not None:
            return weak
        return NoMatch()

    async def _first_candidate(self, repo: RepositoryContext, query: str) -> str | None:
        assert self.search_code is not None
        try:
            results = await self.search_code(repo.owner, repo.name, query)
        except Exception as exc:
            logger.warning("Code search failed for %r in %s: %s", query, repo.full_name, exc)
            return None

        candidates = filter_candidates(results or [], self.config)
        if not candidates:
            logger.debug("No source candidates for %r", query)
            return None
        return candidates[0]

    async def _fetch(self, repo: RepositoryContext, path: str) -> str | None:
        assert self.get_file_content is not None
        try:
            return await self.get_file_content(repo.owner, repo.name, path, repo.branch)
        except Exception as exc:
            logger.warning("Could not read %s@%s: %s", path, repo.branch, exc)
            return None

    def _write_path(self, item: FindingWithFix, path: str) -> None:
        item.file_path = path
        if self.on_path_resolved is not None:
            self.on_path_resolved(item, path)
