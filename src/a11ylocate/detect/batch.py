"""Batch file detection across the findings of a remediation session."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from a11ylocate.core.models import (
    Confidence,
    FindingWithFix,
    Match,
    RepositoryContext,
    WeakMatch,
)
from a11ylocate.detect.resolver import FileResolver
from a11ylocate.errors import DetectionInProgressError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class BatchSummary:
    """Counts for one :meth:`BatchDetector.run_all` pass."""

    attempted: int = 0
    skipped: int = 0
    matched: int = 0
    weak: int = 0
    unmatched: int = 0


class BatchDetector:
    """Runs the resolver over many items, one request at a time.

    The external search API is rate limited, so items are resolved strictly
    sequentially with ``delay`` seconds between eligible items.
    """

    def __init__(
        self,
        resolver: FileResolver,
        delay: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.resolver = resolver
        self.delay = resolver.config.request_delay if delay is None else delay
        self._sleep = sleep
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    @property
    def store(self):
        return self.resolver.store

    @staticmethod
    def is_eligible(item: FindingWithFix) -> bool:
        return item.fix is not None and not item.has_path

    async def run_all(
        self, items: Sequence[FindingWithFix], repo: RepositoryContext
    ) -> BatchSummary:
        """Detect files for every item that has a fix but no path yet."""
        summary = BatchSummary()
        self._in_progress = True
        try:
            for item in items:
                if not self.is_eligible(item):
                    summary.skipped += 1
                    continue

                try:
                    outcome = await self.resolver.resolve(item, repo)
                except DetectionInProgressError:
                    logger.warning(
                        "Skipping %s: detection already running", item.finding.id
                    )
                    summary.skipped += 1
                    continue

                if outcome is None:
                    # resolver has no search capability; nothing was requested
                    summary.skipped += 1
                    continue

                summary.attempted += 1
                if isinstance(outcome, Match):
                    summary.matched += 1
                elif isinstance(outcome, WeakMatch):
                    summary.weak += 1
                else:
                    summary.unmatched += 1

                await self._sleep(self.delay)
        finally:
            self._in_progress = False

        logger.info(
            "Batch detection: %d attempted, %d matched, %d weak, %d skipped",
            summary.attempted,
            summary.matched,
            summary.weak,
            summary.skipped,
        )
        return summary

    def count_high_confidence_mapped(self, items: Sequence[FindingWithFix]) -> int:
        """Items with a path and a stored high-confidence match."""
        count = 0
        for item in items:
            if not item.has_path:
                continue
            result = self.store.result(item.finding.id)
            if isinstance(result, Match) and result.confidence == Confidence.HIGH:
                count += 1
        return count

    @staticmethod
    def mapped_count(items: Sequence[FindingWithFix]) -> int:
        return sum(1 for item in items if item.has_path)
