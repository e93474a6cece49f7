"""Code search and file reads against a repository checked out on disk.

Provides the two capabilities :class:`~a11ylocate.detect.resolver.FileResolver`
consumes, so detection can run without a hosting-platform API.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from a11ylocate.core.config import LocalRepoConfig

logger = logging.getLogger(__name__)

_MAX_FILE_BYTES = 1024 * 1024


class LocalRepository:
    """Repository capabilities backed by a local working tree.

    ``owner``/``repo``/``branch`` arguments are accepted for interface
    compatibility and ignored; the checkout is whatever ``root`` holds.
    """

    def __init__(self, root: Path, config: LocalRepoConfig | None = None):
        self.root = Path(root).resolve()
        self.config = config or LocalRepoConfig()

    async def search_code(self, owner: str, repo: str, query: str) -> list[dict]:
        """Files containing every whitespace-separated term of ``query``.

        The tree walk runs in a worker thread so the event loop stays free.
        """
        return await asyncio.to_thread(self._search, query)

    def _search(self, query: str) -> list[dict]:
        terms = query.split()
        if not terms:
            return []

        results: list[dict] = []
        for file_path in self._collect_files():
            try:
                content = file_path.read_text(errors="ignore")
            except OSError:
                continue
            if all(term in content for term in terms):
                results.append({"path": file_path.relative_to(self.root).as_posix()})
                if len(results) >= self.config.max_results:
                    break

        logger.debug("Local search %r: %d hits", query, len(results))
        return results

    async def get_file_content(
        self, owner: str, repo: str, path: str, branch: str
    ) -> str | None:
        """Text of ``path`` relative to the root, or ``None`` if unreadable."""
        return await asyncio.to_thread(self._read, path)

    def _read(self, path: str) -> str | None:
        target = (self.root / path).resolve()
        try:
            target.relative_to(self.root)
        except ValueError:
            logger.warning("Refusing to read %s outside %s", path, self.root)
            return None
        if not target.is_file():
            return None
        try:
            return target.read_text(errors="ignore")
        except OSError as exc:
            logger.warning("Could not read %s: %s", target, exc)
            return None

    def _collect_files(self) -> list[Path]:
        """All files under the root, excluding configured patterns."""
        files: list[Path] = []
        for file_path in self.root.rglob("*"):
            if not file_path.is_file():
                continue
            rel = file_path.relative_to(self.root).as_posix()
            if any(excl.rstrip("/") in rel.split("/") for excl in self.config.exclude):
                continue
            try:
                if file_path.stat().st_size > _MAX_FILE_BYTES:
                    continue
            except OSError:
                continue
            files.append(file_path)
        return sorted(files)
