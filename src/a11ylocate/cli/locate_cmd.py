"""a11ylocate locate command."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from a11ylocate.core.config import load_config
from a11ylocate.core.findings_io import load_items, save_items
from a11ylocate.core.models import RepositoryContext
from a11ylocate.core.output import (
    console,
    error_console,
    get_progress,
    print_batch_summary,
    print_detection_table,
)
from a11ylocate.detect.batch import BatchDetector
from a11ylocate.detect.local_repo import LocalRepository
from a11ylocate.detect.resolver import FileResolver
from a11ylocate.detect.state import DetectionStore
from a11ylocate.errors import A11yLocateError


@click.command()
@click.argument("findings_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--repo", "repo_path", required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Local checkout of the repository to search",
)
@click.option("--owner", default="local", help="Repository owner (informational)")
@click.option("--name", default=None, help="Repository name (default: checkout directory name)")
@click.option("--branch", default="main", help="Branch the checkout corresponds to")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write updated items as JSON")
@click.option("--delay", type=int, default=None, help="Milliseconds between searches (default from config)")
def locate(
    findings_file: Path,
    repo_path: Path,
    owner: str,
    name: str | None,
    branch: str,
    output: Path | None,
    delay: int | None,
):
    """Find the source file for every finding in FINDINGS_FILE.

    FINDINGS_FILE is a JSON list of {"finding": ..., "fix": ..., "file_path": ...}
    objects. Items that already carry a file path are left alone.
    """
    try:
        config = load_config(Path.cwd())
        items = load_items(findings_file)
    except A11yLocateError as exc:
        error_console.print(f"  [red]{exc}[/red]")
        sys.exit(1)

    if delay is not None:
        config.detection.request_delay_ms = delay

    local = LocalRepository(repo_path, config.local)
    repo = RepositoryContext(owner=owner, name=name or local.root.name, branch=branch)
    store = DetectionStore()
    resolver = FileResolver(
        search_code=local.search_code,
        get_file_content=local.get_file_content,
        store=store,
        config=config.detection,
    )
    detector = BatchDetector(resolver)

    with get_progress() as progress:
        progress.add_task(f"Detecting files in {local.root}...", total=None)
        summary = asyncio.run(detector.run_all(items, repo))

    results = {item.finding.id: store.result(item.finding.id) for item in items}
    console.print()
    print_detection_table(items, results)
    print_batch_summary(
        summary,
        mapped=detector.mapped_count(items),
        high_confidence=detector.count_high_confidence_mapped(items),
        total=len(items),
    )

    if output:
        save_items(output, items)
        console.print(f"  Updated items written to {output}\n")
