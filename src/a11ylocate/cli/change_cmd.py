"""a11ylocate branch / describe commands."""

from __future__ import annotations

from pathlib import Path

import click

from a11ylocate.change.metadata import ChangeDescription, branch_name, change_description
from a11ylocate.core.config import A11yLocateConfig, load_config
from a11ylocate.errors import A11yLocateError


def _load_config() -> A11yLocateConfig:
    try:
        return load_config(Path.cwd())
    except A11yLocateError as exc:
        raise click.ClickException(str(exc)) from exc


@click.command()
@click.argument("rule_id")
@click.argument("file_path", required=False)
@click.option("--line", type=int, default=None, help="Line the fix starts on")
def branch(rule_id: str, file_path: str | None, line: int | None):
    """Print a branch name for a fix of RULE_ID in FILE_PATH."""
    config = _load_config()
    click.echo(branch_name(rule_id, file_path, line, config=config.change))


def _read_code(value: str) -> str:
    """Inline code, or the contents of a file when given as @path."""
    if value.startswith("@"):
        try:
            return Path(value[1:]).read_text().rstrip("\n")
        except OSError as exc:
            raise click.ClickException(f"Cannot read {value[1:]}: {exc}") from exc
    return value


@click.command()
@click.option("--rule-title", required=True, help="Human-readable rule title")
@click.option("--file", "file_path", required=True, help="Repository path of the fixed file")
@click.option("--before", "original_code", required=True, help="Original code, or @file")
@click.option("--after", "fixed_code", required=True, help="Fixed code, or @file")
@click.option("--rule-id", default=None, help="Rule identifier (e.g. color-contrast)")
@click.option("--wcag-level", default=None, help="WCAG conformance level (A, AA, AAA)")
@click.option("--wcag-criteria", default=None, help="WCAG success criteria, e.g. 1.4.3")
@click.option("--line-start", type=int, default=None)
@click.option("--line-end", type=int, default=None)
@click.option("--scan-url", default=None, help="Link to the scan that reported the issue")
def describe(
    rule_title: str,
    file_path: str,
    original_code: str,
    fixed_code: str,
    rule_id: str | None,
    wcag_level: str | None,
    wcag_criteria: str | None,
    line_start: int | None,
    line_end: int | None,
    scan_url: str | None,
):
    """Print a pull-request description for a single fix."""
    config = _load_config()
    params = ChangeDescription(
        rule_title=rule_title,
        file_path=file_path,
        original_code=_read_code(original_code),
        fixed_code=_read_code(fixed_code),
        rule_id=rule_id,
        wcag_level=wcag_level,
        wcag_criteria=wcag_criteria,
        line_start=line_start,
        line_end=line_end,
        scan_url=scan_url,
        code_language=config.change.code_language,
    )
    click.echo(change_description(params, config.change))
