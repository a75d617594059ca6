"""
mvnext — CLI entrypoint.

Usage:
    python -m mvnext.main --help
    python -m mvnext.main scan --root path/to/project
    python -m mvnext.main apply --server https://scans.example.com/
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mvnext import __version__
from mvnext.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="mvnext")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """mvnext — add the Gradle Enterprise extension to Maven projects."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


_root_option = click.option(
    "--root",
    "root",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Project root directory.",
)
_jobs_option = click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Threads for the scan phase (default: sequential).",
)
_json_option = click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")


@cli.command()
@_root_option
@_jobs_option
@_json_option
def scan(root: Path, jobs: int | None, as_json: bool) -> None:
    """Show what mvnext detects in the project."""
    from mvnext.core.use_cases.scan import run_scan

    result = run_scan(root, max_workers=jobs)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    acc = result.accumulator
    assert acc is not None
    click.secho(f"\n📋 {result.project_root}", fg="cyan", bold=True)
    click.echo(f"   Files scanned: {result.document_count}")
    for label, value in (
        ("Maven project", acc.is_maven_project),
        (".mvn/extensions.xml", acc.extensions_xml_exists),
        (".mvn/gradle-enterprise.xml", acc.gradle_enterprise_xml_exists),
        ("CRLF line endings", acc.use_crlf_new_lines),
    ):
        marker = click.style("yes", fg="green") if value else click.style("no", fg="yellow")
        click.echo(f"     • {label}: {marker}")
    click.echo()


@cli.command()
@_root_option
@click.option(
    "--options-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to mvnext.yml (default: auto-detect from the project root).",
)
@click.option("--server", "server_url", default=None, help="Gradle Enterprise server URL.")
@click.option("--version-selector", default=None, help="Extension version or selector, e.g. 1.x.")
@click.option("--allow-untrusted-server", type=click.BOOL, default=None, help="Allow plain http to the server.")
@click.option("--capture-goal-input-files", type=click.BOOL, default=None, help="Capture goal input files.")
@click.option("--upload-in-background", type=click.BOOL, default=None, help="Upload build scans in the background.")
@click.option(
    "--publish-criteria",
    type=click.Choice(["always", "failure", "demand"], case_sensitive=False),
    default=None,
    help="When to publish build scans.",
)
@_jobs_option
@click.option("--dry-run", is_flag=True, help="Report changes without writing them.")
@_json_option
@click.pass_context
def apply(
    ctx: click.Context,
    root: Path,
    options_file: Path | None,
    server_url: str | None,
    version_selector: str | None,
    allow_untrusted_server: bool | None,
    capture_goal_input_files: bool | None,
    upload_in_background: bool | None,
    publish_criteria: str | None,
    jobs: int | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Add the extension and its configuration to the project."""
    from mvnext.core.config.loader import ConfigError, find_options_file, load_options
    from mvnext.core.use_cases.apply import run_apply

    if options_file is None:
        options_file = find_options_file(root)

    try:
        options = load_options(
            options_file,
            overrides={
                "server_url": server_url,
                "version_selector": version_selector,
                "allow_untrusted_server": allow_untrusted_server,
                "capture_goal_input_files": capture_goal_input_files,
                "upload_in_background": upload_in_background,
                "publish_criteria": publish_criteria,
            },
        )
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    result = run_apply(root, options, dry_run=dry_run, max_workers=jobs)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)
    verb = "Would create" if dry_run else "Created"
    for path in result.created:
        click.secho(f"   ✅ {verb} {path}", fg="green")
    verb = "Would edit" if dry_run else "Edited"
    for path in result.edited:
        click.secho(f"   ✏️  {verb} {path}", fg="green")
    for path, reason in result.skipped.items():
        click.secho(f"   ⚠️  Skipped {path}: malformed container ({reason})", fg="yellow")
    if not result.changed and not result.skipped and not quiet:
        click.echo("   No changes.")


if __name__ == "__main__":
    cli()
