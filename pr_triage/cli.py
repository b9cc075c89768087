"""Command-line interface for pr-triage."""

import sys
import traceback

import click
from rich.console import Console

from pr_triage.config import CliOptions, Paths, get_settings
from pr_triage.errors import PrTriageError
from pr_triage.runner import TriageRunner
from pr_triage.utils import is_running_in_dev_mode

console = Console()


@click.command()
@click.option(
    "-r",
    "--repo",
    help="Repository to check (format: owner/repo)",
    envvar="PRT_REPO",
)
@click.option(
    "-d",
    "--dry",
    "dry_run",
    is_flag=True,
    help="Dry run mode - show what would be done without making changes",
    envvar="PRT_DRY_RUN",
)
@click.option(
    "-t",
    "--teams",
    help='Comma-separated list of teams to filter by (e.g., "finance,expenses")',
    envvar="PRT_TEAMS",
)
@click.option(
    "-u",
    "--users",
    help='Comma-separated list of users to filter by (e.g., "user1,user2")',
    envvar="PRT_USERS",
)
@click.option(
    "--max-additions",
    type=click.IntRange(min=0),
    help="Maximum additions for auto-approval (default: 50)",
    envvar="PRT_MAX_ADDITIONS",
)
@click.option(
    "--max-deletions",
    type=click.IntRange(min=0),
    help="Maximum deletions for auto-approval (default: 50)",
    envvar="PRT_MAX_DELETIONS",
)
@click.option(
    "--max-files",
    "max_changed_files",
    type=click.IntRange(min=0),
    help="Maximum changed files for auto-approval (default: 5)",
    envvar="PRT_MAX_FILES",
)
@click.option(
    "--max-lines",
    "max_lines_changed",
    type=click.IntRange(min=0),
    help="Maximum total lines changed for auto-approval (default: 100)",
    envvar="PRT_MAX_LINES",
)
@click.option(
    "--ai-backend",
    type=click.Choice(["gemini", "pi", "none"]),
    help="Completion backend for AI review (default: gemini)",
    envvar="PRT_AI_BACKEND",
)
@click.option(
    "-m",
    "--model",
    help="Override model selection (e.g., gemini-2.5-pro)",
    envvar="PRT_MODEL",
)
@click.option(
    "--ignore-file",
    help="File holding ignored PR numbers (default: .ignored-prs.json)",
    envvar="PRT_IGNORE_FILE",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging (also written to .pr-triage.log)",
    envvar="PRT_DEBUG",
)
@click.version_option(package_name="pr-triage")
def main(**kwargs: str | int | bool | None) -> None:
    r"""Automatically review GitHub pull requests.

    \f
    pr-triage lists the open PRs waiting for your review (directly, via your
    teams, or via the users you name), tells you which ones are small, and
    lets you approve, open, skip, permanently ignore, or AI-review each one.

    Environment variables:
      PRT_REPO, PRT_DRY_RUN, PRT_TEAMS, PRT_USERS, PRT_MAX_ADDITIONS,
      PRT_MAX_DELETIONS, PRT_MAX_FILES, PRT_MAX_LINES, PRT_AI_BACKEND,
      PRT_MODEL, PRT_IGNORE_FILE, PRT_DEBUG, GEMINI_API_KEY

    Examples:
      # Triage PRs requested from you
      pr-triage -r octo-org/octo-repo

      # Include two teams and preview without changing anything
      pr-triage -r octo-org/octo-repo -t backend,infra --dry

    """
    debug = bool(kwargs.get("debug", False))
    try:
        options = _build_cli_options(kwargs)
        sys.exit(_run_main(options))

    except (ValueError, PrTriageError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if debug:
            console.print(traceback.format_exc())
        sys.exit(1)


def _build_cli_options(kwargs: dict[str, str | int | bool | None]) -> CliOptions:
    """Build CliOptions from Click's keyword arguments.

    Args:
        kwargs: Keyword arguments injected by Click decorators

    Returns:
        CliOptions with CLI-provided overrides

    """

    def optional_str(name: str) -> str | None:
        value = kwargs.get(name)
        return str(value) if value is not None else None

    def optional_int(name: str) -> int | None:
        value = kwargs.get(name)
        return int(value) if value is not None else None

    ai_backend = kwargs.get("ai_backend")

    return CliOptions(
        repo=optional_str("repo"),
        dry_run=bool(kwargs.get("dry_run", False)),
        teams=optional_str("teams"),
        users=optional_str("users"),
        max_additions=optional_int("max_additions"),
        max_deletions=optional_int("max_deletions"),
        max_changed_files=optional_int("max_changed_files"),
        max_lines_changed=optional_int("max_lines_changed"),
        ai_backend=ai_backend if ai_backend in ("gemini", "pi", "none") else None,
        model=optional_str("model"),
        ignore_file=optional_str("ignore_file"),
        debug=bool(kwargs.get("debug", False)),
    )


def _run_main(options: CliOptions) -> int:
    """Run main application logic using CliOptions.

    Args:
        options: CLI options grouped into a dataclass

    Returns:
        Exit code from TriageRunner

    """
    if is_running_in_dev_mode():
        console.print("[cyan]⚡ Running in DEV mode (editable install)[/cyan]")

    settings = get_settings(options)
    paths = Paths(ignore_file=settings.ignore_file)

    runner = TriageRunner(settings, paths)
    return runner.run()


if __name__ == "__main__":
    main()
