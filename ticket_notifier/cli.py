"""
Command-line interface for the Ticket Notifier git hook.
"""

import logging
import sys
from typing import Any, Dict, Iterable, Optional

import click
from git.exc import GitError
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Settings
from .models import ProcessingSummary, PushEvent, parse_push_events
from .processor import PushProcessor
from .vcs import GitPythonBackend

# Hook output goes to the pushing client through stderr
console = Console(stderr=True)


class RichConsoleHandler(logging.Handler):
    def emit(self, record):
        try:
            msg = self.format(record)
            level = record.levelname

            if level == 'DEBUG':
                console.print(f"[dim]{msg}[/dim]")
            elif level == 'INFO':
                console.print(msg)
            elif level == 'WARNING':
                console.print(f"[yellow]{msg}[/yellow]")
            elif level == 'ERROR':
                console.print(f"[red]{msg}[/red]")
            elif level == 'CRITICAL':
                console.print(f"[red bold]{msg}[/red bold]")
        except Exception:
            self.handleError(record)


logger = logging.getLogger("ticket_notifier")
logger.addHandler(RichConsoleHandler())
logger.setLevel(logging.INFO)
logger.propagate = False


@click.group()
@click.version_option(version=__version__)
def cli():
    """Ticket Notifier - comment on issue-tracker tickets referenced by pushed commits.

    Settings are read from TICKET_NOTIFIER_* environment variables (for example
    TICKET_NOTIFIER_TRACKER__LOGIN) and can be overridden by the options below.
    """
    pass


def common_options(function):
    """Options shared by the post-receive and update commands."""
    function = click.option(
        "--repo",
        "repo_path",
        default=".",
        show_default=True,
        help="Path of the git repository the hook runs in",
    )(function)
    function = click.option(
        "--tracked-branch",
        help="Full ref name that triggers notifications, e.g. refs/heads/master",
    )(function)
    function = click.option(
        "--tracker-url",
        help="Issue REST endpoint the ticket id is appended to",
    )(function)
    function = click.option(
        "--comment-path",
        help="Suffix after the ticket id for the comment endpoint",
    )(function)
    function = click.option(
        "--browse-url",
        help="Issue browsing URL the ticket id is appended to",
    )(function)
    function = click.option(
        "--login",
        help="Tracker login",
    )(function)
    function = click.option(
        "--password",
        help="Tracker password",
    )(function)
    function = click.option(
        "--visibility-role",
        help="Restrict tracker comments to this role",
    )(function)
    function = click.option(
        "--ticket-pattern",
        help="Regular expression matching ticket ids",
    )(function)
    function = click.option(
        "--source-url",
        help="Source browser base URL the commit sha is appended to",
    )(function)
    function = click.option(
        "--webhook-url",
        help="Chat webhook URL; chat notifications are off when unset",
    )(function)
    function = click.option(
        "--channel",
        help="Chat channel",
    )(function)
    function = click.option(
        "--username",
        help="Chat bot display name",
    )(function)
    function = click.option(
        "--icon-emoji",
        help="Chat bot icon",
    )(function)
    function = click.option(
        "--dedupe/--no-dedupe",
        "dedupe_ticket_ids",
        default=None,
        help="Notify each ticket once per commit even if it is mentioned repeatedly",
    )(function)
    function = click.option(
        "--dry-run/--no-dry-run",
        default=None,
        help="Log notifications instead of sending them",
    )(function)
    function = click.option(
        "--timeout",
        "request_timeout",
        type=float,
        help="HTTP timeout in seconds",
    )(function)
    function = click.option(
        "--retries",
        "max_retries",
        type=int,
        help="Retries for failed HTTP deliveries",
    )(function)
    function = click.option(
        "--debug/--no-debug",
        default=False,
        help="Enable debug mode for more verbose output",
    )(function)
    return function


_OPTION_FIELDS = {
    "tracker": {
        "tracker_url": "base_url",
        "comment_path": "comment_path",
        "browse_url": "browse_url",
        "login": "login",
        "password": "password",
        "visibility_role": "visibility_role",
    },
    "chat": {
        "webhook_url": "webhook_url",
        "channel": "channel",
        "username": "username",
        "icon_emoji": "icon_emoji",
    },
    "hook": {
        "tracked_branch": "tracked_branch",
        "ticket_pattern": "ticket_pattern",
        "source_url": "source_url",
        "dedupe_ticket_ids": "dedupe_ticket_ids",
        "dry_run": "dry_run",
        "request_timeout": "request_timeout",
        "max_retries": "max_retries",
    },
}


def build_settings(options: Dict[str, Any]) -> Settings:
    """
    Build settings from the environment, overridden by the options given on the command line.

    Args:
        options: Parsed click options; ``None`` values mean "not given"
    """
    overrides: Dict[str, Dict[str, Any]] = {}
    for section, fields in _OPTION_FIELDS.items():
        values = {
            field: options[option]
            for option, field in fields.items()
            if options.get(option) is not None
        }
        if values:
            overrides[section] = values
    return Settings(**overrides)


def print_summary(summary: ProcessingSummary) -> None:
    console.print(
        f"[bold]{summary.refs_processed}[/bold] of {summary.refs_seen} refs, "
        f"[bold]{summary.commits}[/bold] commits, "
        f"[bold]{summary.notifications}[/bold] ticket notifications, "
        f"[bold]{len(summary.failures)}[/bold] failed deliveries"
    )
    if not summary.results:
        return
    table = Table(title="Ticket notifications")
    table.add_column("Ticket")
    table.add_column("Channel")
    table.add_column("Status")
    for result in summary.results:
        if result.dry_run:
            status = "[cyan]dry run[/cyan]"
        elif result.ok:
            status = f"[green]{result.status_code}[/green]"
        else:
            status = f"[red]{result.status_code or result.error}[/red]"
        table.add_row(result.ticket_id, result.channel, status)
    console.print(table)


def run_hook(events: Iterable[PushEvent], debug: bool = False, repo_path: str = ".", **options) -> None:
    """
    Notify tickets for a batch of ref updates.

    Never raises for delivery problems; setup problems are logged and end the run.
    """
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    try:
        settings = build_settings(options)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return

    try:
        backend = GitPythonBackend(repo_path)
    except GitError as e:
        logger.error(f"Cannot open git repository at {repo_path}: {e}")
        return

    processor = PushProcessor(settings, backend)
    summary = processor.process(events)
    print_summary(summary)


@cli.command("post-receive")
@common_options
def post_receive(**kwargs):
    """Process '<old> <new> <ref>' lines from stdin (git post-receive hook)."""
    run_hook(parse_push_events(click.get_text_stream("stdin")), **kwargs)


@cli.command()
@common_options
@click.argument("ref_name")
@click.argument("old_revision")
@click.argument("new_revision")
def update(ref_name: str, old_revision: str, new_revision: str, **kwargs):
    """Process a single ref update (git update hook argument order)."""
    event = PushEvent(old_revision=old_revision, new_revision=new_revision, ref_name=ref_name)
    run_hook([event], **kwargs)


def main(argv: Optional[list] = None):
    """Entry point for the CLI."""
    try:
        cli(args=argv, standalone_mode=False)
    except click.exceptions.Abort:
        console.print("[yellow]Aborted[/yellow]")
    except click.ClickException as e:
        e.show()
    except Exception as e:
        logger.exception("Unhandled exception")
        console.print(f"[red]Unhandled error: {str(e)}[/red]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
