"""CLI entry point for gitsnap."""

from __future__ import annotations

import argparse
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gitsnap import __version__
from gitsnap.errors import GitSnapError
from gitsnap.git import Git
from gitsnap.restore import RestoreOptions, restore
from gitsnap.scanner import discover
from gitsnap.snapshot import RepoRecord, load, save
from gitsnap.theme import (
    ACCENT_REPOS,
    CYAN,
    GREEN,
    ICON_FAIL,
    ICON_OK,
    ICON_REPOS,
    MUTED,
    RED,
    SURFACE,
    YELLOW,
    layout_label,
    remote_lines,
    render_banner,
)

DEFAULT_CONFIG = "repos_config.json"

out = Console()
err = Console(stderr=True)


def run_backup(base_dir: str, config_path: str, git: Git, workers: int = 1) -> list[RepoRecord]:
    """Discover repositories under base_dir and save them to config_path."""
    err.print(f"  [{MUTED}]Scanning[/{MUTED}] {escape(base_dir)} ...")
    records = discover(base_dir, git=git, workers=workers)
    err.print(f"  Found [bold {CYAN}]{len(records)}[/bold {CYAN}] repos.")

    save(records, config_path)
    out.print(f"[{GREEN}]{ICON_OK}[/{GREEN}] Config file saved to: {escape(config_path)}")
    return records


def run_restore(config_path: str, git: Git, options: RestoreOptions) -> list[str]:
    """Load config_path and clone every repository it describes."""
    records = load(config_path)

    def _progress(record: RepoRecord) -> None:
        err.print(f"  [{MUTED}]Restoring repo:[/{MUTED}] {escape(record.path)}")

    restored = restore(records, git=git, options=options, on_record=_progress)
    if len(restored) < len(records):
        err.print(
            f"  [{YELLOW}]Stopped after a bare repo with secondary remotes; "
            f"{len(records) - len(restored)} left unprocessed.[/{YELLOW}] "
            f"Use --continue-after-bare to restore them too."
        )
        return restored
    out.print(f"[{GREEN}]{ICON_OK}[/{GREEN}] Repositories restored successfully.")
    return restored


def print_listing(config_path: str) -> None:
    """Print the records of a snapshot as a Rich table."""
    records = load(config_path)
    out.print(render_banner())

    if not records:
        out.print(f"[{RED}]Snapshot is empty.[/{RED}] Create one with: gitsnap --backup --dir ~/code")
        return

    table = Table(
        title=f"{ICON_REPOS} {escape(config_path)}",
        border_style=SURFACE,
        title_style=f"bold {ACCENT_REPOS}",
        show_edge=True,
        pad_edge=True,
    )
    table.add_column("Path", style=f"bold {CYAN}")
    table.add_column("Clone into", style=MUTED)
    table.add_column("Layout", no_wrap=True)
    table.add_column("Remotes")

    for r in records:
        table.add_row(
            escape(r.path),
            escape(r.working_path or "."),
            layout_label(r.is_bare),
            remote_lines(r.remotes),
        )

    out.print(table)
    bare = sum(1 for r in records if r.is_bare)
    out.print(
        f"  [bold {CYAN}]{len(records)}[/bold {CYAN}] repos"
        f"  [{MUTED}]({bare} bare, {len(records) - bare} with worktree)[/{MUTED}]"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitsnap",
        description="Back up where your git repositories came from, and re-clone them elsewhere.",
    )
    parser.add_argument(
        "--dir",
        dest="base_dir",
        default=".",
        help="The base directory to scan for repositories (default: current directory)",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG,
        help=f"The path to save/load the config file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument(
        "--backup",
        action="store_true",
        help="Backup the repositories into a config file",
    )
    parser.add_argument(
        "--restore",
        action="store_true",
        help="Restore repositories from a config file",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_config",
        help="Show the repositories recorded in a config file",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        metavar="N",
        help="Inspect up to N candidate directories in parallel during backup",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Abort any single git command after SECONDS (default: no limit)",
    )
    parser.add_argument(
        "--git",
        default="git",
        metavar="PATH",
        help="git executable to run (default: git)",
    )
    parser.add_argument(
        "--continue-after-bare",
        action="store_true",
        help="Keep restoring after a bare repo that has secondary remotes",
    )
    parser.add_argument(
        "--numbered-upstreams",
        action="store_true",
        help="Name secondary remotes upstream, upstream-2, ... instead of all 'upstream'",
    )
    parser.add_argument(
        "--skip-duplicate-urls",
        action="store_true",
        help="Do not re-add a secondary remote whose URL is already attached",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gitsnap {__version__}",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the gitsnap CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.backup or args.restore or args.list_config):
        parser.print_help(sys.stderr)
        return 2

    git = Git(executable=args.git, timeout=args.timeout)
    options = RestoreOptions(
        continue_after_bare=args.continue_after_bare,
        numbered_upstreams=args.numbered_upstreams,
        skip_duplicate_urls=args.skip_duplicate_urls,
    )

    # Backup command: find and save git repositories
    if args.backup:
        try:
            run_backup(args.base_dir, args.config, git, workers=args.workers)
        except GitSnapError as e:
            err.print(f"[{RED}]{ICON_FAIL} Error backing up repos:[/{RED}] {escape(str(e))}")
            return 1

    # Restore command: clone repos and add remotes
    if args.restore:
        try:
            run_restore(args.config, git, options)
        except GitSnapError as e:
            err.print(f"[{RED}]{ICON_FAIL} Error restoring repos:[/{RED}] {escape(str(e))}")
            return 1

    if args.list_config:
        try:
            print_listing(args.config)
        except GitSnapError as e:
            err.print(f"[{RED}]{ICON_FAIL} Error reading config:[/{RED}] {escape(str(e))}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
