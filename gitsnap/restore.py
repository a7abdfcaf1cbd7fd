"""Restore — re-clone repositories from a snapshot and reattach their remotes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from gitsnap.errors import GitCommandError, RestoreError
from gitsnap.git import Git
from gitsnap.snapshot import RepoRecord

SECONDARY_REMOTE = "upstream"


@dataclass
class RestoreOptions:
    # Default: a bare record with secondary remotes ends the whole restore.
    continue_after_bare: bool = False
    # upstream, upstream-2, upstream-3, ... instead of reusing "upstream"
    numbered_upstreams: bool = False
    # Skip secondary URLs already attached (remote -v lists each one twice)
    skip_duplicate_urls: bool = False


def secondary_remote_names(count: int, numbered: bool = False) -> list[str]:
    """Names to attach `count` secondary remotes under."""
    if not numbered:
        return [SECONDARY_REMOTE] * count
    return [SECONDARY_REMOTE if i == 0 else f"{SECONDARY_REMOTE}-{i + 1}" for i in range(count)]


def _secondaries_to_attach(record: RepoRecord, options: RestoreOptions) -> list[str]:
    if not options.skip_duplicate_urls:
        return record.secondaries
    seen = {record.primary}
    urls: list[str] = []
    for url in record.secondaries:
        if url in seen:
            continue
        seen.add(url)
        urls.append(url)
    return urls


def restore_record(record: RepoRecord, git: Git, options: RestoreOptions) -> bool:
    """Clone one record and attach its secondary remotes.

    Returns False when the restore of the remaining records must stop.
    """
    if not record.remotes:
        raise RestoreError(record.path, "no remote recorded, nothing to clone from")

    target = record.working_path
    try:
        git.clone(record.primary, target, bare=record.is_bare)
    except GitCommandError as e:
        kind = "bare repo" if record.is_bare else "repo"
        raise RestoreError(target, f"failed to clone {kind}: {e.message}") from e

    if len(record.remotes) < 2:
        return True
    if record.is_bare:
        return options.continue_after_bare

    urls = _secondaries_to_attach(record, options)
    names = secondary_remote_names(len(urls), numbered=options.numbered_upstreams)
    for name, url in zip(names, urls):
        try:
            git.add_remote(target, name, url)
        except GitCommandError as e:
            raise RestoreError(target, f"failed to add {name} remote {url}: {e.message}") from e
    return True


def restore(
    records: list[RepoRecord],
    git: Optional[Git] = None,
    options: Optional[RestoreOptions] = None,
    on_record: Optional[Callable[[RepoRecord], None]] = None,
) -> list[str]:
    """Restore records one after another, in order.

    Returns the working paths that were cloned. The first failure raises
    RestoreError; anything already cloned stays on disk.
    """
    if git is None:
        git = Git()
    if options is None:
        options = RestoreOptions()

    restored: list[str] = []
    for record in records:
        if on_record is not None:
            on_record(record)
        keep_going = restore_record(record, git, options)
        restored.append(record.working_path)
        if not keep_going:
            break
    return restored
