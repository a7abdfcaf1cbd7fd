"""Repo discovery — walk a directory tree and record every git control directory."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional

from gitsnap.errors import InspectionError, WalkError
from gitsnap.git import Git
from gitsnap.snapshot import RepoRecord

# `.git` marks a normal repository; `worktrees` is the admin dir of linked
# worktrees inside a bare repository.
CANDIDATE_NAMES = frozenset({".git", "worktrees"})


def iter_directories(base: str) -> Iterator[str]:
    """Yield every directory below base, depth-first, sorted by name.

    base itself is not yielded and symlinks are not followed. Paths are
    built from the cleaned base, so walking "." yields "proj" rather than
    "./proj". Any directory that cannot be listed stops the walk with
    WalkError.
    """
    if not os.path.isdir(base):
        raise WalkError(base, "not a directory")
    base = os.path.normpath(base)

    def _join(parent: str, name: str) -> str:
        return name if parent == os.curdir else os.path.join(parent, name)

    def _walk(path: str) -> Iterator[str]:
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise WalkError(path, e.strerror or str(e)) from e

        for entry in entries:
            child = _join(path, entry.name)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise WalkError(child, e.strerror or str(e)) from e
            if not is_dir:
                continue
            yield child
            # Matched directories are descended into as well
            yield from _walk(child)

    yield from _walk(base)


def is_candidate(path: str) -> bool:
    """True if path names a directory that may be a repository root."""
    return os.path.basename(path) in CANDIDATE_NAMES


def normalize_bare_path(path: str) -> str:
    """Replace the final segment of a bare candidate's path with `.git`."""
    return os.path.join(os.path.dirname(path), ".git")


def inspect_candidate(path: str, git: Git) -> Optional[RepoRecord]:
    """Build the record for one candidate, or None if git cannot inspect it."""
    try:
        remotes = git.list_remotes(path)
        bare = git.is_bare(path)
    except InspectionError:
        return None

    if bare:
        path = normalize_bare_path(path)
    return RepoRecord(path=path, remotes=remotes, is_bare=bare)


def discover(base: str, git: Optional[Git] = None, workers: int = 1) -> list[RepoRecord]:
    """Find every repository under base and return its records in walk order.

    With workers > 1 the git queries run on a thread pool; the result order
    is still the walk order.
    """
    if git is None:
        git = Git()
    candidates = [p for p in iter_directories(base) if is_candidate(p)]

    if workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda p: inspect_candidate(p, git), candidates))
    else:
        results = [inspect_candidate(p, git) for p in candidates]

    return [r for r in results if r is not None]
