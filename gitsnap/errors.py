"""Exception hierarchy for gitsnap."""

from __future__ import annotations


class GitSnapError(Exception):
    """Base class for every error gitsnap reports to the user."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class GitCommandError(GitSnapError):
    """A git subprocess exited non-zero, timed out, or could not start."""

    def __init__(self, path: str, args: list[str], returncode: int | None, stderr: str) -> None:
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(path, f"git {' '.join(args)} failed: {detail}")
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr


class InspectionError(GitSnapError):
    """Querying a candidate directory for remotes or bareness failed."""


class WalkError(GitSnapError):
    """The directory tree under the base directory could not be traversed."""


class PersistenceError(GitSnapError):
    """The snapshot file could not be written, read or parsed."""


class RestoreError(GitSnapError):
    """A clone or remote-add failed while restoring a repository."""
