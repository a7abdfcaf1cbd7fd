"""Git access — subprocess-based remote inspection, clone and remote-add."""

from __future__ import annotations

import subprocess
from typing import Optional

from gitsnap.errors import GitCommandError, InspectionError


def parse_remotes(output: str) -> list[str]:
    """Return the URL column of `git remote -v` output.

    Every line looks like ``<name> <url> (<fetch|push>)``, so one remote shows
    up twice. Both entries are kept.
    """
    remotes: list[str] = []
    for line in output.split("\n"):
        if not line.strip():
            continue
        parts = line.split()
        if len(parts) > 1:
            remotes.append(parts[1])
    return remotes


def parse_is_bare(output: str) -> bool:
    """Interpret `git rev-parse --is-bare-repository` output."""
    return output.strip() == "true"


class Git:
    """Thin wrapper around the git executable."""

    def __init__(self, executable: str = "git", timeout: Optional[float] = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: list[str], cwd: Optional[str] = None) -> str:
        """Run a git command and return stdout, raising on any failure."""
        cmd = [self.executable]
        if cwd is not None:
            cmd += ["-C", cwd]
        cmd += args
        where = cwd if cwd is not None else "."
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                errors="replace",
            )
        except subprocess.TimeoutExpired:
            raise GitCommandError(where, args, None, f"timed out after {self.timeout}s")
        except OSError as e:
            raise GitCommandError(where, args, None, str(e))
        if result.returncode != 0:
            raise GitCommandError(where, args, result.returncode, result.stderr)
        return result.stdout

    # ── Inspection ──────────────────────────────────────────────────────

    def list_remotes(self, directory: str) -> list[str]:
        """List remote URLs configured for the repository at directory."""
        try:
            output = self._run(["remote", "-v"], cwd=directory)
        except GitCommandError as e:
            raise InspectionError(directory, e.message) from e
        return parse_remotes(output)

    def is_bare(self, directory: str) -> bool:
        try:
            output = self._run(["rev-parse", "--is-bare-repository"], cwd=directory)
        except GitCommandError as e:
            raise InspectionError(directory, e.message) from e
        return parse_is_bare(output)

    # ── Reconstruction ──────────────────────────────────────────────────

    def clone(self, url: str, destination: str, bare: bool = False) -> None:
        args = ["clone"]
        if bare:
            args.append("--bare")
        self._run(args + [url, destination])

    def add_remote(self, repository: str, name: str, url: str) -> None:
        self._run(["remote", "add", name, url], cwd=repository)
