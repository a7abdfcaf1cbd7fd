"""Snapshot model and store — the JSON document written by backup and read by restore."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from gitsnap.errors import PersistenceError


@dataclass
class RepoRecord:
    path: str                       # .git dir, or bare-normalized path
    remotes: list[str] = field(default_factory=list)
    is_bare: bool = False

    @property
    def primary(self) -> Optional[str]:
        """The remote used as the clone source, if any."""
        return self.remotes[0] if self.remotes else None

    @property
    def secondaries(self) -> list[str]:
        return self.remotes[1:]

    @property
    def working_path(self) -> str:
        """Clone target: the recorded path without its trailing segment."""
        return os.path.dirname(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "remotes": list(self.remotes),
            "is_bare": self.is_bare,
        }

    @classmethod
    def from_dict(cls, data: Any) -> RepoRecord:
        """Build a record from one snapshot entry, validating its shape.

        Older snapshots may carry ``"remotes": null`` for repositories without
        a remote and may omit ``is_bare``; both are accepted.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        path = data.get("path")
        if not isinstance(path, str):
            raise ValueError("'path' must be a string")

        remotes = data.get("remotes")
        if remotes is None:
            remotes = []
        if not isinstance(remotes, list) or not all(isinstance(r, str) for r in remotes):
            raise ValueError(f"'remotes' of {path} must be a list of strings")

        is_bare = data.get("is_bare", False)
        if not isinstance(is_bare, bool):
            raise ValueError(f"'is_bare' of {path} must be a boolean")

        return cls(path=path, remotes=remotes, is_bare=is_bare)


def dumps(records: list[RepoRecord]) -> str:
    """Serialize records to the snapshot document text."""
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False) + "\n"


def loads(text: str, source: str = "<snapshot>") -> list[RepoRecord]:
    """Parse snapshot document text into records."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PersistenceError(source, f"invalid JSON: {e}") from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise PersistenceError(source, "snapshot must be a JSON array")

    records: list[RepoRecord] = []
    for idx, entry in enumerate(data):
        try:
            records.append(RepoRecord.from_dict(entry))
        except ValueError as e:
            raise PersistenceError(source, f"entry {idx}: {e}") from e
    return records


def save(records: list[RepoRecord], destination: str) -> None:
    """Write records to destination, replacing whatever was there."""
    text = dumps(records)
    try:
        with open(destination, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise PersistenceError(destination, f"cannot write snapshot: {e.strerror or e}") from e


def load(source: str) -> list[RepoRecord]:
    """Read every record from the snapshot at source."""
    try:
        with open(source, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise PersistenceError(source, f"cannot read snapshot: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise PersistenceError(source, f"snapshot is not UTF-8 text: {e}") from e
    return loads(text, source)
