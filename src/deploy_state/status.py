"""Status summary of a change set for UI display."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .core import FileSnapshot, StateChanges


class ChangeType(str, Enum):
    """Type of change detected for a path."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass
class ChangeRow:
    """A single change for UI display."""
    path: str
    change: ChangeType
    size: Optional[int] = None  # new content size, None for deletions


@dataclass(slots=True)
class StatusSummary:
    """High-level status summary for UI display."""

    first_run: bool
    total_tracked: int  # paths in the committed snapshot

    added: int = 0
    modified: int = 0
    deleted: int = 0
    upload_size: int = 0

    rows: List[ChangeRow] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.deleted)

    @classmethod
    def from_changes(
        cls,
        changes: StateChanges,
        baseline: Optional[FileSnapshot],
    ) -> "StatusSummary":
        """Classify each changed path against the baseline snapshot."""
        summary = cls(
            first_run=baseline is None,
            total_tracked=len(baseline) if baseline is not None else 0,
            upload_size=changes.upload_size,
        )

        for path in changes.added_paths(baseline):
            summary.added += 1
            summary.rows.append(ChangeRow(path, ChangeType.ADDED, len(changes.changes[path])))

        for path in changes.modified_paths(baseline):
            summary.modified += 1
            summary.rows.append(ChangeRow(path, ChangeType.MODIFIED, len(changes.changes[path])))

        for path in sorted(changes.deletions):
            summary.deleted += 1
            summary.rows.append(ChangeRow(path, ChangeType.DELETED))

        summary.rows.sort(key=lambda row: row.path)
        return summary

    def to_dict(self) -> dict:
        return {
            "first_run": self.first_run,
            "added": [r.path for r in self.rows if r.change == ChangeType.ADDED],
            "modified": [r.path for r in self.rows if r.change == ChangeType.MODIFIED],
            "deleted": [r.path for r in self.rows if r.change == ChangeType.DELETED],
            "upload_size": self.upload_size,
        }
