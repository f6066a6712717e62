"""Core data models for deploy-state.

Snapshot / Commit Pattern:
--------------------------
Detection never writes state. A deploy cycle looks like:

1. Detect: compute_changes() and compute_dep_changes() compare disk against
   the last committed FileSnapshot and ProgramInfo.
2. Act: the caller uploads changed bytes, removes deleted paths remotely and
   updates the remote dependency set.
3. Commit: only after step 2 succeeds does the caller save a fresh snapshot
   and program info as the new baseline.

If step 2 fails nothing was committed, so the next run reports the same delta.
"""

import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator


_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")


# ============= Runtimes =============

class Runtime(str, Enum):
    """Language runtime a project is written in."""

    PYTHON = "python"
    NODE = "node"


# ============= File State =============

class FileSnapshot(BaseModel):
    """
    Last known state of a project's file tree.

    Maps root-relative POSIX paths to SHA256 hex digests. Only regular,
    non-hidden files appear; directories never do.
    """

    files: Dict[str, str] = Field(default_factory=dict)

    @field_validator("files")
    @classmethod
    def _check_digests(cls, files: Dict[str, str]) -> Dict[str, str]:
        for path, digest in files.items():
            if not path:
                raise ValueError("empty path in snapshot")
            if not _DIGEST_RE.match(digest):
                raise ValueError(f"invalid digest for {path!r}: {digest!r}")
        return files

    def __len__(self) -> int:
        return len(self.files)


class StateChanges(BaseModel):
    """Files to upload and paths to delete since the last snapshot."""

    changes: Dict[str, bytes] = Field(default_factory=dict)  # path -> new content
    deletions: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.deletions

    def added_paths(self, baseline: Optional[FileSnapshot]) -> List[str]:
        """Changed paths that did not exist in ``baseline``."""
        if baseline is None:
            return sorted(self.changes)
        return sorted(p for p in self.changes if p not in baseline.files)

    def modified_paths(self, baseline: Optional[FileSnapshot]) -> List[str]:
        """Changed paths that existed in ``baseline`` with other content."""
        if baseline is None:
            return []
        return sorted(p for p in self.changes if p in baseline.files)

    @property
    def upload_size(self) -> int:
        return sum(len(data) for data in self.changes.values())


# ============= Dependencies =============

class ProgramInfo(BaseModel):
    """
    Program metadata (stored in .deploy-state/program_info.json).

    ``runtime`` is None when unknown and persisted as an empty string.
    """

    runtime: Optional[Runtime] = None
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("runtime", mode="before")
    @classmethod
    def _empty_runtime(cls, value):
        if value == "":
            return None
        return value

    @field_serializer("runtime")
    def _dump_runtime(self, runtime: Optional[Runtime]) -> str:
        return runtime.value if runtime is not None else ""


class DepChanges(BaseModel):
    """Dependency identifiers added and removed since the last commit."""

    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    runtime: Optional[Runtime] = None

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed

    def summary(self) -> str:
        """Get human-readable summary."""
        if self.is_empty:
            return "No dependency changes"
        parts = []
        if self.added:
            parts.append(f"+ {len(self.added)} added")
        if self.removed:
            parts.append(f"- {len(self.removed)} removed")
        return ", ".join(parts)
