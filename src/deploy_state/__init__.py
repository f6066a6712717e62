"""Snapshot and change detection for incremental deploys."""

from .constants import STATE_VERSION as __version__
from .changes import commit_snapshot, compute_changes, scan_snapshot
from .context import ProjectContext
from .core import DepChanges, FileSnapshot, ProgramInfo, Runtime, StateChanges
from .deps import compute_dep_changes, current_program_info, read_dependencies
from .errors import (
    AmbiguousRuntimeError,
    ConfigError,
    CorruptStateError,
    DeployStateError,
    MalformedManifestError,
    SnapshotNotFoundError,
    StateIOError,
    UnsupportedRuntimeError,
)
from .runtimes import detect_runtime, resolve_runtime
from .store import SnapshotStore

__all__ = [
    "__version__",
    "AmbiguousRuntimeError",
    "ConfigError",
    "CorruptStateError",
    "DepChanges",
    "DeployStateError",
    "FileSnapshot",
    "MalformedManifestError",
    "ProgramInfo",
    "ProjectContext",
    "Runtime",
    "SnapshotNotFoundError",
    "SnapshotStore",
    "StateChanges",
    "StateIOError",
    "UnsupportedRuntimeError",
    "commit_snapshot",
    "compute_changes",
    "compute_dep_changes",
    "current_program_info",
    "detect_runtime",
    "read_dependencies",
    "resolve_runtime",
    "scan_snapshot",
]
