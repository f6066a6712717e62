"""Change detection between the working tree and the committed snapshot."""

import logging
from typing import Dict, Optional

from .config import load_config
from .context import ProjectContext
from .core import FileSnapshot, StateChanges
from .errors import SnapshotNotFoundError
from .ignore import IgnoreSpec
from .store import SnapshotStore
from .walker import fingerprint_files, read_file, read_files

logger = logging.getLogger(__name__)


def _resolve(ctx: ProjectContext, ignore: Optional[IgnoreSpec], workers: Optional[int]):
    if ignore is None:
        ignore = ctx.get_ignore_spec()
    if workers is None:
        workers = load_config(ctx).hash_workers
    return ignore, workers


def compute_changes(
    ctx: ProjectContext,
    store: Optional[SnapshotStore] = None,
    ignore: Optional[IgnoreSpec] = None,
    workers: Optional[int] = None,
) -> StateChanges:
    """
    Compare the working tree against the committed snapshot.

    Args:
        ctx: Project context.
        store: Snapshot store (defaults to one for ``ctx``).
        ignore: Ignore patterns (defaults to the project's).
        workers: Hashing threads (defaults to config ``hash_workers``).

    Returns:
        StateChanges with the bytes of every new or modified file and the
        paths deleted since the snapshot.

    Note:
        Nothing is persisted. Without a snapshot every visible file is
        reported as added; committing a new baseline is the caller's job.
    """
    if store is None:
        store = SnapshotStore(ctx)
    ignore, workers = _resolve(ctx, ignore, workers)

    try:
        stored = store.load_snapshot()
    except SnapshotNotFoundError:
        logger.debug("No snapshot in %s, reporting all files as added", ctx.storage_dir)
        return StateChanges(changes=dict(read_files(ctx.root, ignore)))

    # Every stored path is a deletion until the walk sees it again
    deletions = set(stored.files)
    changes: Dict[str, bytes] = {}

    for entry, digest in fingerprint_files(ctx.root, ignore, workers):
        deletions.discard(entry.path)
        if stored.files.get(entry.path) != digest:
            changes[entry.path] = read_file(entry.abspath)

    logger.debug(
        "Computed changes: %d changed, %d deleted", len(changes), len(deletions)
    )
    return StateChanges(changes=changes, deletions=sorted(deletions))


def scan_snapshot(
    ctx: ProjectContext,
    ignore: Optional[IgnoreSpec] = None,
    workers: Optional[int] = None,
) -> FileSnapshot:
    """Fingerprint every visible file into a new snapshot (not saved)."""
    ignore, workers = _resolve(ctx, ignore, workers)
    files = {entry.path: digest for entry, digest in fingerprint_files(ctx.root, ignore, workers)}
    return FileSnapshot(files=files)


def commit_snapshot(
    ctx: ProjectContext,
    store: Optional[SnapshotStore] = None,
) -> FileSnapshot:
    """Scan the working tree and save it as the new baseline."""
    if store is None:
        store = SnapshotStore(ctx)
    snapshot = scan_snapshot(ctx)
    store.save_snapshot(snapshot)
    return snapshot
