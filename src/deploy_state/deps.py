"""Dependency change detection against the committed program info."""

import logging
from pathlib import Path
from typing import List, Optional

from .context import ProjectContext
from .core import DepChanges, ProgramInfo, Runtime
from .errors import MalformedManifestError, StateIOError
from .manifests import get_parser
from .runtimes import detect_runtime, manifest_filename
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def read_dependencies(root: Path, runtime: Runtime) -> List[str]:
    """Read and parse the runtime's dependency manifest under ``root``.

    A missing manifest means the project declares no dependencies.

    Raises:
        UnsupportedRuntimeError: No parser for ``runtime``
        MalformedManifestError: Manifest content has the wrong shape
        StateIOError: Manifest exists but cannot be read
    """
    parser = get_parser(runtime)
    path = Path(root) / manifest_filename(runtime)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No %s in %s, assuming no dependencies", path.name, root)
        return []
    except OSError as e:
        raise StateIOError(path, e) from e

    try:
        return parser.parse(data)
    except MalformedManifestError as e:
        raise MalformedManifestError(path, e.reason) from e


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def compute_dep_changes(
    ctx: ProjectContext,
    store: Optional[SnapshotStore] = None,
) -> DepChanges:
    """
    Compare the current dependency manifest against the committed list.

    Args:
        ctx: Project context.
        store: Snapshot store (defaults to one for ``ctx``).

    Returns:
        DepChanges with added identifiers (manifest order) and removed
        identifiers (sorted). A version bump is one removal plus one addition.

    Note:
        Without stored program info, or without a recorded runtime, the
        runtime is detected fresh and every current identifier is added.
    """
    if store is None:
        store = SnapshotStore(ctx)
    info = store.load_program_info()

    if info is None or info.runtime is None:
        runtime = detect_runtime(ctx.root, ctx.get_ignore_spec())
        deps = _unique(read_dependencies(ctx.root, runtime))
        return DepChanges(added=deps, runtime=runtime)

    runtime = info.runtime
    current = _unique(read_dependencies(ctx.root, runtime))

    # Every stored identifier is removed until the manifest lists it again
    removed = set(info.dependencies)
    added = []
    for dep in current:
        if dep in removed:
            removed.discard(dep)
        else:
            added.append(dep)

    return DepChanges(added=added, removed=sorted(removed), runtime=runtime)


def current_program_info(
    ctx: ProjectContext,
    store: Optional[SnapshotStore] = None,
) -> ProgramInfo:
    """Build the program info a caller commits after acting on DepChanges.

    Keeps the stored runtime when one is recorded, otherwise detects it.
    """
    if store is None:
        store = SnapshotStore(ctx)
    info = store.load_program_info()

    if info is not None and info.runtime is not None:
        runtime = info.runtime
    else:
        runtime = detect_runtime(ctx.root, ctx.get_ignore_spec())

    return ProgramInfo(runtime=runtime, dependencies=_unique(read_dependencies(ctx.root, runtime)))
