"""Tree walking over a project's visible files.

Hidden entries (base name starting with ".") are never yielded. Hidden
directories are pruned before descent, so nothing below them is read.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .errors import StateIOError
from .hashing import compute_file_digest
from .ignore import IgnoreSpec, is_hidden

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkEntry:
    """A single entry produced by the walker."""
    path: str       # root-relative POSIX path
    is_dir: bool
    abspath: Path


def walk(root: Path, ignore: Optional[IgnoreSpec] = None) -> Iterator[WalkEntry]:
    """Lazily walk ``root`` depth-first, yielding visible entries.

    Traversal order is unspecified.

    Args:
        root: Directory to walk
        ignore: Optional pattern spec; ignored directories are pruned

    Raises:
        StateIOError: If a directory cannot be listed
    """
    yield from _walk_dir(Path(root), "", ignore)


def _walk_dir(directory: Path, prefix: str, ignore: Optional[IgnoreSpec]) -> Iterator[WalkEntry]:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        raise StateIOError(directory, e) from e

    for entry in entries:
        if is_hidden(entry.name):
            continue
        relpath = f"{prefix}{entry.name}"
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file()
        except OSError as e:
            raise StateIOError(entry.path, e) from e

        if is_dir:
            if ignore is not None and not ignore.should_traverse(relpath):
                logger.debug("Pruned ignored directory %s", relpath)
                continue
            yield WalkEntry(relpath, True, Path(entry.path))
            yield from _walk_dir(Path(entry.path), relpath + "/", ignore)
        elif is_file:
            if ignore is not None and ignore.is_ignored(relpath):
                continue
            yield WalkEntry(relpath, False, Path(entry.path))
        else:
            logger.debug("Skipping non-regular entry %s", relpath)


def iter_files(root: Path, ignore: Optional[IgnoreSpec] = None) -> Iterator[WalkEntry]:
    """Yield only regular file entries."""
    return (entry for entry in walk(root, ignore) if not entry.is_dir)


def read_file(path: Path) -> bytes:
    """Read a file's full content, wrapping failures in StateIOError."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise StateIOError(path, e) from e


def read_files(root: Path, ignore: Optional[IgnoreSpec] = None) -> Iterator[Tuple[str, bytes]]:
    """Yield (path, content) for every visible file."""
    for entry in iter_files(root, ignore):
        yield entry.path, read_file(entry.abspath)


def fingerprint_files(
    root: Path,
    ignore: Optional[IgnoreSpec] = None,
    workers: int = 1,
) -> Iterator[Tuple[WalkEntry, str]]:
    """Yield (entry, digest) for every visible file.

    With ``workers > 1`` the walk completes first and digests are computed
    on a thread pool; the yielded pairs are the same either way.
    """
    if workers <= 1:
        for entry in iter_files(root, ignore):
            yield entry, compute_file_digest(entry.abspath)
        return

    entries: List[WalkEntry] = list(iter_files(root, ignore))
    logger.debug("Hashing %d files with %d workers", len(entries), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        digests = pool.map(lambda e: compute_file_digest(e.abspath), entries)
        yield from zip(entries, digests)
