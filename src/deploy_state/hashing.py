"""Hashing utilities for content fingerprints.

A fingerprint is the lower-case hex SHA256 of a file's full content. It is
only ever compared for equality, never decoded.
"""

from pathlib import Path
from typing import Union
import hashlib

from .errors import StateIOError


def compute_digest(data: bytes) -> str:
    """Compute SHA256 hex digest of raw bytes.

    Args:
        data: File content

    Returns:
        64-character lower-case hex digest
    """
    return hashlib.sha256(data).hexdigest()


def compute_file_digest(path: Union[str, Path]) -> str:
    """Compute SHA256 hex digest of a file, streaming its contents.

    Gives the same result as ``compute_digest(path.read_bytes())``.

    Args:
        path: Path to file to hash

    Returns:
        64-character lower-case hex digest

    Raises:
        StateIOError: If the file cannot be read
    """
    sha256 = hashlib.sha256()
    try:
        with Path(path).open("rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                sha256.update(chunk)
    except OSError as e:
        raise StateIOError(path, e) from e
    return sha256.hexdigest()


__all__ = [
    "compute_digest",
    "compute_file_digest",
]
