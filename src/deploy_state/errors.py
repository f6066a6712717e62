"""Custom exceptions for deploy-state.

This module defines typed exceptions for better error handling and clearer
error messages throughout the application.
"""

from typing import Iterable, Optional


class DeployStateError(RuntimeError):
    """Base class for all deploy-state errors."""
    pass


# State Errors
class SnapshotNotFoundError(DeployStateError):
    """No snapshot has been committed yet (first run)."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"No snapshot found at {path}")


class StateIOError(DeployStateError):
    """Filesystem access failed while reading or writing project state."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        message = f"I/O error on {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class CorruptStateError(DeployStateError):
    """Persisted snapshot or program info could not be parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Stored state at {path} is corrupt: {reason}\n"
            f"Run 'deploy-state reset' to start over from a full deploy."
        )


# Runtime / Dependency Errors
class RuntimeDetectionError(DeployStateError):
    """Base class for runtime detection failures."""
    pass


class AmbiguousRuntimeError(RuntimeDetectionError):
    """Entrypoints of more than one runtime were found."""

    def __init__(self, runtimes: Iterable[str]):
        self.runtimes = sorted(str(r) for r in runtimes)
        super().__init__(
            f"Conflicting entrypoint files found for runtimes: {', '.join(self.runtimes)}"
        )


class UnsupportedRuntimeError(RuntimeDetectionError):
    """No supported runtime found, or the runtime has no manifest parser."""

    def __init__(self, runtime: Optional[str] = None, root=None):
        self.runtime = runtime
        self.root = root
        if runtime is None:
            super().__init__(f"No supported runtime found in {root}")
        else:
            super().__init__(f"Unsupported runtime '{runtime}'")


class MalformedManifestError(DeployStateError):
    """Dependency manifest exists but does not have the expected shape."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"'{path}' is of unexpected format: {reason}")


# Configuration Errors
class ConfigError(DeployStateError):
    """Invalid project configuration."""
    pass
