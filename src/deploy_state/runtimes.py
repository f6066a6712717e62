"""Runtime detection from entrypoint filenames."""

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .core import Runtime
from .errors import AmbiguousRuntimeError, UnsupportedRuntimeError
from .ignore import IgnoreSpec
from .walker import iter_files


# entrypoint filename -> runtime
ENTRYPOINTS: Mapping[str, Runtime] = MappingProxyType({
    "main.py": Runtime.PYTHON,
    "index.js": Runtime.NODE,
})

# runtime -> dependency manifest filename
MANIFESTS: Mapping[Runtime, str] = MappingProxyType({
    Runtime.PYTHON: "requirements.txt",
    Runtime.NODE: "package.json",
})


def resolve_runtime(filenames: Iterable[str], root: Optional[Path] = None) -> Runtime:
    """Map the base names seen in a tree to exactly one runtime.

    Several entrypoints of the same runtime are fine; entrypoints of
    different runtimes are not.

    Raises:
        AmbiguousRuntimeError: Entrypoints for more than one runtime
        UnsupportedRuntimeError: No known entrypoint
    """
    found = {ENTRYPOINTS[name] for name in filenames if name in ENTRYPOINTS}
    if not found:
        raise UnsupportedRuntimeError(root=root)
    if len(found) > 1:
        raise AmbiguousRuntimeError(r.value for r in found)
    return found.pop()


def detect_runtime(root: Path, ignore: Optional[IgnoreSpec] = None) -> Runtime:
    """Walk ``root`` and resolve its runtime from the visible filenames."""
    names = (entry.abspath.name for entry in iter_files(root, ignore))
    return resolve_runtime(names, root=root)


def manifest_filename(runtime: Runtime) -> str:
    """Get the dependency manifest filename for a runtime."""
    try:
        return MANIFESTS[runtime]
    except KeyError:
        raise UnsupportedRuntimeError(runtime=getattr(runtime, "value", runtime)) from None
