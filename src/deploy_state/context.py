"""Project context for managing paths and project discovery."""

from pathlib import Path
from typing import Optional

from .constants import CONFIG_FILE, PROGRAM_INFO_FILE, SNAPSHOT_FILE, STATE_DIR
from .ignore import IgnoreSpec


class ProjectContext:
    """Manages project root discovery and path resolution.

    All persisted state for one project lives in ``<root>/.deploy-state``.
    """

    def __init__(self, start_path: Optional[Path] = None):
        """Initialize context by finding project root.

        Args:
            start_path: Path to start searching for project root
        """
        self.root = self._find_root(Path(start_path) if start_path else Path.cwd())
        if not self.root:
            raise ValueError(f"Not inside a deploy-state project (no {STATE_DIR} found)")
        self._ignore_spec: Optional[IgnoreSpec] = None

    @classmethod
    def is_initialized(cls, path: Optional[Path] = None) -> bool:
        """Check if a specific directory is initialized (without traversing up)."""
        target = Path(path) if path else Path.cwd()
        return (target / STATE_DIR).is_dir()

    @classmethod
    def init(cls, path: Optional[Path] = None) -> "ProjectContext":
        """Initialize a new project at the given path."""
        target = Path(path) if path else Path.cwd()
        (target / STATE_DIR).mkdir(parents=True, exist_ok=True)
        return cls(target)

    def _find_root(self, start: Path) -> Optional[Path]:
        """Walk up directory tree to find project root."""
        current = start.resolve()

        while current != current.parent:
            if (current / STATE_DIR).is_dir():
                return current
            current = current.parent

        # Check root directory
        if (current / STATE_DIR).is_dir():
            return current
        return None

    @property
    def storage_dir(self) -> Path:
        """Get the project state directory."""
        return self.root / STATE_DIR

    @property
    def config_path(self) -> Path:
        return self.storage_dir / CONFIG_FILE

    @property
    def snapshot_path(self) -> Path:
        return self.storage_dir / SNAPSHOT_FILE

    @property
    def program_info_path(self) -> Path:
        return self.storage_dir / PROGRAM_INFO_FILE

    def get_ignore_spec(self) -> IgnoreSpec:
        """Get the ignore specification (memoized).

        Combines .deployignore with the ``ignore`` list from config.yaml.
        """
        if self._ignore_spec is None:
            from .config import load_config
            self._ignore_spec = IgnoreSpec(self.root, extra=load_config(self).ignore)
        return self._ignore_spec

