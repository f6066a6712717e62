"""Which paths a snapshot skips.

Hidden names are always skipped. On top of that a project can list
gitignore-style patterns in .deployignore or in config.yaml's ``ignore``.
"""

from pathlib import Path
from typing import Iterable, List

from pathspec import GitIgnoreSpec

from .constants import HIDDEN_PREFIX, IGNORE_FILE, STATE_DIR
from .errors import ConfigError, StateIOError


def is_hidden(name: str) -> bool:
    """Check if a base name is hidden.

    The same prefix rule applies on every platform.
    """
    return name.startswith(HIDDEN_PREFIX)


def _is_state_dir(dirpath: str) -> bool:
    return dirpath.rstrip("/").split("/", 1)[0] == STATE_DIR


def _read_ignore_file(path: Path) -> List[str]:
    """Patterns from a .deployignore file; blank lines and comments dropped."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise StateIOError(path, e) from e

    stripped = (line.strip() for line in text.splitlines())
    return [line for line in stripped if line and not line.startswith("#")]


class IgnoreSpec:
    """Project ignore patterns, compiled once.

    Nothing visible is ignored unless a pattern says so.
    """

    def __init__(self, root: Path, extra: Iterable[str] = ()):
        """
        Args:
            root: Project root holding the optional .deployignore
            extra: Patterns from config.yaml, applied after the file's

        Raises:
            StateIOError: .deployignore exists but cannot be read
            ConfigError: .deployignore is not UTF-8
        """
        self.root = root
        self.patterns = _read_ignore_file(root / IGNORE_FILE) + list(extra)
        self.spec = GitIgnoreSpec.from_lines(self.patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Match a root-relative POSIX file path against the patterns."""
        return self.spec.match_file(relpath)

    def should_traverse(self, dirpath: str) -> bool:
        """Whether the walker may descend into a root-relative directory.

        The state directory is never entered; other directories are pruned
        when a directory pattern (``name/``) matches them.
        """
        if _is_state_dir(dirpath):
            return False
        return not self.spec.match_file(dirpath.rstrip("/") + "/")
