"""Persistence of the committed snapshot and program info.

SnapshotStore is the only component that touches files inside the
project's .deploy-state directory (apart from config.yaml).
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from .context import ProjectContext
from .core import FileSnapshot, ProgramInfo
from .errors import CorruptStateError, SnapshotNotFoundError, StateIOError
from .utils import atomic_write_text

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Loads and saves FileSnapshot and ProgramInfo for one project."""

    def __init__(self, ctx: ProjectContext):
        self.ctx = ctx

    @property
    def snapshot_path(self):
        return self.ctx.snapshot_path

    @property
    def program_info_path(self):
        return self.ctx.program_info_path

    # ============= Snapshot =============

    def has_snapshot(self) -> bool:
        return self.snapshot_path.exists()

    def load_snapshot(self) -> FileSnapshot:
        """Load the last committed snapshot.

        Raises:
            SnapshotNotFoundError: If no snapshot was ever saved
            CorruptStateError: If the stored file does not parse
            StateIOError: On any other read failure
        """
        path = self.snapshot_path
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SnapshotNotFoundError(path) from None
        except OSError as e:
            raise StateIOError(path, e) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptStateError(path, f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise CorruptStateError(path, "expected a JSON object of path -> digest")
        if not all(isinstance(v, str) for v in data.values()):
            raise CorruptStateError(path, "digests must be strings")

        try:
            return FileSnapshot(files=data)
        except ValidationError as e:
            raise CorruptStateError(path, str(e)) from e

    def save_snapshot(self, snapshot: FileSnapshot) -> None:
        """Replace the stored snapshot atomically."""
        text = json.dumps(snapshot.files, indent=2, sort_keys=True)
        try:
            atomic_write_text(self.snapshot_path, text)
        except OSError as e:
            raise StateIOError(self.snapshot_path, e) from e
        logger.info("Saved snapshot of %d files", len(snapshot.files))

    # ============= Program Info =============

    def load_program_info(self) -> Optional[ProgramInfo]:
        """Load stored program info, or None on first run.

        Raises:
            CorruptStateError: If the stored file does not parse
            StateIOError: On any other read failure
        """
        path = self.program_info_path
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StateIOError(path, e) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptStateError(path, f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise CorruptStateError(path, "expected a JSON object")

        try:
            return ProgramInfo.model_validate(data)
        except ValidationError as e:
            raise CorruptStateError(path, str(e)) from e

    def save_program_info(self, info: ProgramInfo) -> None:
        """Replace the stored program info atomically."""
        text = json.dumps(info.model_dump(mode="json"), indent=2)
        try:
            atomic_write_text(self.program_info_path, text)
        except OSError as e:
            raise StateIOError(self.program_info_path, e) from e
        logger.info(
            "Saved program info (runtime=%s, %d dependencies)",
            info.runtime.value if info.runtime else "unknown",
            len(info.dependencies),
        )

    # ============= Maintenance =============

    def clear(self) -> None:
        """Remove stored snapshot and program info, forcing a full redeploy."""
        for path in (self.snapshot_path, self.program_info_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StateIOError(path, e) from e
        logger.info("Cleared stored state in %s", self.ctx.storage_dir)
