"""JSON file snapshot of the full lot state."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import StorageError
from ..state.models import LotState

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Saves and loads the whole LotState as one JSON document.

    Every save rewrites the full document. The new content goes to a
    temporary file in the same directory which then replaces the old
    snapshot, so a failed write never leaves a truncated file behind.
    """

    def __init__(self, path: str | Path):
        """
        Initialize the store.

        Args:
            path: Snapshot file location; parent directories are created on save
        """
        self.path = Path(path)

    def load(self) -> Optional[LotState]:
        """
        Load the saved state.

        Returns:
            The saved LotState, or None if no snapshot exists yet

        Raises:
            StorageError: If the file can't be read or doesn't hold a valid state
        """
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}, starting fresh")
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read snapshot: {e}", path=str(self.path)) from e

        try:
            state = LotState.model_validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Invalid snapshot: {e}", path=str(self.path)) from e

        logger.info(
            f"Loaded snapshot from {self.path}: {len(state.slots)} slots, "
            f"{len(state.active_sessions)} active, {len(state.history)} in history"
        )
        return state

    def save(self, state: LotState) -> None:
        """
        Write the full state.

        Raises:
            StorageError: If the snapshot could not be written
        """
        payload = state.model_dump_json(indent=2)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write snapshot: {e}", path=str(self.path)) from e

        logger.debug(f"Saved snapshot to {self.path} ({len(payload)} bytes)")
