"""Local filesystem storage with path validation."""

from __future__ import annotations

from pathlib import Path

import aiofiles.os

from annoflow.infrastructure.exceptions import (
    StorageMoveError,
    StorageNotFoundError,
    StoragePermissionError,
)
from annoflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LocalStorageService:
    """Local filesystem storage with path traversal protection.

    Storage refs are paths relative to storage_root; data source prefixes
    map to directories.
    """

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        return full_path

    async def exists(self, storage_ref: str) -> bool:
        """Return True if the file exists."""
        return await aiofiles.os.path.isfile(self._get_full_path(storage_ref))

    async def move(self, source_ref: str, target_ref: str) -> None:
        """Move a file between directories under storage_root.

        Raises StorageNotFoundError when the source is missing and
        StorageMoveError when the rename fails.
        """
        source = self._get_full_path(source_ref)
        target = self._get_full_path(target_ref)
        if source == target:
            return
        if not await aiofiles.os.path.isfile(source):
            raise StorageNotFoundError(source_ref)
        try:
            await aiofiles.os.makedirs(target.parent, mode=0o750, exist_ok=True)
            await aiofiles.os.replace(source, target)
        except OSError as e:
            raise StorageMoveError(source_ref, target_ref, str(e)) from e
        logger.debug("Moved %s -> %s", source_ref, target_ref)
