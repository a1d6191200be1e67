"""
Persistence gateway

Reads and writes whole JSON documents on local disk. Writes are a full
overwrite done through a temp file and a rename, so a crash mid-write leaves
either the old document or the new one, never a truncated file.
"""

import asyncio
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from errors import LoadError, WriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a non-throwing write."""

    success: bool
    path: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, path: Path) -> "WriteResult":
        return cls(success=True, path=str(path))

    @classmethod
    def fail(cls, path: Path, error: str) -> "WriteResult":
        return cls(success=False, path=str(path), error=error)


class StorageGateway:
    def __init__(self, fsync: bool = True):
        self.fsync = fsync

    def read_document(self, path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise LoadError(f"{path} does not exist", missing=True) from e
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Cannot read {path}: {e}") from e

    def write_document(self, path: Path, content: str) -> None:
        path = Path(path)
        try:
            # os.replace needs the temp file on the same filesystem as the target
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                    if self.fsync:
                        f.flush()
                        os.fsync(f.fileno())
                os.replace(temp_path, path)
            except OSError:
                try:
                    os.unlink(temp_path)
                except OSError as cleanup_error:
                    logger.debug("Failed to clean up temp file %s: %s", temp_path, cleanup_error)
                raise
        except OSError as e:
            raise WriteError(f"Failed to write {path}: {e}") from e

    def backup_corrupt(self, path: Path) -> Optional[Path]:
        path = Path(path)
        backup = path.with_name(path.name + ".corrupted")
        try:
            shutil.copy2(path, backup)
        except OSError as e:
            logger.warning("Could not back up corrupt file %s: %s", path, e)
            return None
        logger.warning("Backed up corrupt file %s to %s", path, backup)
        return backup

    async def read(self, path: Path) -> str:
        return await asyncio.to_thread(self.read_document, path)

    async def write(self, path: Path, content: str) -> WriteResult:
        try:
            await asyncio.to_thread(self.write_document, path, content)
        except WriteError as e:
            logger.warning("Error saving %s: %s", Path(path).name, e)
            return WriteResult.fail(path, str(e))
        return WriteResult.ok(path)

    async def backup(self, path: Path) -> Optional[Path]:
        return await asyncio.to_thread(self.backup_corrupt, path)
