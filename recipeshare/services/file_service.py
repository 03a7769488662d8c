"""
RecipeShare Backend - File Storage Service
===========================================

What:  Writes uploaded images to disk and removes them again.
How:   Chooses a directory by upload role, generates a collision-resistant
       filename, writes/deletes with aiofiles so the event loop never blocks.
Who:   Called by RecipeService (store/delete) and the assets route (lookup).
When:  After validation has accepted the request; before/after the row change.

Directory Structure:
    public/assets/images/          ← storage_root (other upload roles)
    └── thumbnail/                 ← role "thumbnail"
        ├── 1718035200000-482913377.jpg
        └── 1718035211873-90211456.png

Filenames:
    <epoch milliseconds>-<random integer>.<original extension>
    Nothing from the client's filename survives except its extension.

Out of scope: size limits, content sniffing, malware scanning.
"""

import logging
import random
import time
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

from recipeshare.config import settings
from recipeshare.exceptions import FileError

logger = logging.getLogger(__name__)

THUMBNAIL_ROLE = "thumbnail"

# Upper bound of the random filename suffix
_RANDOM_SUFFIX_MAX = 1_000_000_000


class FileService:
    """
    Manages the lifecycle of uploaded image files.

    Lifecycle of a thumbnail:
        1. RecipeService validates the request (extension included)
        2. store_upload() writes it under <root>/thumbnail/ with a new name
        3. The generated name is saved in the recipe row
        4. On edit with a new file, or on delete: delete_file() / cleanup_file()
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                         If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def ensure_directories(self) -> None:
        """Create the storage root and the thumbnail directory if missing."""
        self.directory_for(THUMBNAIL_ROLE).mkdir(parents=True, exist_ok=True)

    def directory_for(self, role: str) -> Path:
        """Thumbnails get their own subdirectory; every other role uses the root."""
        if role == THUMBNAIL_ROLE:
            return self.storage_root / THUMBNAIL_ROLE
        return self.storage_root

    def thumbnail_path(self, filename: str) -> Path:
        """Absolute path of a stored thumbnail."""
        return self.directory_for(THUMBNAIL_ROLE) / filename

    @staticmethod
    def generate_filename(original_name: str) -> str:
        """
        Build `<epoch-ms>-<random>.<ext>` keeping only the original extension.

        Example: "soup.jpg" → "1718035200000-482913377.jpg"
        """
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, _RANDOM_SUFFIX_MAX)}"
        return unique_suffix + Path(original_name).suffix

    async def store_upload(
        self,
        content: bytes,
        original_name: str,
        role: str = THUMBNAIL_ROLE,
    ) -> str:
        """
        Write an uploaded file to the directory for its role.

        Returns:
            The generated filename (what the recipe row stores).

        Raises:
            FileError if directory creation or the write fails.
        """
        filename = self.generate_filename(original_name)
        absolute_path = self.directory_for(role) / filename

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s/%s (%d bytes)", role, filename, len(content))
        return filename

    async def delete_file(self, file_path: Union[str, Path]) -> None:
        """
        Remove a file. A file that is already gone counts as removed.

        Raises:
            FileError for any OS error other than "does not exist".
        """
        try:
            await aiofiles.os.remove(file_path)
            logger.info("Deleted file: %s", Path(file_path).name)
        except FileNotFoundError:
            logger.debug("Delete: file already gone: %s", Path(file_path).name)
        except OSError as e:
            logger.error("Failed to delete file %s: %s", file_path, str(e))
            raise FileError(
                message="Error deleting associated file",
                context={"path": str(file_path), "os_error": str(e)},
            )

    async def cleanup_file(self, file_path: Union[str, Path]) -> None:
        """
        Best-effort removal; logs instead of raising.

        Used for a superseded thumbnail after an edit and for a freshly
        written upload whose row insert/update failed.
        """
        try:
            await self.delete_file(file_path)
        except FileError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, e.context.get("os_error"))

    def resolve_public_path(self, relative_path: str) -> Path:
        """
        Map a URL path below the image root to an absolute file path.

        Raises:
            ValueError if the path escapes the storage root (../ tricks).
        """
        full_path = (self.storage_root / relative_path).resolve()
        if full_path != self.storage_root and self.storage_root not in full_path.parents:
            raise ValueError(f"Path escapes storage root: {relative_path}")
        return full_path


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
