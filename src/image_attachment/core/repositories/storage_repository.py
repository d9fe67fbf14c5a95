"""Abstract contract for image file storage."""

from abc import ABC, abstractmethod
from pathlib import Path


class ImageFileStorage(ABC):
    """Contract for reading, writing and removing image files.

    Implementations translate low-level errors into ``FilesystemError``.
    """

    @abstractmethod
    def read_bytes(self, *, path: Path) -> bytes:
        """Read a whole file.

        Raises:
            FilesystemError: If the file cannot be read
        """

    @abstractmethod
    def ensure_directory(self, *, path: Path) -> None:
        """Create a directory and its parents. Idempotent.

        Raises:
            FilesystemError: If the directory cannot be created
        """

    @abstractmethod
    def copy_file(self, *, source: Path, destination: Path) -> None:
        """Copy a file, overwriting the destination.

        Raises:
            FilesystemError: If the copy fails
        """

    @abstractmethod
    def remove_file(self, *, path: Path) -> bool:
        """Remove a file if present.

        Returns:
            True if a file was removed, False if it was already absent

        Raises:
            FilesystemError: If the file exists but cannot be removed
        """
