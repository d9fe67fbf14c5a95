"""Local filesystem implementation of ImageFileStorage."""

import os
import shutil
from pathlib import Path

from aws_lambda_powertools import Logger

from image_attachment.core.models.errors import FilesystemError
from image_attachment.core.repositories.storage_repository import ImageFileStorage
from image_attachment.core.utils.constants import (
    DIRECTORY_MODE,
    ERROR_CODE_DIRECTORY_CREATE_FAILED,
    ERROR_CODE_FILE_DELETE_FAILED,
    ERROR_CODE_FILE_READ_FAILED,
    ERROR_CODE_FILE_WRITE_FAILED,
    TEMP_FILE_PREFIX,
)

logger = Logger(UTC=True)


class LocalImageStorage(ImageFileStorage):
    """Image file storage backed by the local filesystem."""

    def __init__(self, directory_mode: int = DIRECTORY_MODE) -> None:
        self._directory_mode = directory_mode

    def read_bytes(self, *, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            logger.error("Failed to read file", extra={"path": str(path)})
            raise FilesystemError(
                message="Unable to read uploaded file",
                error_code=ERROR_CODE_FILE_READ_FAILED,
                details={"path": str(path)},
            ) from exc

    def ensure_directory(self, *, path: Path) -> None:
        try:
            path.mkdir(mode=self._directory_mode, parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Failed to create directory", extra={"path": str(path)})
            raise FilesystemError(
                message="Unable to create image directory",
                error_code=ERROR_CODE_DIRECTORY_CREATE_FAILED,
                details={"path": str(path)},
            ) from exc

    def copy_file(self, *, source: Path, destination: Path) -> None:
        """Copy through a temporary sibling so readers never see a partial file."""
        temporary = destination.with_name(f"{TEMP_FILE_PREFIX}{destination.name}")
        logger.debug(
            "Copying file",
            extra={"source": str(source), "destination": str(destination)},
        )

        try:
            shutil.copyfile(source, temporary)
            os.replace(temporary, destination)
        except OSError as exc:
            temporary.unlink(missing_ok=True)
            logger.error(
                "Failed to copy file",
                extra={"source": str(source), "destination": str(destination)},
            )
            raise FilesystemError(
                message="Unable to write image file",
                error_code=ERROR_CODE_FILE_WRITE_FAILED,
                details={"path": str(destination)},
            ) from exc

    def remove_file(self, *, path: Path) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("File already absent", extra={"path": str(path)})
            return False
        except OSError as exc:
            logger.error("Failed to remove file", extra={"path": str(path)})
            raise FilesystemError(
                message="Unable to delete image file",
                error_code=ERROR_CODE_FILE_DELETE_FAILED,
                details={"path": str(path)},
            ) from exc

        logger.debug("File removed", extra={"path": str(path)})
        return True
