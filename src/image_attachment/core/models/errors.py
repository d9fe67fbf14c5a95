"""Custom exception classes for the image attachment component."""

from typing import Any

from image_attachment.core.utils.constants import (
    ERROR_CODE_CODEC,
    ERROR_CODE_CONFIGURATION_INVALID,
    ERROR_CODE_FILESYSTEM,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageAttachmentError(Exception):
    """
    Base exception for all image attachment errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ConfigurationError(ImageAttachmentError):
    """Raised at construction time when a required setting is missing or invalid."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONFIGURATION_INVALID,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ValidationError(ImageAttachmentError):
    """Raised when caller input is rejected."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MetadataPersistenceError(ImageAttachmentError):
    """Raised when an image metadata store operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_METADATA_OPERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FilesystemError(ImageAttachmentError):
    """Raised when a directory or file operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILESYSTEM,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class CodecError(ImageAttachmentError):
    """Raised when an image cannot be decoded, resized or encoded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CODEC,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
