"""
Common decorators for owner lifecycle hooks.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from aws_lambda_powertools import Logger

from image_attachment.core.models.errors import ImageAttachmentError
from image_attachment.core.utils.constants import ERROR_CODE_INTERNAL_ERROR

logger = Logger(UTC=True)

ReturnT = TypeVar("ReturnT")


def _log_error(
    message: str,
    *,
    hook_name: str,
    owner_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        hook_name: Name of the lifecycle hook
        owner_id: Owner the hook ran for, if bound
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra: dict[str, Any] = {
        "hook": hook_name,
        "owner_id": owner_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, ImageAttachmentError):
        log_extra["error_code"] = exc.error_code
        log_extra["details"] = exc.details

    if level == "exception":
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def lifecycle_hook(func: Callable[..., ReturnT]) -> Callable[..., ReturnT]:
    """
    Decorator for methods invoked from the owner entity lifecycle.

    Provides:
    - Structured logging of every failure with the owner id
    - Domain errors re-raised unchanged
    - Unexpected errors wrapped into ``ImageAttachmentError`` so the host
      sees one error family and never a process exit

    Example:
        @lifecycle_hook
        def after_save(self, owner_id=None):
            ...
    """

    @wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> ReturnT:
        owner_id = getattr(self, "owner_id", None)

        try:
            return func(self, *args, **kwargs)

        except ImageAttachmentError as exc:
            _log_error(
                "Image attachment operation failed",
                hook_name=func.__name__,
                owner_id=owner_id,
                exc=exc,
            )
            raise

        except Exception as exc:
            _log_error(
                "Unexpected error in image attachment operation",
                hook_name=func.__name__,
                owner_id=owner_id,
                exc=exc,
                level="exception",
            )
            raise ImageAttachmentError(
                message="Unexpected error while processing images",
                error_code=ERROR_CODE_INTERNAL_ERROR,
                details={"hook": func.__name__, "owner_id": owner_id},
            ) from exc

    return wrapper
