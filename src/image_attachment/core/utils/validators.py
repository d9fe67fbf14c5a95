"""Input validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from image_attachment.core.models.errors import ImageAttachmentError, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for error details.

    Removes internal fields like:
    - url
    - ctx
    - input (may hold file paths or large payloads)
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "root"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "subclass of" in msg_lower:
            msg = "Must be a subclass of ImageRecord"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_model(
    model: type[ModelT],
    data: Any,
    *,
    message: str = "Invalid input",
    error_type: type[ImageAttachmentError] = ValidationError,
) -> ModelT:
    """Validate data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        message: Message of the raised error
        error_type: Domain error raised on failure

    Returns:
        The validated model instance

    Raises:
        ImageAttachmentError: ``error_type`` with sanitized field errors in details
    """
    if isinstance(data, model):
        return data

    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise error_type(
            message=message,
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
        ) from exc
