"""Attachment configuration model."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from image_attachment.core.models.errors import ConfigurationError
from image_attachment.core.models.image import ImageRecord, SizeProfile
from image_attachment.core.utils.validators import validate_model

logger = Logger(UTC=True)


class AttachmentConfig(BaseModel):
    """Settings supplied once when the attachment component is constructed.

    Every field is required. Root paths are explicit: nothing is resolved
    through a process-wide alias registry.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    image_record_type: type[ImageRecord] = Field(
        ..., description="Record class used to materialize metadata rows"
    )
    upload_field: StrictStr = Field(
        ..., min_length=1, description="Name under which uploaded files are discovered"
    )
    upload_root_path: Path = Field(..., description="Filesystem root of the upload tree")
    public_root_path: StrictStr = Field(..., description="URL root matching upload_root_path")
    sizes: dict[str, SizeProfile] = Field(
        ..., min_length=1, description="Ordered mapping of profile name to size profile"
    )
    no_image_placeholder_path: StrictStr = Field(
        ..., min_length=1, description="URL returned for owners without images"
    )
    multiple: StrictBool = Field(..., description="Whether an owner may hold several images")

    @field_validator("public_root_path")
    @classmethod
    def validate_public_root_path(cls, value: str) -> str:
        return value.rstrip("/")


def load_config(settings: Mapping[str, Any] | AttachmentConfig) -> AttachmentConfig:
    """Build an ``AttachmentConfig``, failing fast on missing or invalid settings.

    Raises:
        ConfigurationError: If any required setting is missing or invalid
    """
    if isinstance(settings, AttachmentConfig):
        return settings

    config = validate_model(
        AttachmentConfig,
        dict(settings),
        message="Image attachment is misconfigured",
        error_type=ConfigurationError,
    )
    logger.debug(
        "Attachment configured",
        extra={
            "upload_field": config.upload_field,
            "profiles": list(config.sizes),
            "multiple": config.multiple,
        },
    )
    return config
