"""Shared image models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from image_attachment.core.utils.constants import SHARD_PATH_PATTERN


class ImageRecord(BaseModel):
    """Metadata row for one stored logical image.

    Applications may subclass this model to carry extra columns; the
    subclass is bound through ``AttachmentConfig.image_record_type``.
    """

    model_config = ConfigDict(extra="ignore")

    image_id: StrictStr = Field(..., description="Unique image identifier")
    owner_id: StrictStr = Field(..., description="Primary key of the owning entity")
    path: StrictStr = Field(
        ...,
        pattern=SHARD_PATH_PATTERN,
        description="Hash-derived shard directory, e.g. /ab/cd",
    )
    extension: StrictStr = Field(..., min_length=1, description="File extension without dot")
    sort_index: StrictInt = Field(..., description="Position among the owner's images")
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")


class SizeProfile(BaseModel):
    """Named derivative configuration.

    A ``width`` or ``height`` of ``None`` or ``0`` leaves that axis unconstrained.
    """

    model_config = ConfigDict(frozen=True)

    folder: StrictStr = Field(..., description="Folder under the upload and public roots")
    width: int | None = Field(None, ge=0, description="Maximum derivative width")
    height: int | None = Field(None, ge=0, description="Maximum derivative height")

    @field_validator("folder")
    @classmethod
    def validate_folder(cls, value: str) -> str:
        folder = value.strip().strip("/")
        if ".." in Path(folder).parts:
            raise ValueError("folder must not traverse outside the upload root")
        return folder

    @property
    def is_constrained(self) -> bool:
        return bool(self.width) or bool(self.height)


class UploadedFileDescriptor(BaseModel):
    """An uploaded file waiting in temporary storage."""

    model_config = ConfigDict(frozen=True)

    temporary_location: Path = Field(..., description="Where the upload currently lives")
    extension: StrictStr = Field(..., min_length=1, description="Extension to store the file under")

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, value: str) -> str:
        extension = value.strip().lstrip(".")
        if not extension:
            raise ValueError("extension must not be empty")
        if "/" in extension or "\\" in extension:
            raise ValueError("extension must not contain path separators")
        return extension
