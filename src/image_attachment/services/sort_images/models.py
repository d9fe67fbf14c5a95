"""Pydantic models for image reordering."""

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class SortImagesRequest(BaseModel):
    """Validation model for a reorder request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: StrictStr = Field(..., min_length=1, description="Owner whose images are reordered")
    image_ids: list[StrictStr] = Field(..., description="Image ids in the desired order")

    @field_validator("image_ids")
    @classmethod
    def validate_image_ids(cls, value: list[str]) -> list[str]:
        if any(not image_id for image_id in value):
            raise ValueError("image ids must not be empty")

        duplicates = sorted(image_id for image_id, count in Counter(value).items() if count > 1)
        if duplicates:
            raise ValueError(f"Duplicate image ids: {', '.join(duplicates)}")

        return value
