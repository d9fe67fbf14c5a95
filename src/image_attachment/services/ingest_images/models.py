"""Models describing the outcome of an ingestion batch."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from image_attachment.core.models.errors import ImageAttachmentError


class IngestionOutcome(BaseModel):
    """Result of ingesting one uploaded file."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    index: StrictInt = Field(..., description="Position of the file in the batch")
    image_id: StrictStr | None = Field(None, description="Id of the stored image")
    error: ImageAttachmentError | None = Field(None, description="Why the file was not stored")

    @property
    def succeeded(self) -> bool:
        return self.error is None


class IngestionResult(BaseModel):
    """Per-item outcomes of one ingestion call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    owner_id: StrictStr
    outcomes: list[IngestionOutcome] = Field(default_factory=list)

    @property
    def image_ids(self) -> list[str]:
        return [o.image_id for o in self.outcomes if o.image_id is not None]

    @property
    def failures(self) -> list[IngestionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise the error of the first failed item, if any."""
        for outcome in self.failures:
            if outcome.error is not None:
                raise outcome.error
