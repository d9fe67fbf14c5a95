"""Image attachment component package."""

from image_attachment.attachment import ImageAttachment, OwnerImages
from image_attachment.core.models.config import AttachmentConfig, load_config

__version__ = "1.0.0"
__description__ = (
    "Sharded, multi-size image attachments for persisted owner entities"
)

__all__ = ["AttachmentConfig", "ImageAttachment", "OwnerImages", "load_config"]
