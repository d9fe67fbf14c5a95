"""Resized derivative generation backed by Pillow."""

import os
import shutil
from pathlib import Path
from typing import Any

from aws_lambda_powertools import Logger
from PIL import Image

from image_attachment.core.models.errors import CodecError
from image_attachment.core.utils.constants import (
    ERROR_CODE_IMAGE_DECODE_FAILED,
    ERROR_CODE_IMAGE_RESIZE_FAILED,
    TEMP_FILE_PREFIX,
)

logger = Logger(UTC=True)

Size = tuple[int, int]

_CODEC_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def target_size(source: Size, *, width: int | None, height: int | None) -> Size | None:
    """Compute the best-fit size for a source inside the given bounds.

    A bound of ``None`` or ``0`` leaves that axis unconstrained. Returns
    ``None`` when the source already fits, so images are never upscaled.
    """
    source_width, source_height = source
    max_width = width or None
    max_height = height or None

    fits_width = max_width is None or source_width <= max_width
    fits_height = max_height is None or source_height <= max_height
    if fits_width and fits_height:
        return None

    ratios = [1.0]
    if max_width is not None:
        ratios.append(max_width / source_width)
    if max_height is not None:
        ratios.append(max_height / source_height)
    scale = min(ratios)

    return (
        max(1, round(source_width * scale)),
        max(1, round(source_height * scale)),
    )


class DerivativeGenerator:
    """Produces aspect-preserving, never-upscaled copies of an image.

    Results are written to a temporary sibling of the output and moved into
    place only after a successful encode, so a failure never leaves a
    truncated file at the output path.
    """

    def __init__(
        self,
        *,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
        jpeg_quality: int = 90,
    ) -> None:
        self._resample = resample
        self._jpeg_quality = jpeg_quality

    def generate(
        self,
        source: Path,
        output: Path,
        *,
        width: int | None = None,
        height: int | None = None,
    ) -> bool:
        """Write a derivative of ``source`` bounded by ``width`` x ``height``.

        ``source`` and ``output`` may be the same file (resize in place).

        Returns:
            True if the image was resized, False if it already fit

        Raises:
            CodecError: If decoding, resizing or encoding fails
        """
        temporary = output.with_name(f"{TEMP_FILE_PREFIX}{output.name}")

        try:
            with Image.open(source) as image:
                image.load()
                size = target_size(image.size, width=width, height=height)

                if size is None:
                    logger.debug(
                        "Image already within bounds",
                        extra={"source": str(source), "size": image.size},
                    )
                    if Path(source) != Path(output):
                        shutil.copyfile(source, temporary)
                        os.replace(temporary, output)
                    return False

                image_format = image.format
                resized = image.resize(size, self._resample)
        except _CODEC_ERRORS as exc:
            temporary.unlink(missing_ok=True)
            logger.error("Failed to decode image", extra={"source": str(source)})
            raise CodecError(
                message="Unable to decode image",
                error_code=ERROR_CODE_IMAGE_DECODE_FAILED,
                details={"path": str(source)},
            ) from exc

        try:
            resized.save(temporary, format=image_format, **self._save_options(image_format))
            os.replace(temporary, output)
        except _CODEC_ERRORS as exc:
            temporary.unlink(missing_ok=True)
            logger.error(
                "Failed to write resized image",
                extra={"source": str(source), "output": str(output)},
            )
            raise CodecError(
                message="Unable to resize image",
                error_code=ERROR_CODE_IMAGE_RESIZE_FAILED,
                details={"path": str(output)},
            ) from exc

        logger.debug(
            "Derivative written",
            extra={"output": str(output), "width": size[0], "height": size[1]},
        )
        return True

    def _save_options(self, image_format: str | None) -> dict[str, Any]:
        if image_format == "JPEG":
            return {"quality": self._jpeg_quality}
        return {}
