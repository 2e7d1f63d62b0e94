"""Image ingestion: downscale, recompress and encode images for inline storage.

Documents hold images as data URLs rather than references to a blob store, so
every image is bounded twice before it is saved: its longest edge is scaled to
fit ``max_dimension`` and its encoded length is checked against
``max_payload_chars``. An oversized first encoding is replaced by a single
lower-quality pass; that second pass is used whether or not it fits.
"""

import base64
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from label_admin.domain.images import ImageBatchResult, ImageFailure, NormalizedImage
from label_admin.errors import FileTooLargeError, ImageDecodeError

logger = logging.getLogger(__name__)

MAX_FILE_BYTES = 5 * 1024 * 1024
MAX_DIMENSION = 800
MAX_PAYLOAD_CHARS = 800_000
QUALITY = 0.7
FALLBACK_QUALITY = 0.5
_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class ImageNormalizer:
    """Turns arbitrary uploaded image bytes into a bounded JPEG data URL."""

    max_file_bytes: int = MAX_FILE_BYTES
    max_dimension: int = MAX_DIMENSION
    max_payload_chars: int = MAX_PAYLOAD_CHARS
    quality: float = QUALITY
    fallback_quality: float = FALLBACK_QUALITY

    def normalize(self, data: bytes, filename: str | None = None) -> NormalizedImage:
        """Return the normalized payload for one file.

        Raises ``FileTooLargeError`` before decoding when the file exceeds the
        size limit and ``ImageDecodeError`` when the bytes are not an image.
        """
        if len(data) > self.max_file_bytes:
            raise FileTooLargeError(len(data), self.max_file_bytes)
        surface = self._render(data, filename)
        quality = self.quality
        data_url = _encode(surface, quality)
        if len(data_url) > self.max_payload_chars:
            quality = self.fallback_quality
            data_url = _encode(surface, quality)
        return NormalizedImage(
            data_url=data_url,
            width=surface.width,
            height=surface.height,
            quality=quality,
        )

    def normalize_many(self, files: Iterable[tuple[str, bytes]]) -> ImageBatchResult:
        """Normalize files one at a time, collecting failures instead of stopping."""
        result = ImageBatchResult()
        for filename, data in files:
            try:
                result.images.append(self.normalize(data, filename))
            except FileTooLargeError:
                result.failures.append(
                    ImageFailure(
                        filename=filename,
                        message=(
                            f"Image {filename} is too large "
                            f"(max {_format_megabytes(self.max_file_bytes)})"
                        ),
                    )
                )
            except ImageDecodeError:
                result.failures.append(
                    ImageFailure(
                        filename=filename,
                        message=f"Failed to process image {filename}",
                    )
                )
        return result

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """Scale dimensions to fit the bounding box, never upscaling."""
        if width >= height and width > self.max_dimension:
            scale = self.max_dimension / width
            return self.max_dimension, max(1, round(height * scale))
        if height > width and height > self.max_dimension:
            scale = self.max_dimension / height
            return max(1, round(width * scale)), self.max_dimension
        return width, height

    def _render(self, data: bytes, filename: str | None) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                upright = ImageOps.exif_transpose(source)
                size = self.target_size(upright.width, upright.height)
                return _flatten(upright).resize(size, Image.Resampling.LANCZOS)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            ValueError,
        ) as exc:
            logger.info("Could not decode image", extra={"image_name": filename})
            raise ImageDecodeError(f"Cannot decode image {filename or ''}") from exc


def _flatten(image: Image.Image) -> Image.Image:
    """Return an RGB copy, compositing any transparency onto white."""
    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image.copy()


def _encode(surface: Image.Image, quality: float) -> str:
    buffer = io.BytesIO()
    surface.save(buffer, format="JPEG", quality=round(quality * 100))
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:{_MIME_TYPE};base64,{encoded}"


def _format_megabytes(size: int) -> str:
    return f"{size // (1024 * 1024)}MB"
