"""
RGBA raster images passed between the header renderer, the compositor and the
PDF page editor.

Incoming image bytes are decoded and validated once, in RasterImage.from_bytes;
everything downstream can rely on a non-empty RGBA image.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image, UnidentifiedImageError

from docsign.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RasterImage:
    """Decoded RGBA image with its dimensions."""
    width: int
    height: int
    channels: int
    pixels: Image.Image

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterImage":
        if image.width <= 0 or image.height <= 0:
            raise ImageProcessingError("decode", f"image has no pixels ({image.width}x{image.height})")
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(width=image.width, height=image.height, channels=4, pixels=image)

    @classmethod
    def from_bytes(cls, data: bytes, max_pixels: Optional[int] = None) -> "RasterImage":
        """
        Decode PNG (or any Pillow-readable) bytes into an RGBA raster.

        The header is checked against max_pixels before any pixel data is
        decoded. Pillow's own decompression bomb limit always applies.
        """
        if not data:
            raise ImageProcessingError("decode", "image buffer is empty")

        try:
            image = Image.open(io.BytesIO(data))
            if max_pixels is not None and image.width * image.height > max_pixels:
                raise ImageProcessingError(
                    "decode",
                    f"image is too large ({image.width}x{image.height}, limit {max_pixels} pixels)",
                    details={"width": image.width, "height": image.height, "max_pixels": max_pixels},
                )
            image.load()
        except ImageProcessingError:
            raise
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageProcessingError("decode", str(e)) from e

        logger.debug(f"Decoded {image.format} image {image.width}x{image.height} mode={image.mode}")
        return cls.from_image(image)

    @classmethod
    def blank(cls, width: int, height: int) -> "RasterImage":
        """Fully transparent canvas."""
        return cls.from_image(Image.new("RGBA", (width, height), (0, 0, 0, 0)))

    @property
    def size(self) -> tuple:
        return self.width, self.height

    def to_png(self) -> bytes:
        buffer = io.BytesIO()
        self.pixels.save(buffer, format="PNG")
        return buffer.getvalue()
