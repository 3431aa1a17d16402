"""
Header Renderer for the text block printed above a signature.

Produces a transparent RGBA image with two lines:

    <display name>,
    Fait le DD/MM/YYYY

sized to the widest measured line.
"""

import logging
import math
from functools import lru_cache
from typing import List, Optional

from PIL import Image, ImageDraw, ImageFont, features

from docsign.config import settings
from docsign.services.raster import RasterImage
from docsign.utils.exceptions import InputValidationError
from docsign.utils.timezone import DateLike, format_signed_date

logger = logging.getLogger(__name__)

HEADER_MARGIN = 5
HEADER_LINE_HEIGHT = 30
HEADER_PADDING = 10
HEADER_TEXT_COLOR = (0, 0, 0, 255)


class RenderingBackendError(RuntimeError):
    """The font rendering backend is unusable; raised at startup, never per request."""


@lru_cache(maxsize=8)
def _load_font(font_path: Optional[str], font_size: int) -> ImageFont.FreeTypeFont:
    if not features.check("freetype2"):
        raise RenderingBackendError("Pillow was built without FreeType support; cannot measure header text")
    try:
        if font_path:
            return ImageFont.truetype(font_path, font_size)
        return ImageFont.load_default(size=font_size)
    except (OSError, ValueError) as e:
        raise RenderingBackendError(f"Could not load header font {font_path or '<bundled>'}: {e}") from e


def verify_rendering_backend() -> None:
    """
    Load the configured header font and measure a sample string.

    Called once at application startup; raises RenderingBackendError.
    """
    font = _load_font(settings.header_font_path, settings.header_font_size)
    try:
        sample_width = font.getlength("Fait le 01/01/2000")
    except OSError as e:
        raise RenderingBackendError(f"Font metrics unavailable: {e}") from e
    if sample_width <= 0:
        raise RenderingBackendError("Font metrics unavailable: sample text measured 0px wide")
    logger.info(
        f"Header rendering backend ready (font={settings.header_font_path or 'bundled'}, "
        f"size={settings.header_font_size})"
    )


def build_header_lines(display_name: str, signed_date: DateLike, tz_name: str) -> List[str]:
    name = (display_name or "").strip()
    if not name:
        raise InputValidationError("Signer display name is required", field="display_name")
    return [f"{name},", f"Fait le {format_signed_date(signed_date, tz_name)}"]


class HeaderRenderer:
    """Rasterizes the signer name/date header."""

    def __init__(
        self,
        font_path: Optional[str] = None,
        font_size: Optional[int] = None,
        tz_name: Optional[str] = None,
    ):
        self.font_path = font_path if font_path is not None else settings.header_font_path
        self.font_size = font_size or settings.header_font_size
        self.tz_name = tz_name or settings.signature_timezone

    @property
    def font(self) -> ImageFont.FreeTypeFont:
        return _load_font(self.font_path, self.font_size)

    def measure(self, lines: List[str]) -> tuple:
        """(width, height) of the header image for these lines."""
        font = self.font
        text_width = max(font.getlength(line) for line in lines)
        width = math.ceil(text_width) + HEADER_PADDING
        height = 2 * HEADER_MARGIN + len(lines) * HEADER_LINE_HEIGHT
        return width, height

    def render(self, display_name: str, signed_date: DateLike) -> RasterImage:
        lines = build_header_lines(display_name, signed_date, self.tz_name)
        width, height = self.measure(lines)

        image = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        for i, line in enumerate(lines):
            draw.text(
                (HEADER_MARGIN, HEADER_MARGIN + i * HEADER_LINE_HEIGHT),
                line,
                font=self.font,
                fill=HEADER_TEXT_COLOR,
            )

        logger.debug(f"Rendered signature header {width}x{height} for {lines[0]!r}")
        return RasterImage.from_image(image)
