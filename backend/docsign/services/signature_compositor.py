"""
Signature Compositor: trims the captured signature and stacks it under the
name/date header on one transparent RGBA canvas.
"""

import logging

from PIL import Image, ImageChops

from docsign.services.raster import RasterImage
from docsign.utils.exceptions import ImageProcessingError

logger = logging.getLogger(__name__)


def _content_bbox(image: Image.Image):
    """Bounding box of everything that differs from the top-left (background) pixel."""
    background = image.getpixel((0, 0))

    if background[3] == 0:
        # Transparent canvas: any visible pixel is signature ink
        return image.getchannel("A").getbbox()

    diff = ImageChops.difference(image, Image.new("RGBA", image.size, background))
    r, g, b, a = diff.split()
    mask = ImageChops.lighter(ImageChops.lighter(r, g), ImageChops.lighter(b, a))
    return mask.getbbox()


def trim_signature(signature: RasterImage) -> RasterImage:
    """Remove the uniform (transparent or solid) border around the strokes."""
    bbox = _content_bbox(signature.pixels)
    if bbox is None:
        raise ImageProcessingError("trim", "signature image is blank")

    trimmed = signature.pixels.crop(bbox)
    logger.debug(f"Trimmed signature {signature.width}x{signature.height} -> {trimmed.width}x{trimmed.height}")
    return RasterImage.from_image(trimmed)


def stack_images(header: RasterImage, signature: RasterImage) -> RasterImage:
    """
    Header at the top-left, signature centered horizontally along the bottom
    edge. The canvas is exactly max(widths) x sum(heights), transparent
    wherever neither image has ink.
    """
    width = max(header.width, signature.width)
    height = header.height + signature.height

    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    canvas.alpha_composite(header.pixels, (0, 0))
    canvas.alpha_composite(signature.pixels, ((width - signature.width) // 2, height - signature.height))

    return RasterImage.from_image(canvas)


def compose_signature(header: RasterImage, raw_signature: RasterImage) -> RasterImage:
    """Trim the raw signature and place it under the header."""
    try:
        composite = stack_images(header, trim_signature(raw_signature))
    except ImageProcessingError:
        raise
    except (ValueError, OSError) as e:
        raise ImageProcessingError("composite", str(e)) from e

    logger.debug(f"Composite signature image {composite.width}x{composite.height}")
    return composite
