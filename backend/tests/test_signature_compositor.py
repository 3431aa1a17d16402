#!/usr/bin/env python3
"""Tests for trimming the captured signature and stacking it under the header"""

import sys
sys.path.append('.')

from PIL import Image
import pytest

from pdf_fixtures import make_signature_image, make_signature_png, to_png


def _solid(width, height, color):
    from docsign.services.raster import RasterImage
    return RasterImage.from_image(Image.new("RGBA", (width, height), color))


def test_raster_from_bytes_rejects_bad_input():
    """Empty and undecodable buffers are image processing errors"""
    from docsign.services.raster import RasterImage
    from docsign.utils.exceptions import ImageProcessingError

    with pytest.raises(ImageProcessingError):
        RasterImage.from_bytes(b"")
    with pytest.raises(ImageProcessingError) as exc_info:
        RasterImage.from_bytes(b"this is not an image")
    assert exc_info.value.code == "IMAGE_PROCESSING_ERROR"
    print("[PASS] RasterImage input validation test passed")


def test_raster_from_bytes_converts_to_rgba():
    """RGB or palette PNGs come out as 4-channel images"""
    from docsign.services.raster import RasterImage

    raster = RasterImage.from_bytes(to_png(Image.new("RGB", (30, 20), (255, 255, 255))))
    assert raster.size == (30, 20)
    assert raster.channels == 4
    assert raster.pixels.mode == "RGBA"
    print("[PASS] RasterImage RGBA conversion test passed")


def test_raster_from_bytes_enforces_pixel_limit():
    """Images above max_pixels are refused from their header, before decoding"""
    from docsign.services.raster import RasterImage
    from docsign.utils.exceptions import ImageProcessingError

    png = to_png(Image.new("RGBA", (200, 100), (0, 0, 0, 0)))

    with pytest.raises(ImageProcessingError) as exc_info:
        RasterImage.from_bytes(png, max_pixels=10_000)
    assert exc_info.value.details["max_pixels"] == 10_000
    assert RasterImage.from_bytes(png, max_pixels=20_000).size == (200, 100)
    print("[PASS] RasterImage pixel limit test passed")


def test_decompression_bomb_is_an_image_processing_error():
    """Pillow's decompression bomb guard surfaces as a typed decode error"""
    from docsign.services.raster import RasterImage
    from docsign.utils.exceptions import ImageProcessingError

    png = to_png(Image.new("1", (100, 100), 0))
    previous_limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = 1000
    try:
        with pytest.raises(ImageProcessingError) as exc_info:
            RasterImage.from_bytes(png)
    finally:
        Image.MAX_IMAGE_PIXELS = previous_limit

    assert exc_info.value.details["operation"] == "decode"
    assert isinstance(exc_info.value.__cause__, Image.DecompressionBombError)
    print("[PASS] decompression bomb test passed")


def test_trim_transparent_background():
    """Transparent margins around the stroke are removed"""
    from docsign.services.raster import RasterImage
    from docsign.services.signature_compositor import trim_signature

    raw = RasterImage.from_bytes(make_signature_png())
    trimmed = trim_signature(raw)

    assert trimmed.width < raw.width and trimmed.height < raw.height
    alpha = trimmed.pixels.getchannel("A")
    assert alpha.getbbox() == (0, 0, trimmed.width, trimmed.height)
    print("[PASS] transparent trim test passed")


def test_trim_white_background():
    """A solid white border is trimmed like a transparent one"""
    from docsign.services.raster import RasterImage
    from docsign.services.signature_compositor import trim_signature

    transparent = trim_signature(RasterImage.from_bytes(make_signature_png()))
    white = trim_signature(RasterImage.from_bytes(make_signature_png(background=(255, 255, 255, 255))))

    assert white.size == transparent.size
    print("[PASS] white trim test passed")


def test_trim_blank_signature_fails():
    """An empty canvas has nothing to sign with"""
    from docsign.services.signature_compositor import trim_signature
    from docsign.utils.exceptions import ImageProcessingError

    with pytest.raises(ImageProcessingError):
        trim_signature(_solid(100, 50, (0, 0, 0, 0)))
    with pytest.raises(ImageProcessingError):
        trim_signature(_solid(100, 50, (255, 255, 255, 255)))
    print("[PASS] blank signature test passed")


def test_stack_images_sizes_and_positions():
    """200x60 header + 150x80 signature -> 200x140 canvas, signature centered at left=25"""
    from docsign.services.signature_compositor import stack_images

    header = _solid(200, 60, (255, 0, 0, 255))
    signature = _solid(150, 80, (0, 0, 255, 255))
    composite = stack_images(header, signature)
    pixels = composite.pixels

    assert composite.size == (200, 140)
    # header at the top-left
    assert pixels.getpixel((0, 0)) == (255, 0, 0, 255)
    assert pixels.getpixel((199, 59)) == (255, 0, 0, 255)
    # signature spans x 25..174 along the bottom
    assert pixels.getpixel((25, 60)) == (0, 0, 255, 255)
    assert pixels.getpixel((174, 139)) == (0, 0, 255, 255)
    # transparent on both sides of the signature
    assert pixels.getpixel((24, 100))[3] == 0
    assert pixels.getpixel((175, 100))[3] == 0
    print("[PASS] composite sizing test passed")


def test_stack_images_wider_signature():
    """A signature wider than the header sets the canvas width"""
    from docsign.services.signature_compositor import stack_images

    composite = stack_images(_solid(100, 70, (0, 0, 0, 255)), _solid(300, 40, (0, 0, 0, 255)))
    assert composite.size == (300, 110)
    assert composite.pixels.getpixel((150, 10))[3] == 0
    assert composite.pixels.getpixel((50, 10))[3] == 255
    print("[PASS] wide signature composite test passed")


def test_compose_signature_trims_before_stacking():
    """The composite height is header height + trimmed signature height"""
    from docsign.services.raster import RasterImage
    from docsign.services.signature_compositor import compose_signature, trim_signature

    header = _solid(120, 70, (0, 0, 0, 0))
    raw = RasterImage.from_image(make_signature_image())
    trimmed = trim_signature(raw)
    composite = compose_signature(header, raw)

    assert composite.width == max(120, trimmed.width)
    assert composite.height == 70 + trimmed.height

    png = composite.to_png()
    assert png.startswith(b"\x89PNG")
    assert RasterImage.from_bytes(png).pixels.getpixel((0, 0))[3] == 0
    print("[PASS] compose_signature test passed")


if __name__ == "__main__":
    print("Running signature compositor tests...")
    print()

    test_raster_from_bytes_rejects_bad_input()
    test_raster_from_bytes_converts_to_rgba()
    test_raster_from_bytes_enforces_pixel_limit()
    test_decompression_bomb_is_an_image_processing_error()
    test_trim_transparent_background()
    test_trim_white_background()
    test_trim_blank_signature_fails()
    test_stack_images_sizes_and_positions()
    test_stack_images_wider_signature()
    test_compose_signature_trims_before_stacking()

    print()
    print("[SUCCESS] All tests passed!")
