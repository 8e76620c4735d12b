"""
Unit tests for image decoding and downscaling.
"""

import io

import numpy as np
import pytest
from PIL import Image

from paletteforge.services.colors.errors import ImageDecodeError
from paletteforge.services.imaging import detect_image_type, downscale, load_pixels


class TestDetectImageType:
    """Test magic byte detection"""

    def test_png(self, uniform_image, encode_png):
        assert detect_image_type(encode_png(uniform_image)) == "image/png"

    def test_jpeg(self, uniform_image):
        buffer = io.BytesIO()
        Image.fromarray(uniform_image).save(buffer, format="JPEG")
        assert detect_image_type(buffer.getvalue()) == "image/jpeg"

    def test_gif(self, uniform_image):
        buffer = io.BytesIO()
        Image.fromarray(uniform_image).save(buffer, format="GIF")
        assert detect_image_type(buffer.getvalue()) == "image/gif"

    def test_garbage_rejected(self):
        with pytest.raises(ImageDecodeError):
            detect_image_type(b"definitely not an image")

    def test_too_small_rejected(self):
        with pytest.raises(ImageDecodeError):
            detect_image_type(b"\x89PNG")


class TestDownscale:
    """Test resolution reduction"""

    def test_halves_dimensions(self):
        img = np.zeros((10, 20, 3), dtype=np.uint8)
        assert downscale(img, 0.5).shape == (5, 10, 3)

    def test_never_below_one_pixel(self):
        img = np.zeros((3, 3, 3), dtype=np.uint8)
        assert downscale(img, 0.2).shape == (1, 1, 3)

    def test_full_scale_is_identity(self, uniform_image):
        assert downscale(uniform_image, 1.0) is uniform_image

    @pytest.mark.parametrize("scale", [0, -0.5, 1.5])
    def test_invalid_scale(self, uniform_image, scale):
        with pytest.raises(ValueError):
            downscale(uniform_image, scale)


class TestLoadPixels:
    """Test the pixel source"""

    def test_flattens_rgb(self, halves_image, encode_png):
        stream = load_pixels(encode_png(halves_image), scale=1.0)

        assert stream.pixels.shape == (1600, 3)
        assert stream.pixels.dtype == np.uint8
        assert (stream.width, stream.height) == (40, 40)
        assert stream.pixel_count == 1600

    def test_downscaled_stream(self, halves_image, encode_png):
        stream = load_pixels(encode_png(halves_image), scale=0.5)

        assert (stream.width, stream.height) == (20, 20)
        assert (stream.source_width, stream.source_height) == (40, 40)
        colors = {tuple(p) for p in stream.pixels.tolist()}
        assert colors == {(0, 0, 0), (255, 255, 255)}

    def test_rgba_converted(self, encode_png):
        rgba = np.zeros((8, 8, 4), dtype=np.uint8)
        rgba[:, :] = (10, 20, 30, 128)
        stream = load_pixels(encode_png(rgba))

        assert stream.pixels.shape == (64, 3)
        assert tuple(stream.pixels[0]) == (10, 20, 30)

    def test_corrupt_png(self):
        data = b'\x89PNG\r\n\x1a\n' + b"\x00" * 32
        with pytest.raises(ImageDecodeError):
            load_pixels(data)

    def test_decompression_bomb_rejected(self, monkeypatch, halves_image, encode_png):
        data = encode_png(halves_image)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        with pytest.raises(ImageDecodeError):
            load_pixels(data)
