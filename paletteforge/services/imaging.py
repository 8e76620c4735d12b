"""
PaletteForge Imaging Utilities
Decodes uploaded images and turns them into downscaled RGB pixel streams.
"""
import io
from dataclasses import dataclass

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from paletteforge.config import config
from paletteforge.services.colors.errors import ImageDecodeError


@dataclass
class PixelStream:
    """Flattened RGB pixels of a downscaled image."""
    pixels: np.ndarray
    width: int
    height: int
    source_width: int
    source_height: int

    @property
    def pixel_count(self) -> int:
        return int(self.pixels.shape[0])


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata before reading it.

    Raises:
        HTTPException: 400 for oversized files, 415 for unsupported formats
    """
    if getattr(file, 'size', None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )


def detect_image_type(file_bytes: bytes) -> str:
    """
    Detect the image MIME type from magic bytes.

    Raises:
        ImageDecodeError: If the bytes do not start like a supported image
    """
    if len(file_bytes) < 12:
        raise ImageDecodeError("File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    if file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    if file_bytes[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if file_bytes[:4] == b'RIFF' and file_bytes[8:12] == b'WEBP':
        return "image/webp"
    if file_bytes.startswith(b'BM'):
        return "image/bmp"

    raise ImageDecodeError("Invalid image file. Magic bytes don't match supported formats.")


def downscale(rgb: np.ndarray, scale: float) -> np.ndarray:
    """
    Shrink an RGB image by a factor in (0, 1].

    Uses INTER_AREA, and never goes below 1x1.
    """
    if not 0 < scale <= 1:
        raise ValueError(f"scale must be in (0, 1], got {scale}")
    if scale == 1:
        return rgb

    height, width = rgb.shape[:2]
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))
    return cv2.resize(rgb, (new_width, new_height), interpolation=cv2.INTER_AREA)


def load_pixels(file_bytes: bytes, scale: float = 1.0) -> PixelStream:
    """
    Decode image bytes into a flattened, downscaled RGB pixel stream.

    Args:
        file_bytes: Raw encoded image
        scale: Downscale factor in (0, 1]

    Returns:
        PixelStream with (N, 3) uint8 pixels

    Raises:
        ImageDecodeError: For unsupported, oversized or corrupt images
    """
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise ImageDecodeError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    detect_image_type(file_bytes)

    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')
        rgb_array = np.array(pil_image)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Failed to decode image: {str(e)}") from e

    source_height, source_width = rgb_array.shape[:2]
    small = downscale(rgb_array, scale)
    height, width = small.shape[:2]

    return PixelStream(
        pixels=small.reshape(-1, 3),
        width=width,
        height=height,
        source_width=source_width,
        source_height=source_height
    )
