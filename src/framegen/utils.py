"""Shared utility functions."""

import os
from pathlib import Path
from PIL import Image, ImageOps

from .buffer import PixelBuffer
from . import defaults


SUPPORTED_FORMATS = {'.jpg', '.jpeg', '.png', '.webp', '.gif'}


def is_image_file(path: str) -> bool:
    """Check if file is a supported image format."""
    return Path(path).suffix.lower() in SUPPORTED_FORMATS


def ensure_directory(path: str) -> None:
    """Create directory if it doesn't exist."""
    Path(path).mkdir(parents=True, exist_ok=True)


def validate_image(image_path: str) -> bool:
    """Validate that image file can be opened and processed."""
    if not os.path.exists(image_path):
        return False

    if not is_image_file(image_path):
        return False

    try:
        with Image.open(image_path) as img:
            img.verify()
        return True
    except Exception:
        return False


def load_buffer(image_path: str, max_size: int = defaults.ANALYSIS_MAX_SIZE) -> PixelBuffer:
    """
    Decode an image file into a pixel buffer at analysis resolution.

    EXIF orientation is applied before conversion so that normalized
    coordinates match the image as displayed.
    """
    with Image.open(image_path) as img:
        img = ImageOps.exif_transpose(img)
        return PixelBuffer.from_image(img, max_size=max_size)


def get_output_path(input_path: str, output_dir: str, suffix: str = "_analysis") -> str:
    """Generate JSON report path for an analyzed image."""
    input_name = Path(input_path).stem
    return os.path.join(output_dir, f"{input_name}{suffix}.json")
