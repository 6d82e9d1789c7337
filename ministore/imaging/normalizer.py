"""
Image Normalizer

Bounds an uploaded image to a maximum side length and re-encodes it as
JPEG so that every catalog image has a predictable size before upload.
"""

import io
import logging
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from ..common.config_loader import ImageProfile
from ..common.errors import EncodingError

logger = logging.getLogger(__name__)

# Modes that carry transparency; JPEG has no alpha so these are flattened.
_ALPHA_MODES = ('RGBA', 'LA', 'P')


def scaled_size(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """
    Compute the output size for a bound on the larger side.

    Images already within the bound keep their size (no upscaling).

    Example:
        >>> scaled_size(1600, 1200, 800)
        (800, 600)
        >>> scaled_size(300, 200, 800)
        (300, 200)
    """
    scale = min(1.0, max_dimension / max(width, height))
    return max(1, round(width * scale)), max(1, round(height * scale))


def encode_jpeg(img: Image.Image, quality: float) -> bytes:
    """
    Encode a Pillow image as JPEG.

    Args:
        img: Image in any mode; transparency is flattened onto white
        quality: JPEG quality as a 0-1 fraction

    Returns:
        Encoded bytes
    """
    if img.mode in _ALPHA_MODES:
        if img.mode == 'P':
            img = img.convert('RGBA')
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    output_buffer = io.BytesIO()
    img.save(output_buffer, format='JPEG', quality=round(quality * 100), optimize=True)
    return output_buffer.getvalue()


class ImageNormalizer:
    """
    Scales images down to a bound and re-encodes them as JPEG.

    Usage:
        normalizer = ImageNormalizer()
        data = normalizer.normalize(raw_bytes, max_dimension=800, quality=0.7)

        # or with a configured profile
        data = normalizer.normalize_with(raw_bytes, settings.product_profile)
    """

    def normalize(self, image: bytes, max_dimension: int, quality: float) -> bytes:
        """
        Normalize one image.

        Args:
            image: Raw image bytes in any format Pillow can decode
            max_dimension: Bound for the larger of width/height in pixels
            quality: JPEG quality as a fraction in (0, 1]

        Returns:
            JPEG bytes

        Raises:
            ValueError: If max_dimension or quality is out of range
            EncodingError: If the image cannot be decoded or encoded
        """
        if max_dimension <= 0:
            raise ValueError(f"max_dimension must be positive (got {max_dimension})")
        if not 0 < quality <= 1:
            raise ValueError(f"quality must be in (0, 1] (got {quality})")
        if not image:
            raise EncodingError("Image is empty")

        try:
            with Image.open(io.BytesIO(image)) as src:
                src.load()
                oriented = ImageOps.exif_transpose(src)
                width, height = oriented.size
                target = scaled_size(width, height, max_dimension)
                if target != (width, height):
                    oriented = oriented.resize(target, Image.Resampling.LANCZOS)
                data = encode_jpeg(oriented, quality)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise EncodingError(f"Cannot decode image: {e}") from e

        logger.debug("Normalized %dx%d -> %dx%d (%d bytes)",
                     width, height, target[0], target[1], len(data))
        return data

    def normalize_with(self, image: bytes, profile: ImageProfile) -> bytes:
        """Normalize using a configured profile (product or logo)."""
        return self.normalize(image, profile.max_dimension, profile.quality)
