"""
Imaging modules.

Modules:
    normalizer - Scale-down and JPEG re-encoding of uploaded images
    rasterizer - PDF page rendering to JPEG previews
"""

from .normalizer import ImageNormalizer, encode_jpeg, scaled_size
from .rasterizer import DocumentRasterizer

__all__ = [
    'ImageNormalizer',
    'DocumentRasterizer',
    'encode_jpeg',
    'scaled_size',
]
