"""
Data models for stores, products and ingestion inputs.
"""

from .assets import RasterizedPage, SourceAsset
from .records import DEFAULT_THEME_COLOR, Product, ProductAttributes, Store

__all__ = [
    'DEFAULT_THEME_COLOR',
    'Product',
    'ProductAttributes',
    'Store',
    'SourceAsset',
    'RasterizedPage',
]
