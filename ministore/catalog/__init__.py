"""
Catalog modules.

Modules:
    writer - Product document creation and deletion
    directory - Store lookup by id/handle/owner, store settings, product listing
    view - Storefront search, category filter, sorting, badges and order links
"""

from .directory import STORES_COLLECTION, StoreDirectory
from .view import (
    ALL_CATEGORIES,
    CatalogViewEngine,
    ProductCard,
    SortMode,
    StorefrontPage,
    ViewQuery,
)
from .writer import PRODUCTS_COLLECTION, CatalogWriter, validate_attributes

__all__ = [
    # Writer
    'CatalogWriter',
    'PRODUCTS_COLLECTION',
    'validate_attributes',
    # Directory
    'StoreDirectory',
    'STORES_COLLECTION',
    # View
    'CatalogViewEngine',
    'ViewQuery',
    'SortMode',
    'ProductCard',
    'StorefrontPage',
    'ALL_CATEGORIES',
]
