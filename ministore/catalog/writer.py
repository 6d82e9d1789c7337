"""
Catalog Writer

Creates and deletes product documents in the `products` collection.
"""

import logging
import math
from datetime import datetime
from typing import Callable

from ..common.errors import ValidationError
from ..common.text_utils import to_iso, utc_now
from ..models import ProductAttributes
from ..remote import FirestoreClient

logger = logging.getLogger(__name__)

PRODUCTS_COLLECTION = "products"


def validate_attributes(attributes: ProductAttributes) -> None:
    """
    Check product attributes before any remote call.

    Raises:
        ValidationError: On empty name, missing image URL or a price that is
            not a finite number >= 0
    """
    if not attributes.name or not attributes.name.strip():
        raise ValidationError("name: required")
    if not attributes.image:
        raise ValidationError("image: uploaded image URL required")
    price = attributes.price
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError(f"price: not a number ({price!r})")
    if not math.isfinite(price) or price < 0:
        raise ValidationError(f"price: must be >= 0 (got {price})")


class CatalogWriter:
    """
    Writes catalog records for a store.

    Usage:
        writer = CatalogWriter(client)
        product_id = writer.create_product("store-1", ProductAttributes(
            name="Shirt", price=250.0, image="https://i.ibb.co/x/shirt.jpg"))
    """

    def __init__(self, client: FirestoreClient, clock: Callable[[], datetime] = utc_now):
        self.client = client
        self.clock = clock

    def create_product(self, store_id: str, attributes: ProductAttributes) -> str:
        """
        Create one product document.

        Args:
            store_id: Owning store id
            attributes: Product attributes with an already-uploaded image URL

        Returns:
            The new product id

        Raises:
            ValidationError: If attributes are invalid (no remote call made)
            PersistenceError: If the remote write fails
        """
        if not store_id:
            raise ValidationError("store_id: required")
        validate_attributes(attributes)

        fields = attributes.to_fields(store_id, to_iso(self.clock()))
        product_id = self.client.create_document(PRODUCTS_COLLECTION, fields)
        logger.info("Created product %s: %s", product_id, attributes.name[:50])
        return product_id

    def delete_product(self, product_id: str) -> None:
        """Delete one product document."""
        self.client.delete_document(PRODUCTS_COLLECTION, product_id)
        logger.info("Deleted product %s", product_id)
