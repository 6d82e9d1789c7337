"""
Catalog data models.

Data classes for stores and products plus their mapping to and from
the field layout stored in the document store.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

DEFAULT_THEME_COLOR = "#6366f1"


@dataclass
class Product:
    """
    One catalog entry belonging to a store.

    category is None when the product was created without one (bulk and
    PDF ingestion); an empty string is a category the seller left blank.
    """
    id: str
    store_id: str
    name: str
    price: float
    image: str
    category: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None   # ISO 8601

    @classmethod
    def from_fields(cls, doc_id: str, fields: Dict[str, Any]) -> "Product":
        """Build a Product from a decoded `products` document."""
        price = fields.get("price")
        try:
            price = float(price)
        except (TypeError, ValueError):
            price = 0.0
        return cls(
            id=doc_id,
            store_id=fields.get("storeId", ""),
            name=fields.get("name", ""),
            price=price,
            image=fields.get("image", ""),
            category=fields.get("category"),
            description=fields.get("description"),
            created_at=fields.get("createdAt"),
        )


@dataclass
class ProductAttributes:
    """Attributes for a product that has not been written yet."""
    name: str
    price: float
    image: str
    category: Optional[str] = None
    description: Optional[str] = None

    def to_fields(self, store_id: str, created_at: str) -> Dict[str, Any]:
        """Field layout of a `products` document. category is omitted when None."""
        fields: Dict[str, Any] = {
            "storeId": store_id,
            "name": self.name,
            "price": self.price,
            "description": self.description if self.description is not None else "",
            "image": self.image,
            "createdAt": created_at,
        }
        if self.category is not None:
            fields["category"] = self.category
        return fields


@dataclass
class Store:
    """A seller's catalog namespace with its branding and contact channel."""
    id: str
    name: str
    whatsapp: str = ""
    handle: str = ""
    description: str = ""
    owner_id: str = ""
    theme_color: str = DEFAULT_THEME_COLOR
    logo: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def public_slug(self) -> str:
        """Handle when set, otherwise the raw id."""
        return self.handle or self.id

    @classmethod
    def from_fields(cls, doc_id: str, fields: Dict[str, Any]) -> "Store":
        return cls(
            id=doc_id,
            name=fields.get("name", ""),
            whatsapp=fields.get("whatsapp", ""),
            handle=fields.get("handle") or "",
            description=fields.get("description", ""),
            owner_id=fields.get("ownerId", ""),
            theme_color=fields.get("themeColor") or DEFAULT_THEME_COLOR,
            logo=fields.get("logo"),
            created_at=fields.get("createdAt"),
            updated_at=fields.get("updatedAt"),
        )

    def to_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "name": self.name,
            "handle": self.handle,
            "description": self.description,
            "whatsapp": self.whatsapp,
            "themeColor": self.theme_color,
            "logo": self.logo,
            "ownerId": self.owner_id,
            "updatedAt": self.updated_at,
        }
        if self.created_at:
            fields["createdAt"] = self.created_at
        return fields
