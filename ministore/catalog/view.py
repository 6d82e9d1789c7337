"""
Catalog View Engine

Turns a store's full product list and the shopper's search/filter/sort
controls into the ordered list to display, plus the derived "new" badge
and the WhatsApp order link for each product.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional
from urllib.parse import quote

from ..common.text_utils import format_price, parse_timestamp, utc_now
from ..models import DEFAULT_THEME_COLOR, Product, Store

ALL_CATEGORIES = "all"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


class SortMode(str, Enum):
    NEWEST = "newest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


@dataclass
class ViewQuery:
    """Shopper controls. category is a category name or "all"."""
    search_text: str = ""
    category: str = ALL_CATEGORIES
    sort: SortMode = SortMode.NEWEST

    def __post_init__(self):
        # Accept plain strings from the CLI; unknown modes raise ValueError
        self.sort = SortMode(self.sort)


@dataclass
class ProductCard:
    """One product as shown on the storefront."""
    product: Product
    is_new: bool
    price_label: str
    order_link: str


@dataclass
class StorefrontPage:
    """
    Everything needed to render one store's public page.

    theme_color is carried here explicitly so renderers never read or
    mutate shared styling state.
    """
    store: Store
    theme_color: str
    categories: List[str]
    query: ViewQuery
    cards: List[ProductCard] = field(default_factory=list)
    contact_link: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.cards


def _created_at_key(product: Product) -> datetime:
    return parse_timestamp(product.created_at) or _EPOCH


class CatalogViewEngine:
    """
    Filtering, sorting and display helpers for a public storefront.

    Usage:
        engine = CatalogViewEngine()
        visible = engine.view(products, ViewQuery(search_text="shi", sort="price-desc"))
        page = engine.build_storefront(store, products, query, page_url)
    """

    def __init__(
        self,
        new_badge_days: int = 7,
        currency_symbol: str = "₹",
        default_theme_color: str = DEFAULT_THEME_COLOR,
    ):
        self.new_badge_window = timedelta(days=new_badge_days)
        self.currency_symbol = currency_symbol
        self.default_theme_color = default_theme_color

    # ── Filtering ────────────────────────────────────────────────────────────

    @staticmethod
    def matches_search(product: Product, search_text: str) -> bool:
        """Case-insensitive substring match on name or description."""
        needle = search_text.lower()
        if needle in (product.name or "").lower():
            return True
        return bool(product.description) and needle in product.description.lower()

    @staticmethod
    def matches_category(product: Product, category: str) -> bool:
        return category == ALL_CATEGORIES or product.category == category

    def filter(self, products: List[Product], query: ViewQuery) -> List[Product]:
        return [
            p for p in products
            if self.matches_search(p, query.search_text)
            and self.matches_category(p, query.category)
        ]

    # ── Sorting ──────────────────────────────────────────────────────────────

    @staticmethod
    def sort(products: List[Product], mode: SortMode) -> List[Product]:
        """
        Stable sort by the given mode.

        Products without a (parseable) creation time sort as the oldest.
        """
        mode = SortMode(mode)
        if mode is SortMode.NEWEST:
            return sorted(products, key=_created_at_key, reverse=True)
        if mode is SortMode.PRICE_ASC:
            return sorted(products, key=lambda p: p.price)
        return sorted(products, key=lambda p: p.price, reverse=True)

    def view(self, products: List[Product], query: ViewQuery) -> List[Product]:
        """Filter then sort."""
        return self.sort(self.filter(products, query), query.sort)

    @staticmethod
    def categories(products: List[Product]) -> List[str]:
        """Category buttons: "all" then distinct non-empty categories, first-seen order."""
        seen: List[str] = []
        for product in products:
            if product.category and product.category not in seen:
                seen.append(product.category)
        return [ALL_CATEGORIES] + seen

    # ── Display flags ────────────────────────────────────────────────────────

    def is_new(self, product: Product, now: Optional[datetime] = None) -> bool:
        created = parse_timestamp(product.created_at)
        if created is None:
            return False
        now = now or utc_now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - created <= self.new_badge_window

    def price_label(self, price: float) -> str:
        return f"{self.currency_symbol}{format_price(price)}"

    # ── Ordering ─────────────────────────────────────────────────────────────

    def order_message(self, product: Product, store: Store, page_url: str) -> str:
        return (
            f"Hi {store.name}, I want to order:\n\n"
            f"*{product.name}*\n"
            f"Price: {self.price_label(product.price)}\n\n"
            f"Link: {page_url}"
        )

    @staticmethod
    def order_link(store: Store, message: str = "") -> str:
        """
        WhatsApp deep link for the store's number.

        Non-digits are dropped from the number; the message is encoded the
        way encodeURIComponent does it.
        """
        digits = re.sub(r"\D", "", store.whatsapp or "")
        link = f"https://wa.me/{digits}"
        if message:
            link += "?text=" + quote(message, safe=_URI_COMPONENT_SAFE)
        return link

    # ── Page assembly ────────────────────────────────────────────────────────

    def build_storefront(
        self,
        store: Store,
        products: List[Product],
        query: ViewQuery,
        page_url: str,
        now: Optional[datetime] = None,
    ) -> StorefrontPage:
        now = now or utc_now()
        cards = [
            ProductCard(
                product=p,
                is_new=self.is_new(p, now),
                price_label=self.price_label(p.price),
                order_link=self.order_link(store, self.order_message(p, store, page_url)),
            )
            for p in self.view(products, query)
        ]
        return StorefrontPage(
            store=store,
            theme_color=store.theme_color or self.default_theme_color,
            categories=self.categories(products),
            query=query,
            cards=cards,
            contact_link=self.order_link(store),
        )
