"""Tests for ministore/catalog/view.py"""

from datetime import timedelta
from urllib.parse import unquote

import pytest

from ministore.catalog.view import (
    ALL_CATEGORIES,
    CatalogViewEngine,
    SortMode,
    ViewQuery,
)
from ministore.models import Product

from conftest import NOW, iso


@pytest.fixture
def engine():
    return CatalogViewEngine(new_badge_days=7, currency_symbol="₹")


def _product(pid, name, price, category=None, created_at=None, description=None):
    return Product(id=pid, store_id="store-1", name=name, price=price,
                   image=f"https://i.ibb.co/{pid}.jpg", category=category,
                   description=description, created_at=created_at)


def _names(products):
    return [p.name for p in products]


class TestView:
    def test_price_desc_over_all_categories(self, engine, scenario_products):
        query = ViewQuery(search_text="", category="all", sort="price-desc")
        assert _names(engine.view(scenario_products, query)) == ["Pants", "Shirt"]

    def test_search_then_newest(self, engine, scenario_products):
        query = ViewQuery(search_text="shi", category="all", sort="newest")
        assert _names(engine.view(scenario_products, query)) == ["Shirt"]

    def test_price_asc(self, engine, scenario_products):
        query = ViewQuery(sort=SortMode.PRICE_ASC)
        assert _names(engine.view(scenario_products, query)) == ["Shirt", "Pants"]

    def test_newest_first(self, engine, scenario_products):
        assert _names(engine.view(list(reversed(scenario_products)), ViewQuery())) == ["Shirt", "Pants"]

    def test_category_filter(self, engine, scenario_products):
        query = ViewQuery(category="bottoms")
        assert _names(engine.view(scenario_products, query)) == ["Pants"]

    def test_all_category_keeps_uncategorized(self, engine):
        products = [_product("a", "Bag", 100), _product("b", "Belt", 50, category="accessories")]
        assert len(engine.view(products, ViewQuery(category=ALL_CATEGORIES))) == 2

    def test_empty_search_matches_everything(self, engine, scenario_products):
        assert len(engine.view(scenario_products, ViewQuery(search_text=""))) == 2

    def test_no_matches(self, engine, scenario_products):
        assert engine.view(scenario_products, ViewQuery(search_text="saree")) == []

    def test_unknown_sort_rejected(self):
        with pytest.raises(ValueError):
            ViewQuery(sort="alphabetical")


class TestFilter:
    def test_search_is_case_insensitive(self, engine, scenario_products):
        assert _names(engine.filter(scenario_products, ViewQuery(search_text="PANTS"))) == ["Pants"]

    def test_search_matches_description(self, engine):
        products = [_product("a", "Catalog Item 3", 0, description="Page 3 of summer.pdf")]
        assert len(engine.filter(products, ViewQuery(search_text="summer"))) == 1

    def test_missing_description_is_not_a_match(self, engine):
        products = [_product("a", "Scarf", 10, description=None)]
        assert engine.filter(products, ViewQuery(search_text="silk")) == []

    def test_category_match_is_exact(self, engine):
        products = [_product("a", "Top", 10, category="tops")]
        assert engine.filter(products, ViewQuery(category="Tops")) == []

    def test_predicates_commute(self, engine):
        products = [
            _product("a", "Red Shirt", 10, category="tops"),
            _product("b", "Red Pants", 20, category="bottoms"),
            _product("c", "Blue Shirt", 30, category="tops"),
        ]
        by_search = [p for p in products if engine.matches_search(p, "red")]
        search_then_category = [p for p in by_search if engine.matches_category(p, "tops")]
        by_category = [p for p in products if engine.matches_category(p, "tops")]
        category_then_search = [p for p in by_category if engine.matches_search(p, "red")]
        assert search_then_category == category_then_search == [products[0]]


class TestSort:
    def test_price_ties_keep_input_order(self, engine):
        products = [_product("a", "A", 100), _product("b", "B", 100), _product("c", "C", 50)]
        assert _names(engine.sort(products, SortMode.PRICE_ASC)) == ["C", "A", "B"]
        assert _names(engine.sort(products, SortMode.PRICE_DESC)) == ["A", "B", "C"]

    def test_sort_is_idempotent(self, engine, scenario_products):
        once = engine.sort(scenario_products, SortMode.PRICE_ASC)
        assert engine.sort(once, SortMode.PRICE_ASC) == once

    def test_desc_is_reverse_of_asc_for_distinct_prices(self, engine):
        products = [_product("a", "A", 30), _product("b", "B", 10), _product("c", "C", 20)]
        asc = engine.sort(products, SortMode.PRICE_ASC)
        assert engine.sort(products, SortMode.PRICE_DESC) == list(reversed(asc))

    def test_missing_created_at_sorts_oldest(self, engine):
        products = [
            _product("a", "Undated", 10),
            _product("b", "Dated", 10, created_at=iso(NOW)),
        ]
        assert _names(engine.sort(products, SortMode.NEWEST)) == ["Dated", "Undated"]

    def test_does_not_mutate_input(self, engine, scenario_products):
        before = list(scenario_products)
        engine.sort(scenario_products, SortMode.PRICE_DESC)
        assert scenario_products == before


class TestCategories:
    def test_all_first_then_first_seen(self, engine):
        products = [
            _product("a", "A", 1, category="tops"),
            _product("b", "B", 1),
            _product("c", "C", 1, category="bottoms"),
            _product("d", "D", 1, category="tops"),
            _product("e", "E", 1, category=""),
        ]
        assert engine.categories(products) == ["all", "tops", "bottoms"]

    def test_no_products(self, engine):
        assert engine.categories([]) == ["all"]


class TestNewBadge:
    def test_created_now_is_new(self, engine):
        assert engine.is_new(_product("a", "A", 1, created_at=iso(NOW)), now=NOW)

    def test_created_eight_days_ago_is_not_new(self, engine):
        product = _product("a", "A", 1, created_at=iso(NOW - timedelta(days=8)))
        assert not engine.is_new(product, now=NOW)

    def test_exactly_seven_days_is_new(self, engine):
        product = _product("a", "A", 1, created_at=iso(NOW - timedelta(days=7)))
        assert engine.is_new(product, now=NOW)

    def test_missing_timestamp_is_not_new(self, engine):
        assert not engine.is_new(_product("a", "A", 1), now=NOW)

    def test_configurable_window(self):
        engine = CatalogViewEngine(new_badge_days=30)
        product = _product("a", "A", 1, created_at=iso(NOW - timedelta(days=10)))
        assert engine.is_new(product, now=NOW)


class TestOrdering:
    def test_price_label(self, engine):
        assert engine.price_label(200.0) == "₹200"
        assert engine.price_label(249.5) == "₹249.5"

    def test_order_message_contents(self, engine, store, scenario_products):
        message = engine.order_message(scenario_products[0], store, "https://ministore.com/s/asha-boutique")
        assert message == (
            "Hi Asha Boutique, I want to order:\n\n"
            "*Shirt*\n"
            "Price: ₹200\n\n"
            "Link: https://ministore.com/s/asha-boutique"
        )

    def test_order_link_strips_phone_formatting(self, engine, store):
        assert engine.order_link(store) == "https://wa.me/919876543210"

    def test_order_link_encodes_message(self, engine, store):
        link = engine.order_link(store, "Hi, *Shirt* & more\nPrice: ₹200")
        prefix = "https://wa.me/919876543210?text="
        assert link.startswith(prefix)
        encoded = link[len(prefix):]
        assert " " not in encoded and "\n" not in encoded and "&" not in encoded
        assert "%20" in encoded and "%0A" in encoded and "%26" in encoded
        assert "*Shirt*" in encoded
        assert unquote(encoded) == "Hi, *Shirt* & more\nPrice: ₹200"


class TestBuildStorefront:
    def test_page_carries_theme_and_cards(self, engine, store, scenario_products):
        page = engine.build_storefront(
            store, scenario_products, ViewQuery(sort="price-desc"),
            "https://ministore.com/s/asha-boutique", now=NOW,
        )
        assert page.theme_color == "#ff6600"
        assert page.categories == ["all", "tops", "bottoms"]
        assert [c.product.name for c in page.cards] == ["Pants", "Shirt"]
        assert [c.is_new for c in page.cards] == [False, True]
        assert page.cards[1].price_label == "₹200"
        assert page.cards[1].order_link.startswith("https://wa.me/919876543210?text=Hi%20Asha%20Boutique")
        assert page.contact_link == "https://wa.me/919876543210"
        assert not page.is_empty

    def test_categories_come_from_full_list(self, engine, store, scenario_products):
        page = engine.build_storefront(
            store, scenario_products, ViewQuery(search_text="zzz"), "u", now=NOW,
        )
        assert page.is_empty
        assert page.categories == ["all", "tops", "bottoms"]

    def test_blank_store_theme_uses_configured_default(self, store, scenario_products):
        store.theme_color = ""
        engine = CatalogViewEngine(default_theme_color="#112233")
        page = engine.build_storefront(store, scenario_products, ViewQuery(), "u", now=NOW)
        assert page.theme_color == "#112233"
