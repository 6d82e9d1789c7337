"""Tests for ministore/models/records.py and assets.py"""

from ministore.models import Product, ProductAttributes, SourceAsset, Store
from ministore.models.records import DEFAULT_THEME_COLOR


class TestProduct:
    def test_from_fields(self):
        product = Product.from_fields("p1", {
            "storeId": "store-1",
            "name": "Shirt",
            "price": 200,
            "image": "https://i.ibb.co/1/shirt.jpg",
            "category": "tops",
            "createdAt": "2024-06-01T12:00:00.000Z",
        })
        assert product.id == "p1"
        assert product.price == 200.0
        assert isinstance(product.price, float)
        assert product.description is None

    def test_bad_price_reads_as_zero(self):
        assert Product.from_fields("p1", {"price": "n/a"}).price == 0.0
        assert Product.from_fields("p1", {}).price == 0.0


class TestProductAttributes:
    def test_to_fields_without_category(self):
        fields = ProductAttributes(name="Catalog Item 1", price=0.0, image="u").to_fields(
            "store-1", "2024-06-01T12:00:00.000Z")
        assert fields == {
            "storeId": "store-1",
            "name": "Catalog Item 1",
            "price": 0.0,
            "description": "",
            "image": "u",
            "createdAt": "2024-06-01T12:00:00.000Z",
        }

    def test_blank_category_is_kept(self):
        fields = ProductAttributes(name="A", price=1.0, image="u", category="").to_fields("s", "t")
        assert fields["category"] == ""


class TestStore:
    def test_public_slug_prefers_handle(self, store):
        assert store.public_slug == "asha-boutique"
        store.handle = ""
        assert store.public_slug == "store-1"

    def test_field_round_trip(self, store):
        store.created_at = "2024-01-01T00:00:00.000Z"
        assert Store.from_fields(store.id, store.to_fields()) == store

    def test_missing_theme_uses_default(self):
        assert Store.from_fields("s1", {"name": "Plain", "themeColor": ""}).theme_color == DEFAULT_THEME_COLOR


class TestSourceAsset:
    def test_from_path(self, tmp_path):
        path = tmp_path / "shirt.jpg"
        path.write_bytes(b"\xff\xd8data")
        asset = SourceAsset.from_path(path)
        assert asset.filename == "shirt.jpg"
        assert asset.data == b"\xff\xd8data"

    def test_repr_hides_bytes(self):
        assert repr(SourceAsset("a.png", b"12345")) == "SourceAsset(filename='a.png', size=5)"
