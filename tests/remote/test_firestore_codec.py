"""Tests for ministore/remote/firestore_codec.py"""

import pytest

from ministore.remote.firestore_codec import (
    decode_fields,
    decode_value,
    document_id,
    encode_fields,
    encode_value,
)


class TestEncodeValue:
    def test_scalars(self):
        assert encode_value(None) == {"nullValue": None}
        assert encode_value("tops") == {"stringValue": "tops"}
        assert encode_value(250) == {"integerValue": "250"}
        assert encode_value(249.5) == {"doubleValue": 249.5}

    def test_bool_is_not_integer(self):
        assert encode_value(True) == {"booleanValue": True}

    def test_nested(self):
        encoded = encode_value({"tags": ["new", 1]})
        assert encoded == {
            "mapValue": {"fields": {"tags": {"arrayValue": {"values": [
                {"stringValue": "new"},
                {"integerValue": "1"},
            ]}}}}
        }

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode_value(object())


class TestDecodeValue:
    def test_integer_string_becomes_int(self):
        assert decode_value({"integerValue": "250"}) == 250

    def test_timestamp_kept_as_text(self):
        assert decode_value({"timestampValue": "2024-06-01T12:00:00Z"}) == "2024-06-01T12:00:00Z"

    def test_empty_array_and_map(self):
        assert decode_value({"arrayValue": {}}) == []
        assert decode_value({"mapValue": {}}) == {}

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            decode_value({"geoPointValue": {}})


class TestFields:
    def test_product_fields_survive(self):
        fields = {"storeId": "store-1", "name": "Shirt", "price": 200.0, "category": None}
        assert decode_fields(encode_fields(fields)) == fields

    def test_document_id(self):
        name = "projects/demo/databases/(default)/documents/products/abc123"
        assert document_id(name) == "abc123"
