"""
Firestore Value Codec

Converts between plain Python values and the typed JSON value objects used
by the Firestore REST API ({"stringValue": ...}, {"integerValue": "3"}, ...).
"""

from typing import Any, Dict


def encode_value(value: Any) -> Dict[str, Any]:
    """
    Encode one Python value as a Firestore Value object.

    Example:
        >>> encode_value(250)
        {'integerValue': '250'}
        >>> encode_value("tops")
        {'stringValue': 'tops'}
    """
    # bool before int: bool is a subclass of int
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Unsupported Firestore value type: {type(value).__name__}")


def decode_value(value: Dict[str, Any]) -> Any:
    """Decode one Firestore Value object to a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {key: encode_value(val) for key, val in data.items()}


def decode_fields(fields: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {key: decode_value(val) for key, val in fields.items()}


def document_id(name: str) -> str:
    """Extract the id from a full document resource name."""
    return name.rsplit("/", 1)[-1]
