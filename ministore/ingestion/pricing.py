"""
Price parsing and the optional flat price boost applied to ingested items.
"""

import math
from dataclasses import dataclass
from typing import Union

from ..common.errors import ValidationError


@dataclass(frozen=True)
class PriceBoostPolicy:
    """Flat markup added to every ingested price when enabled."""
    enabled: bool = False
    amount: float = 50.0

    def final_price(self, base: float) -> float:
        """
        Example:
            >>> PriceBoostPolicy(enabled=True).final_price(200)
            250.0
        """
        return float(base) + self.amount if self.enabled else float(base)


def parse_price(value: Union[str, int, float, None], allow_empty: bool = False) -> float:
    """
    Parse a seller-entered price.

    Args:
        value: Price text or number
        allow_empty: Treat a blank value as 0 instead of an error

    Returns:
        Price as a float >= 0

    Raises:
        ValidationError: Blank (unless allowed), non-numeric, negative or
            non-finite prices
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if allow_empty:
            return 0.0
        raise ValidationError("price: required")

    try:
        price = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise ValidationError(f"price: not a valid number ({value!r})") from None

    if not math.isfinite(price):
        raise ValidationError(f"price: not a valid number ({value!r})")
    if price < 0:
        raise ValidationError(f"price: must be >= 0 (got {price})")
    return price
