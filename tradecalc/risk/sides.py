from enum import Enum
from typing import Union


_ALIASES = {
    "long": "long",
    "buy": "long",
    "short": "short",
    "sell": "short",
}


class Side(str, Enum):
    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: Union["Side", str]) -> "Side":
        """Coerce a Side or a long/short/buy/sell string (any case) into a Side."""
        if isinstance(value, cls):
            return value
        direction = _ALIASES.get(str(value or "").strip().lower())
        if direction is None:
            raise ValueError(f"side must be 'long' or 'short', got {value!r}")
        return cls(direction)


SideLike = Union[Side, str]
