from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_PRICE_LOGIC = "invalid_price_logic"
    INVALID_STOP_LOSS = "invalid_stop_loss"
    INVALID_STOP_LOSS_PLACEMENT = "invalid_stop_loss_placement"
    INVALID_ENTRY_PRICE = "invalid_entry_price"
    INVALID_RISK_PERCENT = "invalid_risk_percent"
    INVALID_EQUITY = "invalid_equity"
    INVALID_RR_RATIO = "invalid_rr_ratio"


class CalculatorError(Exception):
    """Base class for errors raised by the trade calculator."""


class InvalidInputError(CalculatorError):
    """Raised when a validation rule rejects its inputs."""

    def __init__(self, kind: ErrorKind, detail: str, value: Any = None) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.value = value

    def __repr__(self) -> str:
        return f"InvalidInputError(kind={self.kind.name}, detail={self.detail!r}, value={self.value!r})"
