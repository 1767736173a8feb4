from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, NoReturn, Optional, Tuple

from tradecalc.core.config import Settings, get_settings
from tradecalc.core.logging import get_logger
from tradecalc.risk.errors import ErrorKind, InvalidInputError
from tradecalc.risk.sides import Side, SideLike


logger = get_logger(__name__)


@dataclass(frozen=True)
class PositionPlan:
    side: Side
    size: float
    notional: float
    risk_amount: float
    leverage: int
    entry_price: float
    stop_loss: float
    take_profit: Optional[float] = None
    expected_profit: Optional[float] = None
    expected_profit_pct: Optional[float] = None


@dataclass(frozen=True)
class Calculator:
    """
    Position sizing, leverage, take-profit and PnL math for long/short trades.

    Calculation methods trust their inputs: a zero price distance, balance or
    current price propagates as ``ZeroDivisionError``. Run ``validate_inputs``
    (and ``validate_price_logic`` for limit entries) first when that matters.
    Validation methods return None and raise ``InvalidInputError`` on failure.
    """

    max_leverage: int
    default_rr_ratio: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Calculator":
        """Build a calculator from MAX_LEVERAGE and DEFAULT_RR_RATIO."""
        settings = settings or get_settings()
        return cls(max_leverage=settings.max_leverage, default_rr_ratio=settings.default_rr_ratio)

    def calculate_risk_amount(self, balance: float, risk_percent: float) -> float:
        return balance * (risk_percent / 100)

    def calculate_notional(self, size: float, price: float) -> float:
        return size * price

    def calculate_size(
        self,
        balance: float,
        risk_percent: float,
        entry: float,
        stop_loss: float,
        side: SideLike,
    ) -> float:
        """Size such that hitting the stop loses ``risk_percent`` of ``balance``."""
        direction = Side.parse(side)
        risk_amount = self.calculate_risk_amount(balance, risk_percent)
        if direction is Side.LONG:
            price_distance = entry - stop_loss
        else:
            price_distance = stop_loss - entry
        return risk_amount / price_distance

    def calculate_leverage(self, size: float, price: float, balance: float, max_leverage: int) -> int:
        """
        Whole-number leverage needed to carry ``size`` at ``price`` on ``balance``.

        The raw ratio is rounded half away from zero, raised to at least 1 and
        capped at the ``max_leverage`` argument (not the instance bound).
        """
        raw = self.calculate_notional(size, price) / balance
        # inf and nan never reach the int conversion
        if raw >= max_leverage:
            leverage = max_leverage
        elif raw >= 1:
            leverage = _round_half_away_from_zero(raw)
        else:
            leverage = 1
        if leverage > max_leverage:
            leverage = max_leverage
        return leverage

    def calculate_rr_take_profit(self, entry: float, stop_loss: float, rr_ratio: float, side: SideLike) -> float:
        risk = abs(entry - stop_loss)
        if Side.parse(side) is Side.LONG:
            return entry + risk * rr_ratio
        return entry - risk * rr_ratio

    def calculate_pnl_percent(self, side: SideLike, entry_price: float, mark_price: float) -> float:
        """PnL as a percentage of entry; 0 when there is no entry price."""
        direction = Side.parse(side)
        if entry_price == 0:
            return 0.0
        if direction is Side.LONG:
            return (mark_price - entry_price) / entry_price * 100
        return (entry_price - mark_price) / entry_price * 100

    def calculate_distance_to_price(self, side: SideLike, current_price: float, target_price: float) -> float:
        """Percent move from current to target, positive in the position's favour."""
        if Side.parse(side) is Side.LONG:
            return (target_price - current_price) / current_price * 100
        return (current_price - target_price) / current_price * 100

    def calculate_expected_pnl(
        self,
        side: SideLike,
        entry_price: float,
        exit_price: float,
        size: float,
    ) -> Tuple[float, float]:
        """Return (nominal, percentage) PnL of closing ``size`` at ``exit_price``."""
        direction = Side.parse(side)
        if direction is Side.LONG:
            nominal = (exit_price - entry_price) * size
        else:
            nominal = (entry_price - exit_price) * size
        return nominal, self.calculate_pnl_percent(direction, entry_price, exit_price)

    def validate_price_logic(self, side: SideLike, entry: float, current: float) -> None:
        """Limit entries must rest on the passive side of the current price."""
        direction = Side.parse(side)
        if direction is Side.LONG and not entry < current:
            _reject(
                ErrorKind.INVALID_PRICE_LOGIC,
                f"LONG entry {entry} must be below current price {current}",
                entry,
                side=direction,
                current=current,
            )
        if direction is Side.SHORT and not entry > current:
            _reject(
                ErrorKind.INVALID_PRICE_LOGIC,
                f"SHORT entry {entry} must be above current price {current}",
                entry,
                side=direction,
                current=current,
            )

    def validate_stop_loss(self, side: SideLike, entry: float, stop_loss: float) -> None:
        self._check_stop_loss(Side.parse(side), entry, stop_loss, ErrorKind.INVALID_STOP_LOSS)

    def validate_inputs(
        self,
        side: SideLike,
        entry_price: float,
        stop_loss: float,
        risk_percent: float,
        account_equity: float,
    ) -> None:
        """Fail fast on the first rule broken by a sizing request."""
        direction = Side.parse(side)
        if not entry_price > 0:
            _reject(ErrorKind.INVALID_ENTRY_PRICE, f"entry price must be positive, got {entry_price}", entry_price)
        if not stop_loss > 0:
            _reject(ErrorKind.INVALID_STOP_LOSS, f"stop loss must be positive, got {stop_loss}", stop_loss)
        if not 0 < risk_percent <= 100:
            _reject(
                ErrorKind.INVALID_RISK_PERCENT,
                f"risk percent must be in (0, 100], got {risk_percent}",
                risk_percent,
            )
        if not account_equity > 0:
            _reject(ErrorKind.INVALID_EQUITY, f"account equity must be positive, got {account_equity}", account_equity)
        self._check_stop_loss(direction, entry_price, stop_loss, ErrorKind.INVALID_STOP_LOSS_PLACEMENT)

    def _check_stop_loss(self, side: Side, entry: float, stop_loss: float, kind: ErrorKind) -> None:
        if side is Side.LONG and not stop_loss < entry:
            _reject(kind, f"LONG stop loss {stop_loss} must be below entry {entry}", stop_loss, side=side, entry=entry)
        if side is Side.SHORT and not stop_loss > entry:
            _reject(kind, f"SHORT stop loss {stop_loss} must be above entry {entry}", stop_loss, side=side, entry=entry)

    def plan_position(
        self,
        side: SideLike,
        account_equity: float,
        risk_percent: float,
        entry_price: float,
        stop_loss: float,
        rr_ratio: Optional[float] = None,
    ) -> PositionPlan:
        """
        Validate a trade idea and size it in one step.

        Leverage is clamped to this calculator's own ``max_leverage``. When
        ``rr_ratio`` is given, or the calculator carries a ``default_rr_ratio``,
        the plan also carries the take-profit price and the PnL expected at
        that price.
        """
        direction = Side.parse(side)
        if rr_ratio is None:
            rr_ratio = self.default_rr_ratio
        self.validate_inputs(direction, entry_price, stop_loss, risk_percent, account_equity)
        if rr_ratio is not None and not rr_ratio > 0:
            _reject(ErrorKind.INVALID_RR_RATIO, f"risk-reward ratio must be positive, got {rr_ratio}", rr_ratio)

        size = self.calculate_size(account_equity, risk_percent, entry_price, stop_loss, direction)
        leverage = self.calculate_leverage(size, entry_price, account_equity, self.max_leverage)

        take_profit = expected_profit = expected_profit_pct = None
        if rr_ratio is not None:
            take_profit = self.calculate_rr_take_profit(entry_price, stop_loss, rr_ratio, direction)
            expected_profit, expected_profit_pct = self.calculate_expected_pnl(
                direction, entry_price, take_profit, size
            )

        plan = PositionPlan(
            side=direction,
            size=size,
            notional=self.calculate_notional(size, entry_price),
            risk_amount=self.calculate_risk_amount(account_equity, risk_percent),
            leverage=leverage,
            entry_price=entry_price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            expected_profit=expected_profit,
            expected_profit_pct=expected_profit_pct,
        )
        logger.debug(
            "position_planned",
            extra={
                "event": "position_planned",
                "side": direction.value,
                "size": size,
                "leverage": leverage,
                "take_profit": take_profit,
            },
        )
        return plan


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _reject(kind: ErrorKind, detail: str, value: Any, **context: Any) -> NoReturn:
    logger.debug(
        "validation_rejected",
        extra={"event": "validation_rejected", "kind": kind, "value": value, **context},
    )
    raise InvalidInputError(kind, detail, value)
