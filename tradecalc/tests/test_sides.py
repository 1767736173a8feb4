import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tradecalc.risk.errors import ErrorKind, InvalidInputError  # noqa: E402
from tradecalc.risk.sides import Side  # noqa: E402


def test_side_is_closed():
    assert [s.name for s in Side] == ["LONG", "SHORT"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (Side.LONG, Side.LONG),
        ("long", Side.LONG),
        (" LONG ", Side.LONG),
        ("buy", Side.LONG),
        ("Short", Side.SHORT),
        ("SELL", Side.SHORT),
    ],
)
def test_parse(value, expected):
    assert Side.parse(value) is expected


@pytest.mark.parametrize("value", ["", "flat", None, 1])
def test_parse_rejects_unknown(value):
    with pytest.raises(ValueError):
        Side.parse(value)


def test_invalid_input_error_carries_kind_and_value():
    err = InvalidInputError(ErrorKind.INVALID_EQUITY, "account equity must be positive, got 0", 0)
    assert err.kind is ErrorKind.INVALID_EQUITY
    assert err.value == 0
    assert str(err) == "account equity must be positive, got 0"
    assert "INVALID_EQUITY" in repr(err)
