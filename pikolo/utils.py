import functools
import time
from decimal import Context, Decimal, ROUND_DOWN, localcontext
from typing import Any, Callable, TypeVar

# Wei-scale values at BTC prices need more than the 28-digit default.
# Entered per call: decimal contexts are thread-local.
DECIMAL_CONTEXT = Context(prec=40)

F = TypeVar('F', bound=Callable[..., Any])

WEI_DECIMALS = 18
WEI = 10 ** WEI_DECIMALS
USD_DECIMALS = 2
SHARE_DECIMALS = 4
PRICE_DECIMALS = 4
BPS_DENOMINATOR = 10000

def with_decimal_context(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with localcontext(DECIMAL_CONTEXT):
            return func(*args, **kwargs)
    return wrapper  # type: ignore[return-value]

def get_current_seconds() -> int:
    return int(time.time())

def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

@with_decimal_context
def from_wei(amount: int) -> Decimal:
    """Converts an 18-decimal fixed-point integer to a Decimal in whole units."""
    return Decimal(amount) / Decimal(WEI)

@with_decimal_context
def to_wei(amount: float | str | Decimal) -> int:
    """Converts whole units to an 18-decimal fixed-point integer, truncating dust."""
    scaled = to_decimal(amount) * Decimal(WEI)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))

@with_decimal_context
def usd_amount(amount: float | str | Decimal) -> Decimal:
    return to_decimal(amount).quantize(Decimal(f'1e-{USD_DECIMALS}'))

@with_decimal_context
def share_amount(amount: float | str | Decimal) -> Decimal:
    return to_decimal(amount).quantize(Decimal(f'1e-{SHARE_DECIMALS}'))

@with_decimal_context
def price_value(p: float | str | Decimal) -> Decimal:
    return to_decimal(p).quantize(Decimal(f'1e-{PRICE_DECIMALS}'))

def validate_amount(value: int, name: str = 'amount') -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid {name}: {value!r}. Must be an integer wei amount.")
    if value < 0:
        raise ValueError(f"Invalid {name}: {value}. Must be non-negative.")

def validate_reserve(value: int, name: str = 'reserve') -> None:
    validate_amount(value, name)

def validate_fee_bps(fee_bps: int) -> None:
    if isinstance(fee_bps, bool) or not isinstance(fee_bps, int):
        raise ValueError(f"Invalid fee_bps: {fee_bps!r}. Must be an integer.")
    if not (0 <= fee_bps < BPS_DENOMINATOR):
        raise ValueError(f"Invalid fee_bps: {fee_bps}. Must be in [0, {BPS_DENOMINATOR}).")

def validate_number(value: Any, name: str = 'value') -> Decimal:
    """Coerces to Decimal, rejecting NaN, infinities and negatives."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid {name}: {value!r}.")
    try:
        d = to_decimal(value)
    except ArithmeticError:
        raise ValueError(f"Invalid {name}: {value!r}. Must be numeric.")
    if not d.is_finite():
        raise ValueError(f"Invalid {name}: {value}. Must be finite.")
    if d < 0:
        raise ValueError(f"Invalid {name}: {value}. Must be non-negative.")
    return d

def ceil_div(num: int, den: int) -> int:
    return -(-num // den)
