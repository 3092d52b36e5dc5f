from decimal import Decimal

from pikolo.utils import BPS_DENOMINATOR, validate_amount, with_decimal_context


@with_decimal_context
def calculate_slippage_pct(expected_amount: int, actual_amount: int) -> Decimal:
    """
    Absolute deviation of actual from expected, as a percentage with two implied decimals.
    A zero expected amount has no meaningful slippage and reports 0.
    """
    validate_amount(expected_amount, 'expected_amount')
    validate_amount(actual_amount, 'actual_amount')
    if expected_amount == 0:
        return Decimal('0')
    diff = abs(expected_amount - actual_amount)
    return Decimal(diff * BPS_DENOMINATOR // expected_amount) / 100


def apply_slippage_tolerance(amount_out: int, slippage_bps: int) -> int:
    """Minimum acceptable output for a quoted amount_out."""
    validate_amount(amount_out, 'amount_out')
    if not (0 <= slippage_bps <= BPS_DENOMINATOR):
        raise ValueError(f"Invalid slippage_bps: {slippage_bps}. Must be in [0, {BPS_DENOMINATOR}].")
    return amount_out * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def is_slippage_acceptable(slippage_pct: Decimal, tolerance_pct: float) -> bool:
    return Decimal(str(slippage_pct)) <= Decimal(str(tolerance_pct))
