"""
Borrowing-power previews for BTC-collateralized MUSD loans (troves).

These are "what if" estimates in Decimal. The authoritative figures always
come from the lending protocol after the transaction is mined.
"""
from decimal import Decimal
from typing import Any, Dict

from pikolo.utils import BPS_DENOMINATOR, from_wei, usd_amount, validate_number, with_decimal_context
from .params import (
    DEFAULT_BORROWING_FEE_BPS,
    DEFAULT_LTV,
    LIQUIDATION_FEE_DEPOSIT,
    MINIMUM_COLLATERAL_RATIO,
    RECOMMENDED_COLLATERAL_RATIO,
)
from .state import BorrowingFees, BorrowPosition, BorrowPreview

INFINITY = Decimal('Infinity')


def minimum_collateralization_ratio() -> int:
    return MINIMUM_COLLATERAL_RATIO


def recommended_collateralization_ratio() -> int:
    return RECOMMENDED_COLLATERAL_RATIO


def _validate_ratio(ratio_pct: Any, name: str = 'collateralization ratio') -> Decimal:
    ratio = validate_number(ratio_pct, name)
    if ratio == 0:
        raise ValueError(f"Invalid {name}: {ratio_pct}. Must be positive.")
    return ratio


@with_decimal_context
def calculate_borrow_amount(btc_amount: Any, btc_price_usd: Any, collateralization_ratio_pct: Any) -> Decimal:
    """
    MUSD that can be borrowed against btc_amount at the given ratio.
    Ratios at or below the minimum are still computed; flagging them is the caller's job.
    """
    btc = validate_number(btc_amount, 'btc_amount')
    price = validate_number(btc_price_usd, 'btc_price_usd')
    ratio = _validate_ratio(collateralization_ratio_pct)
    return (btc * price) / (ratio / 100)


@with_decimal_context
def calculate_liquidation_price(btc_price_usd: Any, borrow_amount_usd: Any, btc_amount: Any,
                                min_collateralization_ratio_pct: Any = MINIMUM_COLLATERAL_RATIO) -> Decimal:
    """
    BTC price at which the position reaches the minimum ratio.
    Without collateral there is no such price: returns Decimal('Infinity').
    """
    validate_number(btc_price_usd, 'btc_price_usd')
    borrow = validate_number(borrow_amount_usd, 'borrow_amount_usd')
    btc = validate_number(btc_amount, 'btc_amount')
    mcr = _validate_ratio(min_collateralization_ratio_pct, 'minimum collateralization ratio')
    if btc == 0:
        return INFINITY
    return (borrow * mcr / 100) / btc


@with_decimal_context
def calculate_borrowing_fees(borrow_amount_usd: Any, fee_rate_bps: int = DEFAULT_BORROWING_FEE_BPS) -> BorrowingFees:
    borrow = validate_number(borrow_amount_usd, 'borrow_amount_usd')
    if not (0 <= fee_rate_bps < BPS_DENOMINATOR):
        raise ValueError(f"Invalid fee_rate_bps: {fee_rate_bps}. Must be in [0, {BPS_DENOMINATOR}).")
    issuance_fee = borrow * Decimal(fee_rate_bps) / BPS_DENOMINATOR
    # Refundable gas compensation, kept apart from the issuance fee
    deposit = Decimal(LIQUIDATION_FEE_DEPOSIT)
    return {
        'issuance_fee': issuance_fee,
        'liquidation_fee_deposit': deposit,
        'total_fees': issuance_fee + deposit,
    }


@with_decimal_context
def calculate_collateralization_ratio(btc_amount: Any, btc_price_usd: Any, borrow_amount_usd: Any) -> Decimal:
    btc = validate_number(btc_amount, 'btc_amount')
    price = validate_number(btc_price_usd, 'btc_price_usd')
    borrow = validate_number(borrow_amount_usd, 'borrow_amount_usd')
    collateral_value = btc * price
    if borrow == 0:
        return INFINITY if collateral_value > 0 else Decimal('0')
    return collateral_value / borrow * 100


@with_decimal_context
def calculate_max_borrowable(collateral_value_usd: Any, ltv: Any = DEFAULT_LTV) -> Decimal:
    value = validate_number(collateral_value_usd, 'collateral_value_usd')
    loan_to_value = validate_number(ltv, 'ltv')
    if loan_to_value > 1:
        raise ValueError(f"Invalid ltv: {ltv}. Must be at most 1.")
    return value * loan_to_value


@with_decimal_context
def calculate_liquidation_price_buffer(current_price_usd: Any, liquidation_price_usd: Any) -> Decimal:
    """How far, in percent of the liquidation price, BTC can fall before liquidation. Never negative."""
    current = validate_number(current_price_usd, 'current_price_usd')
    liquidation = Decimal(str(liquidation_price_usd))
    if current == 0 or liquidation <= 0 or not liquidation.is_finite():
        return Decimal('0')
    buffer = (current - liquidation) / liquidation * 100
    return max(Decimal('0'), buffer)


@with_decimal_context
def calculate_profit_loss(shares: Any, entry_price: Any, current_price: Any) -> Dict[str, Decimal]:
    qty = validate_number(shares, 'shares')
    entry_value = qty * validate_number(entry_price, 'entry_price')
    current_value = qty * validate_number(current_price, 'current_price')
    absolute = current_value - entry_value
    percent = absolute / entry_value * 100 if entry_value > 0 else Decimal('0')
    return {'absolute': usd_amount(absolute), 'percent': usd_amount(percent)}


@with_decimal_context
def preview_borrow(position: BorrowPosition, fee_rate_bps: int = DEFAULT_BORROWING_FEE_BPS) -> BorrowPreview:
    """
    Borrow capacity left at the requested ratio, and the resulting loan's risk figures.
    """
    btc = from_wei(position['btc_collateral'])
    price = from_wei(position['btc_price_usd'])
    existing_debt = from_wei(position['borrowed_amount'])

    capacity = calculate_borrow_amount(btc, price, position['collateralization_ratio_pct'])
    borrow_amount = max(Decimal('0'), capacity - existing_debt)
    total_debt = existing_debt + borrow_amount

    collateral_ratio = calculate_collateralization_ratio(btc, price, total_debt)
    return {
        'borrow_amount': borrow_amount,
        'liquidation_price': calculate_liquidation_price(price, total_debt, btc),
        'collateral_ratio': collateral_ratio,
        'fees': calculate_borrowing_fees(borrow_amount, fee_rate_bps),
        'below_minimum': collateral_ratio <= MINIMUM_COLLATERAL_RATIO,
        'below_recommended': collateral_ratio < RECOMMENDED_COLLATERAL_RATIO,
    }
