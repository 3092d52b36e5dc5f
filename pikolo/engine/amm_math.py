from decimal import Decimal
from typing import Tuple

from pikolo.utils import (
    BPS_DENOMINATOR,
    ceil_div,
    price_value,
    validate_amount,
    validate_fee_bps,
    validate_reserve,
    with_decimal_context,
)
from .params import DEFAULT_FEE_BPS, UNAFFORDABLE
from .state import ReservePair, Side, TradeEstimate, TradeQuote
from .slippage import calculate_slippage_pct


def _validate_pool(reserve_in: int, reserve_out: int, fee_bps: int) -> None:
    validate_reserve(reserve_in, 'reserve_in')
    validate_reserve(reserve_out, 'reserve_out')
    validate_fee_bps(fee_bps)


def _normalize_side(side: str) -> Side:
    if not isinstance(side, str):
        raise ValueError(f"Invalid side: {side!r}. Must be 'yes' or 'no'.")
    s = side.lower()
    if s not in ('yes', 'no'):
        raise ValueError(f"Invalid side: {side!r}. Must be 'yes' or 'no'.")
    return s


def quote_shares_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS) -> int:
    """
    Shares received for spending amount_in against the pool.
    sharesOut = amountInWithFee * reserveOut / (reserveIn + amountInWithFee), truncating.
    An empty pool trades 1:1 (initial liquidity).
    """
    validate_amount(amount_in, 'amount_in')
    _validate_pool(reserve_in, reserve_out, fee_bps)

    if reserve_in == 0 or reserve_out == 0:
        return amount_in

    amount_in_with_fee = amount_in * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in + amount_in_with_fee
    if denominator == 0:
        return 0
    return numerator // denominator


def quote_amount_in(shares_out: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS) -> int:
    """
    Amount that must be spent to receive shares_out. Rounded up so the quote is always sufficient.
    Returns UNAFFORDABLE when the request would take the whole reserve or more.
    An empty input reserve prices 1:1, as quote_shares_out does.
    """
    validate_amount(shares_out, 'shares_out')
    _validate_pool(reserve_in, reserve_out, fee_bps)

    if reserve_out == 0 or shares_out >= reserve_out:
        return UNAFFORDABLE
    if reserve_in == 0:
        return shares_out

    numerator = reserve_in * shares_out * BPS_DENOMINATOR
    denominator = (reserve_out - shares_out) * (BPS_DENOMINATOR - fee_bps)
    return ceil_div(numerator, denominator)


def quote_amount_out(shares_in: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS) -> int:
    """Collateral received for selling shares_in; reserve_in is the share side being sold into."""
    validate_amount(shares_in, 'shares_in')
    _validate_pool(reserve_in, reserve_out, fee_bps)

    if shares_in == 0 or reserve_in == 0 or reserve_out == 0:
        return 0
    # Cannot sell the entire reserve
    if shares_in >= reserve_in:
        return 0

    shares_in_with_fee = shares_in * (BPS_DENOMINATOR - fee_bps) // BPS_DENOMINATOR
    numerator = shares_in_with_fee * reserve_out
    denominator = reserve_in + shares_in_with_fee
    if denominator == 0:
        return 0
    return numerator // denominator


@with_decimal_context
def current_price(reserve_yes: int, reserve_no: int, side: str) -> Decimal:
    """
    Implied probability of a side: the opposite reserve's share of the pool.
    An uninitialized pool is priced at even odds.
    """
    validate_reserve(reserve_yes, 'reserve_yes')
    validate_reserve(reserve_no, 'reserve_no')
    s = _normalize_side(side)

    total = reserve_yes + reserve_no
    if total == 0:
        return Decimal('0.5')
    opposite = reserve_no if s == 'yes' else reserve_yes
    return Decimal(opposite) / Decimal(total)


@with_decimal_context
def price_to_probability(price: Decimal) -> Decimal:
    return Decimal(str(price)) * 100


@with_decimal_context
def probability_to_price(probability: Decimal) -> Decimal:
    return Decimal(str(probability)) / 100


def reserves_for_buy(reserves: ReservePair, side: str) -> Tuple[int, int]:
    """Buying YES pays into the NO reserve and takes from the YES reserve, and vice versa."""
    if _normalize_side(side) == 'yes':
        return reserves['reserve_no'], reserves['reserve_yes']
    return reserves['reserve_yes'], reserves['reserve_no']


def reserves_for_sell(reserves: ReservePair, side: str) -> Tuple[int, int]:
    if _normalize_side(side) == 'yes':
        return reserves['reserve_yes'], reserves['reserve_no']
    return reserves['reserve_no'], reserves['reserve_yes']


def quote_buy(reserves: ReservePair, side: str, amount_in: int, fee_bps: int = DEFAULT_FEE_BPS) -> TradeQuote:
    reserve_in, reserve_out = reserves_for_buy(reserves, side)
    shares_out = quote_shares_out(amount_in, reserve_in, reserve_out, fee_bps)
    return {
        'amount_in': amount_in,
        'amount_out': shares_out,
        'fee_bps': fee_bps,
        'reserve_in_before': reserve_in,
        'reserve_out_before': reserve_out,
    }


def quote_sell(reserves: ReservePair, side: str, shares_in: int, fee_bps: int = DEFAULT_FEE_BPS) -> TradeQuote:
    reserve_in, reserve_out = reserves_for_sell(reserves, side)
    amount_out = quote_amount_out(shares_in, reserve_in, reserve_out, fee_bps)
    return {
        'amount_in': shares_in,
        'amount_out': amount_out,
        'fee_bps': fee_bps,
        'reserve_in_before': reserve_in,
        'reserve_out_before': reserve_out,
    }


@with_decimal_context
def estimate_buy(reserves: ReservePair, side: str, amount_in: int, fee_bps: int = DEFAULT_FEE_BPS) -> TradeEstimate:
    """
    Preview of a buy: shares received, the fee taken, and slippage against
    filling the whole amount at the current price.
    """
    quote = quote_buy(reserves, side, amount_in, fee_bps)
    price = current_price(reserves['reserve_yes'], reserves['reserve_no'], side)

    if price > 0:
        expected_shares = int(Decimal(amount_in) / price)
    else:
        expected_shares = 0

    return {
        'shares_out': quote['amount_out'],
        'amount_out': amount_in,
        'price_per_share': price_value(price),
        'slippage_pct': calculate_slippage_pct(expected_shares, quote['amount_out']),
        'fee': amount_in * fee_bps // BPS_DENOMINATOR,
    }


@with_decimal_context
def estimate_sell(reserves: ReservePair, side: str, shares_in: int, fee_bps: int = DEFAULT_FEE_BPS) -> TradeEstimate:
    quote = quote_sell(reserves, side, shares_in, fee_bps)
    price = current_price(reserves['reserve_yes'], reserves['reserve_no'], side)
    expected_amount = int(Decimal(shares_in) * price)
    amount_out = quote['amount_out']

    return {
        'shares_out': shares_in,
        'amount_out': amount_out,
        'price_per_share': price_value(price),
        'slippage_pct': calculate_slippage_pct(expected_amount, amount_out),
        # Fee is charged on the gross output, so back it out of the net amount
        'fee': amount_out * fee_bps // (BPS_DENOMINATOR + fee_bps),
    }
