from typing_extensions import TypedDict, Literal
from typing import Any, Optional
from decimal import Decimal

from pikolo.utils import validate_reserve, validate_amount

Side = Literal['yes', 'no']
Outcome = Literal['Yes', 'No']

STATUS_PENDING = 'PENDING'
STATUS_RESOLVED = 'RESOLVED'
STATUS_CANCELLED = 'CANCELLED'

# On-chain status codes as returned by the market contract
STATUS_CODES = {0: STATUS_PENDING, 1: STATUS_RESOLVED, 2: STATUS_CANCELLED}

class ReservePair(TypedDict):
    reserve_yes: int
    reserve_no: int

class TradeQuote(TypedDict):
    amount_in: int
    amount_out: int
    fee_bps: int
    reserve_in_before: int
    reserve_out_before: int

class TradeEstimate(TypedDict):
    shares_out: int
    amount_out: int
    price_per_share: Decimal
    slippage_pct: Decimal
    fee: int

class BorrowPosition(TypedDict):
    btc_collateral: int  # wei
    borrowed_amount: int  # wei of MUSD
    btc_price_usd: int  # wei
    collateralization_ratio_pct: float

class BorrowingFees(TypedDict):
    issuance_fee: Decimal
    liquidation_fee_deposit: Decimal
    total_fees: Decimal

class BorrowPreview(TypedDict):
    borrow_amount: Decimal
    liquidation_price: Decimal
    collateral_ratio: Decimal
    fees: BorrowingFees
    below_minimum: bool
    below_recommended: bool

class MarketOutcomeQuery(TypedDict):
    reference_price_usd: Decimal
    threshold_usd: Decimal
    is_above_threshold: bool
    expiration_ts: int

class MarketState(TypedDict):
    address: str
    status: str
    threshold_usd: Decimal
    expiration_ts: int
    is_above_threshold: Optional[bool]  # None until looked up off-chain
    resolved_price_wei: Optional[int]
    outcome: Optional[Outcome]

def make_reserves(reserve_yes: int, reserve_no: int) -> ReservePair:
    """
    Build a reserve snapshot. Both zero is a valid, uninitialized pool.
    """
    validate_reserve(reserve_yes, 'reserve_yes')
    validate_reserve(reserve_no, 'reserve_no')
    return {'reserve_yes': reserve_yes, 'reserve_no': reserve_no}

def make_borrow_position(btc_collateral: int, borrowed_amount: int, btc_price_usd: int,
                         collateralization_ratio_pct: float) -> BorrowPosition:
    validate_amount(btc_collateral, 'btc_collateral')
    validate_amount(borrowed_amount, 'borrowed_amount')
    validate_amount(btc_price_usd, 'btc_price_usd')
    if collateralization_ratio_pct <= 0:
        raise ValueError(f"Invalid collateralization ratio: {collateralization_ratio_pct}. Must be positive.")
    return {
        'btc_collateral': btc_collateral,
        'borrowed_amount': borrowed_amount,
        'btc_price_usd': btc_price_usd,
        'collateralization_ratio_pct': collateralization_ratio_pct,
    }

def normalize_address(address: str) -> str:
    return address.strip().lower()

def init_market(address: str, threshold_usd: Any, expiration_ts: int,
                is_above_threshold: Optional[bool] = None, status: str = STATUS_PENDING) -> MarketState:
    """
    Initialize a market snapshot from contract state plus the off-chain direction flag.
    """
    threshold = Decimal(str(threshold_usd))
    if not threshold.is_finite() or threshold < 0:
        raise ValueError(f"Invalid threshold: {threshold_usd}. Must be finite and non-negative.")
    if status not in STATUS_CODES.values():
        raise ValueError(f"Unknown market status: {status}")
    return {
        'address': normalize_address(address),
        'status': status,
        'threshold_usd': threshold,
        'expiration_ts': int(expiration_ts),
        'is_above_threshold': is_above_threshold,
        'resolved_price_wei': None,
        'outcome': None,
    }

def status_from_code(code: int) -> str:
    if code not in STATUS_CODES:
        raise ValueError(f"Unknown market status code: {code}")
    return STATUS_CODES[code]
