from decimal import Decimal
from typing import Any, Optional

from pikolo.utils import from_wei, get_current_seconds, to_wei, usd_amount, validate_number
from .state import (
    MarketOutcomeQuery,
    MarketState,
    Outcome,
    STATUS_CANCELLED,
    STATUS_PENDING,
    STATUS_RESOLVED,
)

OUTCOME_YES: Outcome = 'Yes'
OUTCOME_NO: Outcome = 'No'


def should_resolve(expiration_ts: int, now: Optional[int] = None) -> bool:
    """
    True once the wall clock has reached expiration. Depends on time, so never cache it.
    """
    if now is None:
        now = get_current_seconds()
    return now >= expiration_ts


def determine_outcome(reference_price_usd: Any, threshold_usd: Any, is_above_threshold: bool) -> Outcome:
    """
    Outcome of "Will BTC be above/below $threshold?" at reference_price_usd.

    Both directions use an inclusive boundary: a price equal to the threshold
    counts as above for an "above" market and as below for a "below" market,
    so either question resolves 'Yes' at exactly the threshold.
    """
    price = validate_number(reference_price_usd, 'reference_price_usd')
    threshold = validate_number(threshold_usd, 'threshold_usd')

    if is_above_threshold:
        return OUTCOME_YES if price >= threshold else OUTCOME_NO
    return OUTCOME_YES if price <= threshold else OUTCOME_NO


def determine_outcome_for_query(query: MarketOutcomeQuery) -> Outcome:
    return determine_outcome(query['reference_price_usd'], query['threshold_usd'], query['is_above_threshold'])


def outcome_value(outcome: Outcome) -> int:
    """On-chain encoding: 1 for Yes, 0 for No."""
    if outcome == OUTCOME_YES:
        return 1
    if outcome == OUTCOME_NO:
        return 0
    raise ValueError(f"Unknown outcome: {outcome!r}")


def is_terminal(market: MarketState) -> bool:
    return market['status'] in (STATUS_RESOLVED, STATUS_CANCELLED)


def resolve_market(market: MarketState, reference_price_usd: Any, now: Optional[int] = None) -> MarketState:
    """
    Pending -> Resolved. Returns a new market; the input is left untouched.
    Terminal markets are rejected rather than re-resolved at a different price.
    """
    if market['status'] != STATUS_PENDING:
        raise ValueError(f"Market {market['address']} is {market['status']}, cannot resolve")
    if not should_resolve(market['expiration_ts'], now):
        raise ValueError(f"Market {market['address']} has not expired (expiration {market['expiration_ts']})")
    if market['is_above_threshold'] is None:
        raise ValueError(f"Market {market['address']} has no direction; look it up before resolving")

    price = validate_number(reference_price_usd, 'reference_price_usd')
    outcome = determine_outcome(price, market['threshold_usd'], market['is_above_threshold'])

    resolved = dict(market)
    resolved['status'] = STATUS_RESOLVED
    # Only the submitted price is rounded to cents; the outcome uses the raw price
    resolved['resolved_price_wei'] = to_wei(usd_amount(price))
    resolved['outcome'] = outcome
    return resolved


def cancel_market(market: MarketState) -> MarketState:
    if market['status'] != STATUS_PENDING:
        raise ValueError(f"Market {market['address']} is {market['status']}, cannot cancel")
    cancelled = dict(market)
    cancelled['status'] = STATUS_CANCELLED
    return cancelled


def with_direction(market: MarketState, is_above_threshold: bool) -> MarketState:
    updated = dict(market)
    updated['is_above_threshold'] = is_above_threshold
    return updated


def resolved_price_usd(market: MarketState) -> Optional[Decimal]:
    if market['resolved_price_wei'] is None:
        return None
    return usd_amount(from_wei(market['resolved_price_wei']))
