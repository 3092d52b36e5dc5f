import logging
from typing import Callable, List, Optional, Tuple
from typing_extensions import TypedDict

from pikolo.utils import from_wei, get_current_seconds, validate_amount
from pikolo.engine.state import MarketState, Outcome, STATUS_PENDING
from pikolo.engine.resolutions import outcome_value, resolve_market, should_resolve, with_direction
from pikolo.services.metadata import DirectionStore, get_market_direction

logger = logging.getLogger(__name__)

class ResolutionProposal(TypedDict):
    """Arguments for the on-chain resolve(price, outcome) call."""
    market_address: str
    price_wei: int
    outcome: Outcome
    outcome_value: int

class ResolutionSummary(TypedDict):
    resolved: int
    failed: int
    errors: List[str]

def select_expired_markets(markets: List[MarketState], now: Optional[int] = None) -> List[MarketState]:
    """Pending markets whose expiration has passed, in input order."""
    if now is None:
        now = get_current_seconds()
    return [m for m in markets if m['status'] == STATUS_PENDING and should_resolve(m['expiration_ts'], now)]

def build_resolution_proposal(market: MarketState) -> ResolutionProposal:
    if market['outcome'] is None or market['resolved_price_wei'] is None:
        raise ValueError(f"Market {market['address']} is not resolved")
    return {
        'market_address': market['address'],
        'price_wei': market['resolved_price_wei'],
        'outcome': market['outcome'],
        'outcome_value': outcome_value(market['outcome']),
    }

def resolve_expired_markets(
    markets: List[MarketState],
    fetch_price_wei: Callable[[], int],
    direction_store: DirectionStore,
    now: Optional[int] = None,
) -> Tuple[List[ResolutionProposal], List[MarketState], ResolutionSummary]:
    """
    Resolve every expired pending market against a single price snapshot.

    fetch_price_wei is the oracle read (18-decimal USD); it is called once per
    batch and only if something needs resolving. Errors from the oracle
    propagate. A market that fails to resolve is logged, counted and returned
    unchanged so the next run can retry it.
    """
    if now is None:
        now = get_current_seconds()

    expired = select_expired_markets(markets, now)
    summary: ResolutionSummary = {'resolved': 0, 'failed': 0, 'errors': []}
    logger.info(f"Found {len(expired)} expired markets to resolve")
    if not expired:
        return [], list(markets), summary

    price_wei = fetch_price_wei()
    validate_amount(price_wei, 'price_wei')
    price_usd = from_wei(price_wei)
    logger.info(f"Resolving against reference price ${price_usd:.2f}")

    expired_addresses = {m['address'] for m in expired}
    proposals: List[ResolutionProposal] = []
    updated: List[MarketState] = []

    for market in markets:
        if market['address'] not in expired_addresses:
            updated.append(market)
            continue
        try:
            candidate = market
            if candidate['is_above_threshold'] is None:
                candidate = with_direction(candidate, get_market_direction(direction_store, candidate['address']))
            resolved = resolve_market(candidate, price_usd, now)
            proposal = build_resolution_proposal(resolved)
        except ValueError as e:
            summary['failed'] += 1
            error = f"Failed to resolve {market['address']}: {e}"
            summary['errors'].append(error)
            logger.error(error)
            updated.append(market)
            continue

        proposals.append(proposal)
        updated.append(resolved)
        summary['resolved'] += 1
        logger.info(f"Resolved market {resolved['address']}: {resolved['outcome']} "
                    f"(threshold ${resolved['threshold_usd']}, above={resolved['is_above_threshold']})")

    logger.info(f"Market resolution completed: {summary['resolved']} resolved, {summary['failed']} failed")
    return proposals, updated, summary
