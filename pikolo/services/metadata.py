import logging
from typing import Dict, Optional, Protocol

from supabase import Client

from pikolo.db.queries import fetch_all_market_metadata, fetch_market_metadata, upsert_market_metadata
from pikolo.engine.state import normalize_address

logger = logging.getLogger(__name__)

# Markets created before direction metadata existed were all "above" questions
DEFAULT_IS_ABOVE_THRESHOLD = True


class DirectionStore(Protocol):
    """Off-chain lookup for a market's above/below flag."""

    def get(self, market_address: str) -> Optional[bool]: ...

    def set(self, market_address: str, is_above_threshold: bool) -> None: ...


class InMemoryDirectionStore:
    def __init__(self, initial: Optional[Dict[str, bool]] = None) -> None:
        self._directions: Dict[str, bool] = {}
        for address, is_above in (initial or {}).items():
            self.set(address, is_above)

    def get(self, market_address: str) -> Optional[bool]:
        return self._directions.get(normalize_address(market_address))

    def set(self, market_address: str, is_above_threshold: bool) -> None:
        self._directions[normalize_address(market_address)] = bool(is_above_threshold)


class SupabaseDirectionStore:
    """Direction flags persisted in the market_metadata table."""

    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client

    def get(self, market_address: str) -> Optional[bool]:
        row = fetch_market_metadata(normalize_address(market_address), db=self._client)
        if row is None or row.get('is_above_threshold') is None:
            return None
        return bool(row['is_above_threshold'])

    def set(self, market_address: str, is_above_threshold: bool) -> None:
        upsert_market_metadata(normalize_address(market_address), bool(is_above_threshold), db=self._client)

    def load_all(self) -> InMemoryDirectionStore:
        """Snapshot of every stored flag, for batch runs that should not query per market."""
        rows = fetch_all_market_metadata(db=self._client)
        return InMemoryDirectionStore({row['market_address']: row['is_above_threshold'] for row in rows})


def get_market_direction(store: DirectionStore, market_address: str) -> bool:
    """
    Stored direction for a market, or DEFAULT_IS_ABOVE_THRESHOLD if the store has none.
    A miss only affects explanation text; the on-chain resolution is authoritative.
    """
    is_above = store.get(market_address)
    if is_above is None:
        logger.warning(f"No direction metadata for market {normalize_address(market_address)}, "
                       f"defaulting to is_above_threshold={DEFAULT_IS_ABOVE_THRESHOLD}")
        return DEFAULT_IS_ABOVE_THRESHOLD
    return is_above
