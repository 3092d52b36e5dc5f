# pikolo/services/__init__.py

# Service layer around the pure engine: off-chain metadata lookups and the
# resolver batch. Transport (RPC, signing) is injected by the caller.
from .metadata import (
    DEFAULT_IS_ABOVE_THRESHOLD,
    InMemoryDirectionStore,
    SupabaseDirectionStore,
    get_market_direction,
)
from .resolutions import build_resolution_proposal, resolve_expired_markets, select_expired_markets
