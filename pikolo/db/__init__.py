# pikolo/db/__init__.py

from .queries import (
    get_db,
    fetch_market_metadata,
    fetch_all_market_metadata,
    upsert_market_metadata,
)
