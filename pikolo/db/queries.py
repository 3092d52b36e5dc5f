from typing import List, Dict, Any, Optional
from supabase import Client
from pikolo.config import get_supabase_client

METADATA_TABLE = 'market_metadata'

def get_db() -> Client:
    return get_supabase_client()

# Market metadata queries (direction flag is not stored on-chain)
def fetch_market_metadata(market_address: str, db: Optional[Client] = None) -> Optional[Dict[str, Any]]:
    db = db or get_db()
    result = db.table(METADATA_TABLE).select('*').eq('market_address', market_address.lower()).limit(1).execute()
    if result.data:
        return result.data[0]
    return None

def fetch_all_market_metadata(db: Optional[Client] = None) -> List[Dict[str, Any]]:
    db = db or get_db()
    return db.table(METADATA_TABLE).select('*').execute().data

def upsert_market_metadata(market_address: str, is_above_threshold: bool, db: Optional[Client] = None) -> None:
    db = db or get_db()
    db.table(METADATA_TABLE).upsert({
        'market_address': market_address.lower(),
        'is_above_threshold': is_above_threshold,
    }).execute()
