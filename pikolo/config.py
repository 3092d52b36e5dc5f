from typing_extensions import TypedDict
import os
from dotenv import load_dotenv
from supabase import create_client, Client

def load_env() -> dict[str, str]:
    # Try to load from .env file (for local development)
    load_dotenv()

    required_vars = ['SUPABASE_URL', 'SUPABASE_SERVICE_KEY']
    env_vars = {}

    for key in required_vars:
        value = os.getenv(key)
        if value is None:
            raise ValueError(f"Missing required environment variable: {key}. "
                             f"Please set it in the environment or in a .env file.")
        env_vars[key] = value

    return env_vars

def get_supabase_client() -> Client:
    env = load_env()
    return create_client(env['SUPABASE_URL'], env['SUPABASE_SERVICE_KEY'])

class EngineParams(TypedDict):
    fee_bps: int
    borrowing_fee_bps: int
    liquidation_fee_deposit: int
    min_collateral_ratio: int
    recommended_collateral_ratio: int
    max_ltv: float
    slippage_tolerance_buy: float
    slippage_tolerance_sell: float
    default_is_above_threshold: bool

def get_default_engine_params() -> EngineParams:
    return EngineParams(
        fee_bps=50,  # 0.5% AMM trading fee
        borrowing_fee_bps=10,
        liquidation_fee_deposit=200,  # refundable, in MUSD
        min_collateral_ratio=110,
        recommended_collateral_ratio=150,
        max_ltv=0.7,
        slippage_tolerance_buy=1.0,
        slippage_tolerance_sell=1.0,
        default_is_above_threshold=True,
    )

# Environment variable -> (param key, parser)
_ENV_OVERRIDES = {
    'PIKOLO_FEE_BPS': ('fee_bps', int),
    'PIKOLO_BORROWING_FEE_BPS': ('borrowing_fee_bps', int),
    'PIKOLO_MAX_LTV': ('max_ltv', float),
    'PIKOLO_SLIPPAGE_TOLERANCE_BUY': ('slippage_tolerance_buy', float),
    'PIKOLO_SLIPPAGE_TOLERANCE_SELL': ('slippage_tolerance_sell', float),
}

def load_engine_params() -> EngineParams:
    """Defaults with any PIKOLO_* overrides from the environment applied."""
    load_dotenv()
    params = get_default_engine_params()
    for env_key, (param_key, parser) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw is None:
            continue
        try:
            params[param_key] = parser(raw)
        except ValueError:
            raise ValueError(f"Invalid value for {env_key}: {raw!r}")
    return params
