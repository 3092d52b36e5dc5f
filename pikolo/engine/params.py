from pikolo.config import EngineParams

# Protocol constants. These are fixed on-chain values, not tunables.
MINIMUM_COLLATERAL_RATIO = 110
RECOMMENDED_COLLATERAL_RATIO = 150
LIQUIDATION_FEE_DEPOSIT = 200
DEFAULT_FEE_BPS = 50
DEFAULT_BORROWING_FEE_BPS = 10
DEFAULT_LTV = 0.7

# Largest uint256; returned by quotes that cannot be filled.
UNAFFORDABLE = 2 ** 256 - 1

def validate_params(params: EngineParams) -> None:
    if not (0 <= params['fee_bps'] < 10000):
        raise ValueError("fee_bps must be in [0,10000)")
    if not (0 <= params['borrowing_fee_bps'] < 10000):
        raise ValueError("borrowing_fee_bps must be in [0,10000)")
    if params['liquidation_fee_deposit'] < 0:
        raise ValueError("liquidation_fee_deposit must be non-negative")
    if params['min_collateral_ratio'] <= 100:
        raise ValueError("min_collateral_ratio must be >100")
    if params['recommended_collateral_ratio'] < params['min_collateral_ratio']:
        raise ValueError("recommended_collateral_ratio must be >= min_collateral_ratio")
    if not (0 < params['max_ltv'] < 1):
        raise ValueError("max_ltv must be in (0,1)")
    if params['slippage_tolerance_buy'] < 0 or params['slippage_tolerance_sell'] < 0:
        raise ValueError("slippage tolerances must be non-negative")
