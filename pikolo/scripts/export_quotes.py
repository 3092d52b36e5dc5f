import argparse
import logging
from decimal import Decimal
from typing import List

import numpy as np
import pandas as pd

from pikolo.config import load_engine_params
from pikolo.engine.amm_math import estimate_buy
from pikolo.engine.params import validate_params
from pikolo.engine.state import ReservePair, make_reserves
from pikolo.utils import from_wei, share_amount, to_wei, with_decimal_context

logger = logging.getLogger(__name__)

LADDER_COLUMNS = ['amount_in', 'shares_out', 'avg_price', 'spot_price', 'slippage_pct', 'fee']

def ladder_amounts(max_amount: float, steps: int) -> List[int]:
    """Evenly spaced trade sizes in wei, from max_amount/steps up to max_amount."""
    if steps <= 0:
        raise ValueError("steps must be >0")
    if max_amount <= 0:
        raise ValueError("max_amount must be >0")
    sizes = np.linspace(max_amount / steps, max_amount, steps)
    return [to_wei(f"{size:.6f}") for size in sizes]

@with_decimal_context
def build_quote_ladder(reserves: ReservePair, side: str, amounts: List[int], fee_bps: int) -> pd.DataFrame:
    """Buy previews for each size, in whole-token units for display. Shares keep four decimals."""
    rows = []
    for amount_in in amounts:
        estimate = estimate_buy(reserves, side, amount_in, fee_bps)
        shares_out = estimate['shares_out']
        avg_price = Decimal(amount_in) / Decimal(shares_out) if shares_out > 0 else Decimal('0')
        rows.append({
            'amount_in': float(from_wei(amount_in)),
            'shares_out': float(share_amount(from_wei(shares_out))),
            'avg_price': float(avg_price),
            'spot_price': float(estimate['price_per_share']),
            'slippage_pct': float(estimate['slippage_pct']),
            'fee': float(from_wei(estimate['fee'])),
        })
    return pd.DataFrame(rows, columns=LADDER_COLUMNS)

def export_quote_ladder_csv(filename: str, reserves: ReservePair, side: str, max_amount: float, steps: int,
                            fee_bps: int) -> pd.DataFrame:
    df = build_quote_ladder(reserves, side, ladder_amounts(max_amount, steps), fee_bps)
    df.to_csv(filename, index=False, float_format='%.6f')
    logger.info(f"Wrote {len(df)} {side.upper()} quotes to {filename}")
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    params = load_engine_params()
    validate_params(params)

    parser = argparse.ArgumentParser(description="Export a ladder of AMM buy quotes to CSV.")
    parser.add_argument("--reserve_yes", type=float, required=True, help="YES reserve in whole tokens")
    parser.add_argument("--reserve_no", type=float, required=True, help="NO reserve in whole tokens")
    parser.add_argument("--side", choices=['yes', 'no'], default='yes', help="Side to buy")
    parser.add_argument("--max_amount", type=float, default=1000.0, help="Largest trade size in MUSD")
    parser.add_argument("--steps", type=int, default=10, help="Number of trade sizes")
    parser.add_argument("--fee_bps", type=int, default=params['fee_bps'], help="AMM fee in basis points")
    parser.add_argument("--output", default="quotes.csv", help="CSV file to write")
    args = parser.parse_args()

    pool = make_reserves(to_wei(str(args.reserve_yes)), to_wei(str(args.reserve_no)))
    export_quote_ladder_csv(args.output, pool, args.side, args.max_amount, args.steps, args.fee_bps)
