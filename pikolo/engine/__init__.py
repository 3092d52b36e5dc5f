from .state import ReservePair, TradeQuote, TradeEstimate, BorrowPosition, BorrowPreview, MarketState
from .amm_math import quote_shares_out, quote_amount_in, quote_amount_out, current_price
from .borrowing import calculate_borrow_amount, calculate_liquidation_price, calculate_borrowing_fees
from .resolutions import should_resolve, determine_outcome, resolve_market
from .slippage import calculate_slippage_pct
