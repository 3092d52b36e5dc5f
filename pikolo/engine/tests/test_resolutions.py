import pytest
from decimal import Decimal
from unittest.mock import patch

from pikolo.engine.resolutions import (
    cancel_market,
    determine_outcome,
    determine_outcome_for_query,
    is_terminal,
    outcome_value,
    resolve_market,
    resolved_price_usd,
    should_resolve,
    with_direction,
)
from pikolo.engine.state import (
    MarketState,
    STATUS_CANCELLED,
    STATUS_PENDING,
    STATUS_RESOLVED,
    init_market,
)
from pikolo.utils import WEI

EXPIRY = 1_700_000_000

@pytest.fixture
def above_market() -> MarketState:
    return init_market('0xAbC0000000000000000000000000000000000001', Decimal('70000'), EXPIRY, True)

@pytest.fixture
def below_market() -> MarketState:
    return init_market('0xabc0000000000000000000000000000000000002', Decimal('70000'), EXPIRY, False)

@pytest.mark.parametrize("price,threshold,is_above,expected", [
    (75000, 70000, True, 'Yes'),
    (65000, 70000, True, 'No'),
    (70000, 70000, True, 'Yes'),
    (65000, 70000, False, 'Yes'),
    (75000, 70000, False, 'No'),
    (Decimal('69999.99'), Decimal('70000'), True, 'No'),
    (Decimal('70000.01'), Decimal('70000'), False, 'No'),
])
def test_determine_outcome(price, threshold, is_above, expected):
    assert determine_outcome(price, threshold, is_above) == expected

def test_below_market_at_threshold_resolves_yes():
    # Equal counts as "below" for a below market, mirroring the above side
    assert determine_outcome(70000, 70000, False) == 'Yes'

def test_determine_outcome_is_deterministic():
    results = {determine_outcome(Decimal('70500.5'), 70000, True) for _ in range(20)}
    assert results == {'Yes'}

@pytest.mark.parametrize("bad", [float('nan'), float('inf'), Decimal('NaN'), Decimal('-Infinity'), -1])
def test_determine_outcome_rejects_bad_price(bad):
    with pytest.raises(ValueError):
        determine_outcome(bad, 70000, True)

def test_determine_outcome_rejects_bad_threshold():
    with pytest.raises(ValueError, match="threshold_usd"):
        determine_outcome(70000, -5, True)

def test_determine_outcome_for_query():
    query = {
        'reference_price_usd': Decimal('64000'),
        'threshold_usd': Decimal('65000'),
        'is_above_threshold': False,
        'expiration_ts': EXPIRY,
    }
    assert determine_outcome_for_query(query) == 'Yes'

def test_should_resolve_boundary():
    assert not should_resolve(EXPIRY, EXPIRY - 1)
    assert should_resolve(EXPIRY, EXPIRY)
    assert should_resolve(EXPIRY, EXPIRY + 1)

def test_should_resolve_reads_clock():
    with patch('pikolo.engine.resolutions.get_current_seconds', return_value=EXPIRY - 10):
        assert not should_resolve(EXPIRY)
    with patch('pikolo.engine.resolutions.get_current_seconds', return_value=EXPIRY + 10):
        assert should_resolve(EXPIRY)

def test_outcome_value():
    assert outcome_value('Yes') == 1
    assert outcome_value('No') == 0
    with pytest.raises(ValueError, match="Unknown outcome"):
        outcome_value('yes')

def test_resolve_market(above_market):
    resolved = resolve_market(above_market, Decimal('71000'), now=EXPIRY)

    assert resolved['status'] == STATUS_RESOLVED
    assert resolved['outcome'] == 'Yes'
    assert resolved['resolved_price_wei'] == 71000 * WEI
    assert is_terminal(resolved)
    # Input snapshot untouched
    assert above_market['status'] == STATUS_PENDING
    assert above_market['outcome'] is None

def test_resolve_below_market(below_market):
    resolved = resolve_market(below_market, 71000, now=EXPIRY + 60)
    assert resolved['outcome'] == 'No'

def test_resolved_price_is_quantized_to_cents(above_market):
    resolved = resolve_market(above_market, '70123.456', now=EXPIRY)
    assert resolved['resolved_price_wei'] == 7012346 * WEI // 100
    assert resolved_price_usd(resolved) == Decimal('70123.46')

def test_resolved_price_usd_pending(above_market):
    assert resolved_price_usd(above_market) is None

def test_resolve_twice_rejected(above_market):
    resolved = resolve_market(above_market, 71000, now=EXPIRY)
    with pytest.raises(ValueError, match="cannot resolve"):
        resolve_market(resolved, 60000, now=EXPIRY)

def test_resolve_before_expiry_rejected(above_market):
    with pytest.raises(ValueError, match="has not expired"):
        resolve_market(above_market, 71000, now=EXPIRY - 1)

def test_resolve_without_direction_rejected():
    market = init_market('0xdef', 70000, EXPIRY)
    with pytest.raises(ValueError, match="has no direction"):
        resolve_market(market, 71000, now=EXPIRY)
    resolved = resolve_market(with_direction(market, False), 71000, now=EXPIRY)
    assert resolved['outcome'] == 'No'

def test_resolve_rejects_bad_price(above_market):
    with pytest.raises(ValueError):
        resolve_market(above_market, float('nan'), now=EXPIRY)

def test_cancel_market(above_market):
    cancelled = cancel_market(above_market)
    assert cancelled['status'] == STATUS_CANCELLED
    assert is_terminal(cancelled)
    assert not is_terminal(above_market)
    with pytest.raises(ValueError, match="cannot resolve"):
        resolve_market(cancelled, 71000, now=EXPIRY)
    with pytest.raises(ValueError, match="cannot cancel"):
        cancel_market(cancelled)

def test_outcome_uses_unrounded_price(above_market):
    # 69999.996 rounds to 70000.00 but is still below the threshold
    resolved = resolve_market(above_market, '69999.996', now=EXPIRY)
    assert resolved['outcome'] == determine_outcome('69999.996', '70000', True) == 'No'
    assert resolved['resolved_price_wei'] == 70000 * WEI

def test_below_outcome_uses_unrounded_price(below_market):
    resolved = resolve_market(below_market, Decimal('70000.004'), now=EXPIRY)
    assert resolved['outcome'] == 'No'
    assert resolved_price_usd(resolved) == Decimal('70000.00')
