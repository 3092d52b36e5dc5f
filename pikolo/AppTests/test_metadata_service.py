"""
Tests for the market direction lookup: in-memory store, Supabase-backed store
and the default applied when a market has no metadata row.
"""

import logging
import pytest
from unittest.mock import patch, MagicMock

from pikolo.db.queries import METADATA_TABLE, fetch_market_metadata, upsert_market_metadata
from pikolo.services.metadata import (
    DEFAULT_IS_ABOVE_THRESHOLD,
    InMemoryDirectionStore,
    SupabaseDirectionStore,
    get_market_direction,
)


def make_client(rows):
    client = MagicMock()
    table = client.table.return_value
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value.data = rows
    table.select.return_value.execute.return_value.data = rows
    return client


class TestInMemoryDirectionStore:
    """Lookups are keyed by normalized address."""

    def test_get_is_case_insensitive(self):
        store = InMemoryDirectionStore({'0xABC': False})
        assert store.get('0xabc') is False
        assert store.get(' 0xAbC ') is False

    def test_missing_market(self):
        assert InMemoryDirectionStore().get('0x1') is None

    def test_set_overwrites(self):
        store = InMemoryDirectionStore({'0x1': True})
        store.set('0x1', False)
        assert store.get('0x1') is False


class TestSupabaseDirectionStore:
    """Rows come from the market_metadata table."""

    def test_get_reads_metadata_row(self):
        client = make_client([{'market_address': '0xabc', 'is_above_threshold': False}])
        store = SupabaseDirectionStore(client)

        assert store.get('0xABC') is False
        client.table.assert_called_with(METADATA_TABLE)
        client.table.return_value.select.return_value.eq.assert_called_with('market_address', '0xabc')

    def test_get_without_row(self):
        store = SupabaseDirectionStore(make_client([]))
        assert store.get('0xabc') is None

    def test_get_with_null_flag(self):
        store = SupabaseDirectionStore(make_client([{'market_address': '0xabc', 'is_above_threshold': None}]))
        assert store.get('0xabc') is None

    def test_set_upserts_lowercased_address(self):
        client = MagicMock()
        SupabaseDirectionStore(client).set('0xDEF', False)

        client.table.return_value.upsert.assert_called_once_with({
            'market_address': '0xdef',
            'is_above_threshold': False,
        })

    def test_load_all_snapshot(self):
        client = make_client([
            {'market_address': '0xA', 'is_above_threshold': True},
            {'market_address': '0xb', 'is_above_threshold': False},
        ])
        snapshot = SupabaseDirectionStore(client).load_all()

        assert snapshot.get('0xa') is True
        assert snapshot.get('0xB') is False
        assert snapshot.get('0xc') is None

    def test_default_client_from_config(self):
        client = make_client([{'market_address': '0xabc', 'is_above_threshold': True}])
        with patch('pikolo.db.queries.get_db', return_value=client) as mock_db:
            assert fetch_market_metadata('0xabc') == {'market_address': '0xabc', 'is_above_threshold': True}
            upsert_market_metadata('0xabc', True)
        assert mock_db.call_count == 2


class TestGetMarketDirection:

    def test_stored_direction(self):
        store = InMemoryDirectionStore({'0xabc': False})
        assert get_market_direction(store, '0xabc') is False

    def test_missing_direction_defaults_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger='pikolo.services.metadata'):
            assert get_market_direction(InMemoryDirectionStore(), '0xABC') is DEFAULT_IS_ABOVE_THRESHOLD
        assert "No direction metadata for market 0xabc" in caplog.text

    def test_default_is_above(self):
        assert DEFAULT_IS_ABOVE_THRESHOLD is True
