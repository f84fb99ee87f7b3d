"""Tests for DAO, token and holder queries."""
import asyncio
from unittest.mock import AsyncMock, MagicMock

from src.data_models.schemas import TokenBalance, TokenPrice, WalletBalance

from ..dao_queries import (
    fetch_dao_by_name,
    fetch_dao_overview,
    fetch_daos_with_extensions,
    fetch_holders,
    fetch_market_stats,
    fetch_token,
    fetch_treasury_tokens,
)
from .supabase_fakes import make_client

DAO_ROWS = [
    {"id": "d1", "name": "FACE•AIBTC•DAO", "is_broadcasted": True},
    {"id": "d2", "name": "SLOW•AIBTC•DAO", "is_broadcasted": True},
]
EXTENSION_ROWS = [
    {"id": "e1", "dao_id": "d1", "type": "aibtc-treasury", "contract_principal": "SP1.face-treasury"},
    {"id": "e2", "dao_id": "d2", "type": "dex"},
]


class TestDatabaseQueries:
    def test_daos_get_their_extensions(self):
        client = make_client({"daos": DAO_ROWS, "extensions": EXTENSION_ROWS})

        daos = fetch_daos_with_extensions(client)

        assert [[ext.id for ext in dao.extensions] for dao in daos] == [["e1"], ["e2"]]
        daos_query = client.queries["daos"][0]
        daos_query.eq.assert_any_call("is_broadcasted", True)
        daos_query.order.assert_called_with("created_at", desc=True)

    def test_dao_by_encoded_name(self):
        client = make_client({"daos": DAO_ROWS[:1]})

        dao = fetch_dao_by_name("FACE%E2%80%A2AIBTC%E2%80%A2DAO", client)

        assert dao.id == "d1"
        client.queries["daos"][0].eq.assert_any_call("name", "FACE•AIBTC•DAO")

    def test_missing_dao(self):
        assert fetch_dao_by_name("NOPE", make_client({"daos": []})) is None

    def test_token(self):
        client = make_client({"tokens": [{"id": "t1", "dao_id": "d1", "symbol": "FACE"}]})
        assert fetch_token("d1", client).symbol == "FACE"
        assert fetch_token("d1", make_client({"tokens": []})) is None

    def test_overview(self):
        client = make_client({
            "daos": DAO_ROWS[:1],
            "extensions": EXTENSION_ROWS[:1],
            "tokens": [{"id": "t1", "dao_id": "d1"}],
        })

        overview = asyncio.run(fetch_dao_overview("FACE•AIBTC•DAO", client))

        assert overview["dao"].extensions[0].type == "aibtc-treasury"
        assert overview["token"].id == "t1"


class TestHiroBackedQueries:
    def test_holders_with_percentages(self):
        hiro = MagicMock()
        hiro.get_token_holders = AsyncMock(return_value={
            "total_supply": "1000",
            "total": 2,
            "results": [{"address": "SP1", "balance": "750"}, {"address": "SP2", "balance": "250"}],
        })

        result = asyncio.run(fetch_holders(hiro, "SP1.face-token", "FACE"))

        assert [h.percentage for h in result.holders] == [75.0, 25.0]
        assert result.holder_count == 2
        hiro.get_token_holders.assert_awaited_once_with("SP1.face-token", "FACE")

    def test_treasury_tokens(self):
        hiro = MagicMock()
        hiro.get_address_balances = AsyncMock(return_value=WalletBalance(
            stx=TokenBalance(balance="2000000"),
            fungible_tokens={"SP1.face-token::FACE": TokenBalance(balance="5000000")},
            non_fungible_tokens={"SP1.badge::badge": {"count": 1}},
        ))

        tokens = asyncio.run(fetch_treasury_tokens(hiro, "SP1.face-treasury", 0.5))

        assert [(t.type, t.symbol, t.amount, t.value) for t in tokens] == [
            ("FT", "STX", 2.0, 1.0),
            ("FT", "FACE", 5.0, 2.5),
            ("NFT", "badge", 1.0, 0.0),
        ]

    def test_market_stats_prefers_hiro_holder_count(self):
        hiro = MagicMock()
        hiro.get_token_holders = AsyncMock(return_value={"total_supply": "0", "total": 12, "results": []})

        stats = asyncio.run(fetch_market_stats(
            hiro, "SP1.face-token", "FACE", 1_000_000, TokenPrice(price=0.01, market_cap=10_000, holders=3),
        ))

        assert stats.holder_count == 12
        assert stats.treasury_balance == 1_000_000 * 0.8 * 0.01
        assert stats.market_cap == 10_000
