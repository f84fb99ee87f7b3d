"""HTTP tests for the dashboard routes."""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.auth.deps import get_current_user, get_user_supabase_client
from src.data_models.governance_schemas import ProposalVotes, VotingWindow
from src.data_models.schemas import DAO, ProposalWithDAO, Token, Vote
from src.main import app
from src.services.stacks_node_client import StacksNodeError

from ..deps import (
    get_block_time_resolver,
    get_contract_cache_client,
    get_hiro_client,
    get_stacks_node_client,
)

PROPOSAL_RESULT = {
    "type": "(optional (tuple (votes-against uint) (votes-for uint)))",
    "value": {"type": "(tuple (votes-against uint) (votes-for uint))", "value": {
        "votes-against": {"type": "uint", "value": "100"},
        "votes-for": {"type": "uint", "value": "300"},
    }},
}


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def override(dependency, value):
    app.dependency_overrides[dependency] = lambda: value
    return value


class TestBlockTimes:
    def test_missing_params(self, client):
        response = client.get("/block-times", params={"startBlock": "100"})
        assert response.status_code == 400
        assert response.json() == {"error": "startBlock and endBlock parameters are required"}

    def test_block_times(self, client):
        resolver = override(get_block_time_resolver, MagicMock())
        resolver.fetch_block_times = AsyncMock(return_value={
            "startBlockTime": "2025-03-05T12:00:00.000Z",
            "endBlockTime": None,
        })

        response = client.get("/block-times", params={"startBlock": "100", "endBlock": "110abc"})

        assert response.status_code == 200
        assert response.json() == {"startBlockTime": "2025-03-05T12:00:00.000Z", "endBlockTime": None}
        assert response.headers["cache-control"] == "public, max-age=600"
        resolver.fetch_block_times.assert_awaited_once_with(100, 110, raise_errors=True)

    def test_upstream_failure(self, client):
        resolver = override(get_block_time_resolver, MagicMock())
        resolver.fetch_block_times = AsyncMock(side_effect=RuntimeError("down"))

        response = client.get("/block-times", params={"startBlock": "100", "endBlock": "110"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch block times"}


class TestVotes:
    def test_missing_params(self, client):
        response = client.get("/votes", params={"contractAddress": "SP1.voting"})
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required parameters: contractAddress or proposalId"

    def test_malformed_contract(self, client):
        response = client.get("/votes", params={"contractAddress": "SP1", "proposalId": "1"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid contract address format. Expected format: address.contractName"

    def test_full_result(self, client):
        node = override(get_stacks_node_client, MagicMock())
        node.get_proposal = AsyncMock(return_value=PROPOSAL_RESULT)

        response = client.get("/votes", params={"contractAddress": "SP1.voting", "proposalId": "3"})

        assert response.json() == {
            "success": True,
            "message": "Proposal retrieved successfully",
            "data": PROPOSAL_RESULT,
            "proposalId": "3",
            "contractAddress": "SP1.voting",
        }
        node.get_proposal.assert_awaited_once_with("SP1.voting", 3)

    def test_votes_only(self, client):
        node = override(get_stacks_node_client, MagicMock())
        node.get_proposal = AsyncMock(return_value=PROPOSAL_RESULT)

        response = client.get("/votes", params={"contractAddress": "SP1.voting", "proposalId": "3", "votesOnly": "true"})

        assert response.json() == {"success": True, "votesFor": "300", "votesAgainst": "100"}

    def test_read_only_failure(self, client):
        node = override(get_stacks_node_client, MagicMock())
        node.get_proposal = AsyncMock(side_effect=StacksNodeError("Invalid response format from Stacks API"))

        response = client.get("/votes", params={"contractAddress": "SP1.voting", "proposalId": "3"})

        assert response.status_code == 500
        assert response.json()["message"] == "Invalid response format from Stacks API"

    def test_cached_votes(self, client):
        cache_client = override(get_contract_cache_client, MagicMock())
        cache_client.get_proposal_votes = AsyncMock(return_value=ProposalVotes(votes_for="150000000", formatted_votes_for="1.5"))

        response = client.get("/proposals/votes/cached", params={"contractPrincipal": "SP1.voting", "proposalId": "3", "bustCache": "true"})

        assert response.status_code == 200
        assert response.json()["formatted_votes_for"] == "1.5"
        cache_client.get_proposal_votes.assert_awaited_once_with("SP1.voting", "3", bust_cache=True)

    def test_my_votes_requires_auth(self, client):
        assert client.get("/votes/me").status_code == 401

    @patch("src.routers.routes_votes.fetch_votes")
    @patch("src.services.supabase_client.create_client")
    @patch("src.services.supabase_client.SUPABASE_ANON_KEY", "anon")
    @patch("src.services.supabase_client.SUPABASE_URL", "https://db.test")
    def test_my_votes_run_as_the_user(self, mock_create_client, mock_fetch_votes, client):
        app.dependency_overrides[get_current_user] = lambda: {"sub": "user-1", "access_token": "user-jwt"}
        mock_fetch_votes.return_value = [Vote(id="v1", agent_name="Voter")]
        user_db = mock_create_client.return_value

        response = client.get("/votes/me")

        assert response.json()[0]["agent_name"] == "Voter"
        user_db.postgrest.auth.assert_called_once_with("user-jwt")
        mock_fetch_votes.assert_called_once_with("user-1", user_db)


class TestProposals:
    PROPOSALS = [
        ProposalWithDAO(id=str(i), title=f"Proposal {i}", status="DEPLOYED",
                        created_at=f"2025-01-{i:02d}T00:00:00Z", daos={"name": "FACE•AIBTC•DAO"})
        for i in range(1, 26)
    ]

    @patch("src.routers.routes_proposals.fetch_all_proposals")
    def test_list_is_paginated(self, mock_fetch, client):
        mock_fetch.return_value = self.PROPOSALS

        response = client.get("/proposals", params={"page": 2})

        body = response.json()
        assert body["page"] == 2
        assert body["total_pages"] == 2
        assert [p["id"] for p in body["proposals"]] == ["5", "4", "3", "2", "1"]
        assert body["stats"]["total"] == 25

    @patch("src.routers.routes_proposals.fetch_all_proposals")
    def test_stats_follow_filters(self, mock_fetch, client):
        mock_fetch.return_value = self.PROPOSALS
        body = client.get("/proposals", params={"search": "Proposal 1"}).json()
        assert body["stats"]["total"] == 11

    @patch("src.routers.routes_proposals.fetch_proposal")
    def test_missing_proposal(self, mock_fetch, client):
        mock_fetch.return_value = None
        override(get_block_time_resolver, MagicMock())

        response = client.get("/proposals/nope")

        assert response.status_code == 404
        assert response.json()["message"] == "Proposal 'nope' not found"

    @patch("src.routers.routes_proposals.fetch_proposal")
    def test_proposal_detail(self, mock_fetch, client):
        mock_fetch.return_value = ProposalWithDAO(
            id="p1", status="DEPLOYED", passed=True, vote_start=100, vote_end=110,
            votes_for="300", votes_against="100", liquid_tokens="1000", tx_id="0xabc",
        )
        resolver = override(get_block_time_resolver, MagicMock())
        resolver.network = "testnet"
        resolver.resolve_voting_window = AsyncMock(return_value=VotingWindow(
            start_block=100,
            end_block=110,
            start_time=datetime(2025, 1, 1, tzinfo=timezone.utc),
            end_time=datetime(2025, 1, 2, tzinfo=timezone.utc),
        ))

        body = client.get("/proposals/p1").json()

        assert body["status"]["label"] == "Passed"
        assert body["voting"] == {"is_active": False, "is_ended": True}
        assert body["tally"]["percentage_for"] == 30.0
        assert body["explorer_url"] == "https://explorer.stacks.co/txid/0xabc?chain=testnet"

    @patch("src.routers.routes_votes.fetch_proposal_votes")
    def test_proposal_votes(self, mock_fetch, client):
        mock_fetch.return_value = [Vote(id="v1", proposal_title="Current Proposal")]
        assert client.get("/proposals/p1/votes").json()[0]["id"] == "v1"
        mock_fetch.assert_called_once_with("p1")


class TestDaos:
    @patch("src.routers.routes_daos.fetch_dao_extensions")
    @patch("src.routers.routes_daos.fetch_dao_by_name")
    def test_dao_by_name(self, mock_by_name, mock_extensions, client):
        mock_by_name.return_value = DAO(id="d1", name="FACE•AIBTC•DAO")
        mock_extensions.return_value = []

        response = client.get("/daos/FACE%E2%80%A2AIBTC%E2%80%A2DAO")

        assert response.json()["id"] == "d1"

    @patch("src.routers.routes_daos.fetch_dao_by_name")
    def test_unknown_dao(self, mock_by_name, client):
        mock_by_name.return_value = None
        response = client.get("/daos/NOPE")
        assert response.status_code == 404
        assert response.json()["message"] == "No DAO found with name: NOPE"

    @patch("src.routers.routes_daos.fetch_token")
    def test_holders(self, mock_token, client):
        mock_token.return_value = Token(id="t1", dao_id="d1", symbol="FACE", contract_principal="SP1.face-token")
        hiro = override(get_hiro_client, MagicMock())
        hiro.get_token_holders = AsyncMock(return_value={
            "total_supply": "100", "total": 1, "results": [{"address": "SP1", "balance": "100"}],
        })

        body = client.get("/daos/d1/holders").json()

        assert body["holder_count"] == 1
        assert body["holders"][0]["percentage"] == 100.0
        hiro.get_token_holders.assert_awaited_once_with("SP1.face-token", "FACE")

    @patch("src.routers.routes_daos.fetch_dao_extensions")
    def test_missing_treasury(self, mock_extensions, client):
        mock_extensions.return_value = []
        override(get_hiro_client, MagicMock())
        assert client.get("/daos/d1/treasury").status_code == 404


class TestMisc:
    @patch("src.routers.routes_chain_state.fetch_latest_chain_state")
    def test_latest_chain_state(self, mock_latest, client):
        mock_latest.return_value = None
        response = client.get("/chain-state/latest")
        assert response.status_code == 200
        assert response.json() is None

    @patch("src.routers.routes_agents.fetch_agent_by_id")
    def test_unknown_agent(self, mock_agent, client):
        mock_agent.return_value = None
        assert client.get("/agents/a1").status_code == 404

    def test_wallets_require_auth(self, client):
        assert client.get("/wallets/me").status_code == 401

    @patch("src.stores.wallet.fetch_wallets")
    def test_my_wallets_use_the_user_client(self, mock_fetch_wallets, client):
        user_db = MagicMock()
        app.dependency_overrides[get_current_user] = lambda: {"sub": "user-1", "access_token": "user-jwt"}
        override(get_user_supabase_client, user_db)
        override(get_hiro_client, MagicMock())
        mock_fetch_wallets.return_value = []

        response = client.get("/wallets/me")

        assert response.status_code == 200
        mock_fetch_wallets.assert_called_once_with("user-1", user_db)

    def test_healthz(self, client):
        body = client.get("/healthz").json()
        assert body["status"] in ("ok", "error")
        assert "network" in body


@patch("src.routers.routes_proposals.fetch_proposal")
def test_database_failure_is_rendered_as_json(mock_fetch, client):
    mock_fetch.side_effect = ConnectionError("connection refused")
    override(get_block_time_resolver, MagicMock())

    response = client.get("/proposals/p1")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["retryable"] is True
    assert body["message"].startswith("Connection error")


def test_unknown_sort_is_rejected(client):
    response = client.get("/proposals", params={"sort": "random"})
    assert response.status_code == 400
    assert response.json()["message"].startswith("Unknown sort 'random'")


@pytest.mark.parametrize("path", ["/proposals", "/daos", "/daos/d1/proposals", "/proposals/p1/votes"])
def test_supabase_failure_is_rendered_as_json(path, client):
    broken = MagicMock()
    broken.table.side_effect = RuntimeError("postgrest down")

    with patch("src.services.supabase_client._supabase_client", broken):
        response = client.get(path)

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json()["message"] == "Unexpected error: postgrest down"
