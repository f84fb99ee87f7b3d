"""Tests for the contract-call cache client."""
import asyncio
import json

import httpx
import pytest

from src.exceptions import ConfigurationError, ValidationError

from ..contract_cache_client import ContractCacheClient, ContractCacheError


def make_client(handler, base_url="https://cache.test"):
    transport = httpx.MockTransport(handler)
    return ContractCacheClient(base_url=base_url, client=httpx.AsyncClient(transport=transport))


class TestContractCacheClient:
    def test_votes_from_nested_data(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"votesFor": "150000000n", "votesAgainst": 0}})

        votes = asyncio.run(make_client(handler).get_proposal_votes("SP1.action-proposals", 4))

        assert seen["path"] == "/contract-calls/read-only/SP1/action-proposals/get-proposal"
        assert seen["body"] == {"functionArgs": [{"type": "uint", "value": "4"}]}
        assert votes.votes_for == "150000000"
        assert votes.formatted_votes_for == "1.5"
        assert votes.votes_against == "0"
        assert votes.formatted_votes_against == "0"

    def test_bust_cache_sends_cache_control(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"votesFor": "1", "votesAgainst": "2"})

        votes = asyncio.run(make_client(handler).get_proposal_votes("SP1.c", "7", bust_cache=True))

        assert seen["body"]["cacheControl"] == {"bustCache": True, "ttl": 3600}
        assert (votes.votes_for, votes.votes_against) == ("1", "2")

    def test_missing_cache_url(self):
        client = make_client(lambda request: httpx.Response(200, json={}), base_url=None)
        client.base_url = ""
        with pytest.raises(ConfigurationError, match="Cache URL is not configured."):
            asyncio.run(client.get_proposal_votes("SP1.c", 1))

    def test_missing_principal(self):
        client = make_client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(ValidationError):
            asyncio.run(client.get_proposal_votes("", 1))

    def test_upstream_failure(self):
        client = make_client(lambda request: httpx.Response(502, text="bad gateway"))
        with pytest.raises(ContractCacheError) as exc_info:
            asyncio.run(client.get_proposal_votes("SP1.c", 1))
        assert exc_info.value.status_code == 502

    def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(ContractCacheError, match="Invalid response format"):
            asyncio.run(client.get_proposal_votes("SP1.c", 1))

    def test_large_counts_are_formatted_exactly(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"votesFor": "123456789012345678901n", "votesAgainst": "1"})
        )
        votes = asyncio.run(client.get_proposal_votes("SP1.c", 1))
        assert votes.formatted_votes_for == "1234567890123.45678901"
        assert votes.formatted_votes_against == "0.00000001"
