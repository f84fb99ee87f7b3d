"""Tests for the Hiro API client."""
import asyncio
import json

import httpx
import pytest

from ..hiro_client import HiroAPIClient, HiroAPIError


def make_client(handler):
    transport = httpx.MockTransport(handler)
    return HiroAPIClient(base_url="https://hiro.test/", api_key="secret", client=httpx.AsyncClient(transport=transport))


class TestHiroAPIClient:
    def test_sends_api_key_header(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["key"] = request.headers.get("x-api-key")
            return httpx.Response(200, json={"burn_block_time_iso": "2025-03-05T12:00:00.000Z"})

        client = make_client(handler)
        result = asyncio.run(client.get_burn_block_time(880000))

        assert result == "2025-03-05T12:00:00.000Z"
        assert seen == {"path": "/extended/v2/burn-blocks/880000", "key": "secret"}

    def test_unmined_block_time_is_none(self):
        client = make_client(lambda request: httpx.Response(404, json={"error": "Burn block not found"}))
        assert asyncio.run(client.get_burn_block_time(999999999)) is None

    def test_error_status_raises(self):
        client = make_client(lambda request: httpx.Response(404, json={"message": "not found"}))
        with pytest.raises(HiroAPIError) as exc_info:
            asyncio.run(client.get_burn_block(1))
        assert exc_info.value.status_code == 404
        assert "not found" in exc_info.value.message

    def test_transport_error_has_no_status(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(HiroAPIError) as exc_info:
            asyncio.run(client.get_burn_block_time(1))
        assert exc_info.value.status_code is None
        assert exc_info.value.message.startswith("Hiro API unreachable")

    def test_address_balances(self):
        payload = {
            "stx": {"balance": "2500000", "total_sent": "0", "total_received": "2500000"},
            "fungible_tokens": {"SP1.face-token::FACE": {"balance": "100", "total_sent": "0", "total_received": "100"}},
            "non_fungible_tokens": {},
        }
        client = make_client(lambda request: httpx.Response(200, json=payload))

        balance = asyncio.run(client.get_address_balances("SP1"))

        assert balance.stx.balance == "2500000"
        assert balance.fungible_tokens["SP1.face-token::FACE"].balance == "100"

    def test_token_holders_paging(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            return httpx.Response(200, content=json.dumps({"total": 0, "results": []}))

        client = make_client(handler)
        asyncio.run(client.get_token_holders("SP1.face-token", "FACE", limit=50))

        assert "/extended/v1/tokens/ft/SP1.face-token::FACE/holders" in seen["url"]
        assert "limit=50" in seen["url"]
