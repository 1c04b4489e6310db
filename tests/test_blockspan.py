"""Blockspan 客户端测试"""

from unittest.mock import MagicMock

import pytest
import requests

from services.blockspan import NFT_HISTORY_ENDPOINT, BlockspanAPI, FetchStatus
from services.windows import BinSize, Chain, Timeframe


def _response(status_code: int = 200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


@pytest.fixture
def api() -> BlockspanAPI:
    client = BlockspanAPI(api_key="test-key", base_url="https://api.example.com")
    client.session = MagicMock()
    return client


def _fetch(api: BlockspanAPI, **kwargs):
    return api.get_nft_history(
        "0xabc",
        Chain.ETH_MAIN,
        Timeframe.SEVEN_DAYS,
        BinSize.ONE_DAY,
        "2024-03-15T12:30:00.000Z",
        **kwargs,
    )


class TestBlockspanAPI:
    """get_nft_history 测试"""

    def test_session_headers(self) -> None:
        client = BlockspanAPI(api_key="secret")
        assert client.session.headers["X-API-KEY"] == "secret"
        assert client.session.headers["accept"] == "application/json"

    def test_success_returns_snapshot(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(payload={"total_sales": 3, "avg_price_usd": "2"})

        result = _fetch(api)

        assert result.ok
        assert result.snapshot.total_sales.number == 3
        assert result.snapshot.get("avg_price_usd").raw == "2"

    def test_request_parameters(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(payload={})

        _fetch(api)

        args, kwargs = api.session.get.call_args
        assert args[0] == f"https://api.example.com{NFT_HISTORY_ENDPOINT}"
        assert kwargs["params"] == {
            "timestamp_end": "2024-03-15T12:30:00.000Z",
            "contract_address": "0xabc",
            "chain": "eth-main",
            "timeframe": "7_DAYS",
            "bin_size": "1_DAY",
        }
        assert kwargs["headers"] is None

    def test_api_key_override(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(payload={})

        _fetch(api, api_key="other-key")

        assert api.session.get.call_args.kwargs["headers"] == {"X-API-KEY": "other-key"}

    def test_401_is_auth_failure(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(status_code=401)

        result = _fetch(api)

        assert result.status is FetchStatus.AUTH_FAILED
        assert result.snapshot is None
        assert result.status_code == 401

    @pytest.mark.parametrize("status_code", [400, 403, 404, 500])
    def test_other_http_errors_are_query_failures(self, api: BlockspanAPI, status_code: int) -> None:
        api.session.get.return_value = _response(status_code=status_code)

        result = _fetch(api)

        assert result.status is FetchStatus.QUERY_FAILED
        assert result.status_code == status_code

    @pytest.mark.parametrize(
        "error",
        [requests.exceptions.ConnectionError("down"), requests.exceptions.Timeout("slow")],
    )
    def test_transport_errors_are_query_failures(self, api: BlockspanAPI, error: Exception) -> None:
        api.session.get.side_effect = error

        result = _fetch(api)

        assert result.status is FetchStatus.QUERY_FAILED
        assert result.snapshot is None

    def test_invalid_json_is_query_failure(self, api: BlockspanAPI) -> None:
        response = _response()
        response.json.side_effect = ValueError("not json")
        api.session.get.return_value = response

        assert _fetch(api).status is FetchStatus.QUERY_FAILED

    def test_huge_integer_metric_does_not_raise(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(payload={"total_sales": 10**400})

        result = _fetch(api)

        assert result.ok
        assert result.snapshot.total_sales.number is None
        assert result.snapshot.total_sales.raw == 10**400

    def test_non_object_body_is_query_failure(self, api: BlockspanAPI) -> None:
        api.session.get.return_value = _response(payload=["unexpected"])

        assert _fetch(api).status is FetchStatus.QUERY_FAILED
