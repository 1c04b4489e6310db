"""测试公共夹具"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from services.blockspan import FetchResult, FetchStatus
from services.metrics import Snapshot


def make_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "total_sales": 100,
        "total_unique_tokens": 80,
        "avg_price_usd": "1500.123",
        "max_price_usd": "9000",
        "total_sales_volume_usd": "150012.3",
    }
    payload.update(overrides)
    return payload


class FakeBlockspanAPI:
    """按 timestamp_end 返回预设结果的假客户端"""

    def __init__(self, results: Optional[Dict[str, FetchResult]] = None, default: Optional[FetchResult] = None):
        self.results = results or {}
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    def get_nft_history(self, contract_address, chain, timeframe, bin_size, timestamp_end, api_key=None):
        self.calls.append({
            "contract_address": contract_address,
            "chain": chain,
            "timeframe": timeframe,
            "bin_size": bin_size,
            "timestamp_end": timestamp_end,
            "api_key": api_key,
        })
        if timestamp_end in self.results:
            return self.results[timestamp_end]
        return self.default


def ok(payload: Dict[str, Any]) -> FetchResult:
    return FetchResult(status=FetchStatus.OK, snapshot=Snapshot.from_payload(payload), status_code=200)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 15, 12, 30, 0, tzinfo=timezone.utc)
