"""
快照对比引擎

策略说明：
1. 校验合约地址（为空时直接返回，不发起请求）
2. 并发请求当前与往期两个快照
3. 任一请求失败时丢弃两个快照，按 401 / 其他 分类返回错误
4. 两个快照销量均为 0 时返回无数据结果
5. 逐项计算格式化值与涨跌幅
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from config import MAX_WORKERS
from services.blockspan import BlockspanAPI, FetchResult, FetchStatus, blockspan_api
from services.metrics import METRICS, Snapshot, display_change, format_metric, percent_change
from services.windows import (
    BinSize,
    Chain,
    QueryWindow,
    Timeframe,
    compute_windows,
    timeframe_for_days,
)

logger = logging.getLogger(__name__)

ADDRESS_REQUIRED_MESSAGE = "Contract address is required."
AUTH_ERROR_MESSAGE = "Invalid blockspan API key!"
QUERY_ERROR_MESSAGE = "Error: verify chain and contract address are valid"
NO_DATA_MESSAGE = "No sales data found. Verify chain, address, and timeframe."


@dataclass(frozen=True)
class ComparisonRow:
    """单项指标对比"""
    label: str
    prior_formatted: Any
    current_formatted: Any
    percent_change: Optional[str]

    @property
    def change_display(self) -> str:
        return display_change(self.percent_change)

    @property
    def is_decline(self) -> bool:
        return self.percent_change is not None and float(self.percent_change) < 0


class ComparisonResult:
    """对比结果基类"""
    is_error = False


@dataclass(frozen=True)
class ComparisonError(ComparisonResult):
    """对比失败（不携带任何快照）"""
    message: str

    is_error = True


class ValidationError(ComparisonError):
    """输入无效，未发起请求"""


class AuthError(ComparisonError):
    """API 密钥无效"""


class QueryError(ComparisonError):
    """链、地址或网络问题"""


@dataclass(frozen=True)
class NoDataResult(ComparisonResult):
    """查询成功但两个快照均无销量"""
    current: Snapshot
    prior: Snapshot
    message: str = NO_DATA_MESSAGE


@dataclass(frozen=True)
class SuccessResult(ComparisonResult):
    current: Snapshot
    prior: Snapshot
    rows: List[ComparisonRow]
    window_day_count: int
    bin_size: BinSize


def validate_address(contract_address: Optional[str]) -> Optional[ValidationError]:
    if not contract_address or not contract_address.strip():
        return ValidationError(ADDRESS_REQUIRED_MESSAGE)
    return None


def build_rows(prior: Snapshot, current: Snapshot) -> List[ComparisonRow]:
    """按固定顺序生成五项指标的对比行"""
    rows = []
    for label, key in METRICS:
        prior_value = prior.get(key)
        current_value = current.get(key)
        rows.append(ComparisonRow(
            label=label,
            prior_formatted=format_metric(prior_value),
            current_formatted=format_metric(current_value),
            percent_change=percent_change(prior_value, current_value),
        ))
    return rows


class SnapshotComparator:
    """当前与往期快照对比器"""

    def __init__(self, api: Optional[BlockspanAPI] = None, max_workers: int = MAX_WORKERS):
        self.api = api or blockspan_api
        self.max_workers = max_workers

    def fetch_comparison(
        self,
        contract_address: str,
        chain: Union[Chain, str],
        current: QueryWindow,
        prior: QueryWindow,
        bin_size: Union[BinSize, str],
        api_key: Optional[str] = None,
        timeframe: Union[Timeframe, str, None] = None,
    ) -> ComparisonResult:
        """获取两个快照并生成对比结果，所有请求失败都转换为错误结果返回"""
        invalid = validate_address(contract_address)
        if invalid is not None:
            return invalid

        address = contract_address.strip()
        bin_size = BinSize(bin_size)
        timeframe = Timeframe(timeframe) if timeframe is not None else timeframe_for_days(current.day_count)

        logger.info(f"获取快照对比: {address} ({chain}), {current.day_count} 天")
        results = self._fetch_snapshots(address, chain, timeframe, bin_size, {
            "current": current,
            "prior": prior,
        }, api_key)

        statuses = [result.status for result in results.values()]
        if FetchStatus.AUTH_FAILED in statuses:
            return AuthError(AUTH_ERROR_MESSAGE)
        if any(status is not FetchStatus.OK for status in statuses):
            return QueryError(QUERY_ERROR_MESSAGE)

        current_snapshot = results["current"].snapshot
        prior_snapshot = results["prior"].snapshot

        if current_snapshot.has_no_sales and prior_snapshot.has_no_sales:
            logger.info(f"无销售数据: {address} ({chain})")
            return NoDataResult(current=current_snapshot, prior=prior_snapshot)

        return SuccessResult(
            current=current_snapshot,
            prior=prior_snapshot,
            rows=build_rows(prior_snapshot, current_snapshot),
            window_day_count=current.day_count,
            bin_size=bin_size,
        )

    def _fetch_snapshots(
        self,
        address: str,
        chain: Union[Chain, str],
        timeframe: Timeframe,
        bin_size: BinSize,
        windows: Dict[str, QueryWindow],
        api_key: Optional[str],
    ) -> Dict[str, FetchResult]:
        """并发请求各窗口快照"""
        results = {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                name: executor.submit(
                    self.api.get_nft_history,
                    address,
                    chain,
                    timeframe,
                    bin_size,
                    window.timestamp_end,
                    api_key,
                )
                for name, window in windows.items()
            }
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as e:
                    logger.error(f"快照请求异常 ({name}): {e}")
                    results[name] = FetchResult.query_failed()

        return results

    def compare(
        self,
        contract_address: str,
        chain: Union[Chain, str],
        timeframe: Union[Timeframe, str],
        now: datetime,
        api_key: Optional[str] = None,
    ) -> ComparisonResult:
        """计算时间窗口并获取对比结果"""
        current, prior, bin_size = compute_windows(timeframe, now)
        return self.fetch_comparison(
            contract_address,
            chain,
            current,
            prior,
            bin_size,
            api_key=api_key,
            timeframe=timeframe,
        )
