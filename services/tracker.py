"""
请求生命周期管理

IDLE -> LOADING -> SUCCESS / NO_DATA / ERROR，任何非 LOADING 状态都可以重新提交。
每次请求分配递增序号，只接受最新序号的结果，过期结果直接丢弃。
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from services.comparator import (
    ComparisonError,
    ComparisonResult,
    NoDataResult,
    SnapshotComparator,
    SuccessResult,
    validate_address,
)
from services.metrics import Snapshot
from services.windows import Chain, Timeframe

logger = logging.getLogger(__name__)


class RequestState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    NO_DATA = "no_data"


class InvestmentsTracker:
    """投资追踪器 - 保存最近一次对比的状态"""

    def __init__(self, comparator: Optional[SnapshotComparator] = None):
        self.comparator = comparator or SnapshotComparator()
        self.state = RequestState.IDLE
        self.current: Optional[Snapshot] = None
        self.prior: Optional[Snapshot] = None
        self.result: Optional[ComparisonResult] = None
        self.error_message: Optional[str] = None
        self._sequence = 0

    @property
    def sequence(self) -> int:
        return self._sequence

    def _clear(self):
        self.current = None
        self.prior = None
        self.result = None

    def begin(self) -> int:
        """开始新请求，清空快照并返回请求序号"""
        self._sequence += 1
        self._clear()
        self.error_message = None
        self.state = RequestState.LOADING
        return self._sequence

    def apply(self, sequence: int, result: ComparisonResult) -> bool:
        """应用请求结果，过期请求的结果被忽略"""
        if sequence != self._sequence:
            logger.debug(f"丢弃过期结果: 序号 {sequence}, 最新 {self._sequence}")
            return False

        self.result = result
        if isinstance(result, ComparisonError):
            self.current = None
            self.prior = None
            self.error_message = result.message
            self.state = RequestState.ERROR
        elif isinstance(result, NoDataResult):
            self.current = result.current
            self.prior = result.prior
            self.error_message = None
            self.state = RequestState.NO_DATA
        elif isinstance(result, SuccessResult):
            self.current = result.current
            self.prior = result.prior
            self.error_message = None
            self.state = RequestState.SUCCESS
        else:
            raise TypeError(f"未知的对比结果类型: {type(result).__name__}")
        return True

    def submit(
        self,
        contract_address: str,
        chain: Union[Chain, str],
        timeframe: Union[Timeframe, str],
        now: Optional[datetime] = None,
        api_key: Optional[str] = None,
    ) -> ComparisonResult:
        """
        提交查询，地址为空时同步返回错误且不发起请求

        未知的 timeframe 在进入 LOADING 之前抛出 ValueError，状态保持不变。
        """
        invalid = validate_address(contract_address)
        if invalid is not None:
            self._clear()
            self.result = invalid
            self.error_message = invalid.message
            self.state = RequestState.ERROR
            return invalid

        timeframe = Timeframe(timeframe)
        sequence = self.begin()
        now = now or datetime.now(timezone.utc)
        logger.info(f"提交查询 #{sequence}: {contract_address.strip()} ({chain}, {timeframe})")

        result = self.comparator.compare(contract_address, chain, timeframe, now, api_key=api_key)
        self.apply(sequence, result)
        return result
