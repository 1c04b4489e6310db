"""
查询时间窗口计算

根据所选时间范围得出天数、聚合粒度，以及两个快照的截止时间：
当前（now）和往期（now 减去天数）。
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Tuple, Union


class Timeframe(str, Enum):
    """时间范围"""
    ONE_DAY = "1_DAY"
    SEVEN_DAYS = "7_DAYS"
    THIRTY_DAYS = "30_DAYS"


class BinSize(str, Enum):
    """聚合粒度"""
    ONE_HOUR = "1_HOUR"
    ONE_DAY = "1_DAY"


class Chain(str, Enum):
    """支持的链"""
    ETH_MAIN = "eth-main"
    ARBITRUM_MAIN = "arbitrum-main"
    OPTIMISM_MAIN = "optimism-main"
    POLY_MAIN = "poly-main"
    BSC_MAIN = "bsc-main"
    ETH_GOERLI = "eth-goerli"


DAY_COUNTS = {
    Timeframe.ONE_DAY: 1,
    Timeframe.SEVEN_DAYS: 7,
    Timeframe.THIRTY_DAYS: 30,
}

BIN_SIZES = {
    Timeframe.ONE_DAY: BinSize.ONE_HOUR,
    Timeframe.SEVEN_DAYS: BinSize.ONE_DAY,
    Timeframe.THIRTY_DAYS: BinSize.ONE_DAY,
}

TIMEFRAME_LABELS = {
    Timeframe.ONE_DAY: "1 Day",
    Timeframe.SEVEN_DAYS: "7 Days",
    Timeframe.THIRTY_DAYS: "30 Days",
}


@dataclass(frozen=True)
class QueryWindow:
    """单个快照查询窗口"""
    end: datetime
    day_count: int

    @property
    def timestamp_end(self) -> str:
        return format_timestamp(self.end)


def day_count(timeframe: Union[Timeframe, str]) -> int:
    return DAY_COUNTS[Timeframe(timeframe)]


def bin_size_for(timeframe: Union[Timeframe, str]) -> BinSize:
    return BIN_SIZES[Timeframe(timeframe)]


def timeframe_for_days(days: int) -> Timeframe:
    """根据天数反查时间范围"""
    for timeframe, count in DAY_COUNTS.items():
        if count == days:
            return timeframe
    raise ValueError(f"没有对应 {days} 天的时间范围")


def compute_windows(
    timeframe: Union[Timeframe, str], now: datetime
) -> Tuple[QueryWindow, QueryWindow, BinSize]:
    """
    计算当前与往期两个查询窗口

    now 由调用方传入（必须带时区），函数本身不读取系统时间。
    未知的 timeframe 或不带时区的 now 直接抛出 ValueError。
    """
    timeframe = Timeframe(timeframe)
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now 必须是带时区的时间")

    now = now.astimezone(timezone.utc)
    days = DAY_COUNTS[timeframe]

    current = QueryWindow(end=now, day_count=days)
    prior = QueryWindow(end=now - timedelta(days=days), day_count=days)
    return current, prior, BIN_SIZES[timeframe]


def format_timestamp(dt: datetime) -> str:
    """格式化为 ISO-8601 UTC 时间（毫秒精度，Z 结尾）"""
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def describe_days(days: int) -> str:
    return f"{days} day" if days == 1 else f"{days} days"
