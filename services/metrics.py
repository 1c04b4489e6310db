"""
销售指标解析与格式化

接口返回的指标值可能是数字、数字字符串或任意文本。
在解析时统一转换为 MetricValue，后续格式化与涨跌幅计算不再做类型探测。
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# (显示名称, 接口字段)
METRICS: List[Tuple[str, str]] = [
    ("Total Sales", "total_sales"),
    ("Unique Tokens", "total_unique_tokens"),
    ("Average Price (USD)", "avg_price_usd"),
    ("Max Price (USD)", "max_price_usd"),
    ("Total Sales Volume (USD)", "total_sales_volume_usd"),
]

METRIC_KEYS = [key for _, key in METRICS]


def _to_number(raw: Any) -> Optional[float]:
    """转换为有限浮点数，无法转换返回 None"""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            number = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


@dataclass(frozen=True)
class MetricValue:
    """
    单个指标值

    raw 为接口原始值；number 为其对应的有限数值，非数值时为 None。
    """
    raw: Any
    number: Optional[float] = None

    @classmethod
    def parse(cls, raw: Any) -> "MetricValue":
        if isinstance(raw, MetricValue):
            return raw
        return cls(raw=raw, number=_to_number(raw))

    @property
    def is_numeric(self) -> bool:
        return self.number is not None

    @property
    def is_numeric_text(self) -> bool:
        return isinstance(self.raw, str) and self.number is not None


@dataclass(frozen=True)
class Snapshot:
    """某一截止时间的销售指标快照"""
    metrics: Dict[str, MetricValue]
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "Snapshot":
        """解析接口返回的 JSON 对象，缺失字段按 None 处理"""
        if not isinstance(payload, dict):
            raise ValueError(f"快照数据格式错误: {type(payload).__name__}")
        metrics = {key: MetricValue.parse(payload.get(key)) for key in METRIC_KEYS}
        return cls(metrics=metrics, payload=payload)

    def get(self, key: str) -> MetricValue:
        return self.metrics.get(key, MetricValue(raw=None))

    @property
    def total_sales(self) -> MetricValue:
        return self.get("total_sales")

    @property
    def has_no_sales(self) -> bool:
        return self.total_sales.number == 0


def format_metric(value: Any) -> Any:
    """数字字符串保留两位小数，其他值原样返回"""
    value = MetricValue.parse(value)
    if value.is_numeric_text:
        return f"{value.number:.2f}"
    return value.raw


def percent_change(prior: Any, current: Any) -> Optional[str]:
    """
    计算涨跌幅（百分比，两位小数）

    任一值非数值或 prior 为 0 时返回 None，不抛异常。
    """
    prior_number = MetricValue.parse(prior).number
    current_number = MetricValue.parse(current).number
    if prior_number is None or current_number is None or prior_number == 0:
        return None
    change = (current_number / prior_number - 1) * 100
    if not math.isfinite(change):
        return None
    return f"{change:.2f}"


def display_change(change: Optional[str]) -> str:
    """涨跌幅显示文本，正数加 + 号"""
    if change is None:
        return ""
    if float(change) > 0:
        return f"+{change}%"
    return f"{change}%"
