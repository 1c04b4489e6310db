"""
Blockspan NFT 历史数据 API 封装

文档: https://docs.blockspan.com/reference/getnfthistory
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import requests

from config import BLOCKSPAN_API_KEY, BLOCKSPAN_BASE_URL, PROXIES, REQUEST_TIMEOUT
from services.metrics import Snapshot
from services.windows import BinSize, Chain, Timeframe

logger = logging.getLogger(__name__)

NFT_HISTORY_ENDPOINT = "/v1/nfts/nfthistory"


class FetchStatus(Enum):
    """单次请求结果分类"""
    OK = "ok"
    AUTH_FAILED = "auth_failed"
    QUERY_FAILED = "query_failed"


@dataclass(frozen=True)
class FetchResult:
    """单次快照请求结果，请求失败时 snapshot 为 None"""
    status: FetchStatus
    snapshot: Optional[Snapshot] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK

    @classmethod
    def auth_failed(cls, status_code: int = 401) -> "FetchResult":
        return cls(status=FetchStatus.AUTH_FAILED, status_code=status_code)

    @classmethod
    def query_failed(cls, status_code: Optional[int] = None) -> "FetchResult":
        return cls(status=FetchStatus.QUERY_FAILED, status_code=status_code)


def _value(item: Union[Enum, str]) -> str:
    return item.value if isinstance(item, Enum) else str(item)


class BlockspanAPI:
    """Blockspan API 客户端"""

    def __init__(
        self,
        api_key: str = BLOCKSPAN_API_KEY,
        base_url: str = BLOCKSPAN_BASE_URL,
        proxies: dict = None,
    ):
        self.base_url = base_url
        self.proxies = proxies or PROXIES
        self.session = requests.Session()
        self.session.headers.update({
            "accept": "application/json",
            "X-API-KEY": api_key,
        })

    def _request(self, endpoint: str, params: Dict[str, str], api_key: Optional[str] = None) -> Any:
        """发送 API 请求，HTTP 错误以异常形式抛出"""
        url = f"{self.base_url}{endpoint}"
        headers = {"X-API-KEY": api_key} if api_key else None
        response = self.session.get(
            url,
            params=params,
            headers=headers,
            timeout=REQUEST_TIMEOUT,
            proxies=self.proxies,
        )
        response.raise_for_status()
        return response.json()

    def get_nft_history(
        self,
        contract_address: str,
        chain: Union[Chain, str],
        timeframe: Union[Timeframe, str],
        bin_size: Union[BinSize, str],
        timestamp_end: str,
        api_key: Optional[str] = None,
    ) -> FetchResult:
        """获取截止到 timestamp_end 的销售指标快照"""
        params = {
            "timestamp_end": timestamp_end,
            "contract_address": contract_address,
            "chain": _value(chain),
            "timeframe": _value(timeframe),
            "bin_size": _value(bin_size),
        }
        url = f"{self.base_url}{NFT_HISTORY_ENDPOINT}"

        try:
            payload = self._request(NFT_HISTORY_ENDPOINT, params, api_key=api_key)
            snapshot = Snapshot.from_payload(payload)
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code == 401:
                logger.warning(f"Blockspan API 密钥无效: {url}")
                return FetchResult.auth_failed(status_code)
            logger.warning(f"Blockspan API 请求失败: {url}, 状态码: {status_code}")
            return FetchResult.query_failed(status_code)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Blockspan API 请求失败: {url}, 错误: {e}")
            return FetchResult.query_failed()
        except ValueError as e:
            logger.warning(f"Blockspan API 返回数据无法解析: {url}, 错误: {e}")
            return FetchResult.query_failed()

        return FetchResult(status=FetchStatus.OK, snapshot=snapshot, status_code=200)


# 创建默认实例
blockspan_api = BlockspanAPI()
