"""Point-in-time 模块.

point-in-time 为搜索提供一致的数据视图，配合 search_after 可以替代滚动查询.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from elasticsearch import ApiError, Elasticsearch, NotFoundError

from ..exceptions import ResponseDecodeError, translate_api_error
from ..utils import response_body

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointInTime:
    """point-in-time 引用.

    Attributes:
        id: 服务端返回的 PIT ID，原样回传，不做解析
        keep_alive: 本次请求后 PIT 的保留时间，如 "1m"

    Examples:
        >>> PointInTime("46ToAwMDaWR5", "1m").source()
        {'id': '46ToAwMDaWR5', 'keep_alive': '1m'}
    """

    id: str
    keep_alive: str | None = None

    def source(self) -> dict[str, Any]:
        source: dict[str, Any] = {"id": self.id}
        if self.keep_alive:
            source["keep_alive"] = self.keep_alive
        return source


def open_point_in_time(es_client: Elasticsearch, index: str, keep_alive: str) -> PointInTime:
    """打开 point-in-time.

    Raises:
        SearchEngineError: ES 拒绝请求时抛出
        ResponseDecodeError: 响应中没有 PIT ID 时抛出
    """
    try:
        response = es_client.open_point_in_time(index=index, keep_alive=keep_alive)
    except ApiError as e:
        raise translate_api_error(e) from e

    data = response_body(response)
    pit_id = data.get("id") if isinstance(data, dict) else None
    if not pit_id:
        raise ResponseDecodeError(f"open point-in-time 响应中没有 id: {data!r}")
    logger.info(f"point-in-time 已打开: index={index}, keep_alive={keep_alive}")
    return PointInTime(pit_id, keep_alive)


def close_point_in_time(es_client: Elasticsearch, pit: PointInTime | str) -> None:
    """关闭 point-in-time，PIT 已不存在（404）时只记录日志."""
    pit_id = pit.id if isinstance(pit, PointInTime) else pit
    try:
        es_client.close_point_in_time(id=pit_id)
    except NotFoundError:
        logger.warning("point-in-time 已不存在，无需关闭")
        return
    except ApiError as e:
        raise translate_api_error(e) from e
    logger.info("point-in-time 已关闭")
