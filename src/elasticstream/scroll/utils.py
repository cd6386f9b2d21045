"""滚动查询通用函数.

ScanService 与 ScrollService 共用的请求构建、响应校验和上下文释放逻辑.
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, Elasticsearch, NotFoundError

from ..exceptions import translate_api_error
from ..parsers import SearchResult
from ..utils import response_size, to_dsl_dict
from .exceptions import ResponseSizeExceededError

logger = logging.getLogger(__name__)

# 原始请求体中与客户端参数名不一致的字段
_BODY_KEY_ALIASES = {"_source": "source", "from": "from_"}


def body_to_kwargs(body: dict[str, Any] | None) -> dict[str, Any]:
    """将原始搜索请求体转换为 client.search() 的关键字参数.

    Examples:
        >>> body_to_kwargs({"query": {"match_all": {}}, "_source": False})
        {'query': {'match_all': {}}, 'source': False}
    """
    if not body:
        return {}
    return {_BODY_KEY_ALIASES.get(key, key): to_dsl_dict(value) for key, value in body.items()}


def with_request_timeout(es_client: Elasticsearch, request_timeout: float | None) -> Elasticsearch:
    """返回带请求超时的客户端，未设置超时时返回原客户端."""
    if request_timeout is None:
        return es_client
    return es_client.options(request_timeout=request_timeout)


def decode_page(response: Any, max_response_size: int | None) -> SearchResult:
    """校验响应大小并解析为 SearchResult.

    Raises:
        ResponseSizeExceededError: 响应体超过 max_response_size 时抛出
        ResponseDecodeError: 响应结构不正确时抛出
    """
    if max_response_size is not None:
        size = response_size(response)
        if size > max_response_size:
            raise ResponseSizeExceededError(size, max_response_size)
    return SearchResult.from_dict(response)


def open_scroll(
    es_client: Elasticsearch,
    search_kwargs: dict[str, Any],
    max_response_size: int | None = None,
) -> SearchResult:
    """发起带 scroll 参数的搜索请求，返回第一页."""
    try:
        response = es_client.search(**search_kwargs)
    except ApiError as e:
        logger.error(f"打开滚动查询失败: {e}")
        raise translate_api_error(e) from e
    return decode_page(response, max_response_size)


def fetch_scroll_page(
    es_client: Elasticsearch,
    scroll_id: str,
    keep_alive: str,
    max_response_size: int | None = None,
) -> SearchResult:
    """使用 scroll_id 获取下一页.

    滚动上下文过期时 ES 返回 404，转换为 ResourceNotFoundError 抛出.
    """
    try:
        response = es_client.scroll(scroll_id=scroll_id, scroll=keep_alive)
    except ApiError as e:
        logger.error(f"滚动翻页失败: {e}")
        raise translate_api_error(e) from e
    return decode_page(response, max_response_size)


def release_scroll(es_client: Elasticsearch, scroll_id: str) -> None:
    """释放服务端的滚动上下文.

    上下文已过期或已被释放时 ES 返回 404，此时只记录日志，不抛出异常.
    """
    try:
        es_client.clear_scroll(scroll_id=scroll_id)
    except NotFoundError:
        logger.warning("滚动上下文已不存在，无需清除")
        return
    except ApiError as e:
        raise translate_api_error(e) from e
    logger.info("滚动上下文已清除")
