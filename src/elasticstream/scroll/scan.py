"""扫描游标模块.

ScanService 打开一个滚动查询并返回 ScanCursor，游标通过 next() 逐页翻页，
翻页结束时返回 EOS.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from elasticsearch import Elasticsearch

from ..parsers import SearchResult
from ..typing import QueryLike
from ..utils import to_dsl_dict
from .exceptions import ScrollClearedError
from .models import DEFAULT_KEEP_ALIVE, EOS, SortInfo, StreamEnd
from .utils import (
    body_to_kwargs,
    fetch_scroll_page,
    open_scroll,
    release_scroll,
    with_request_timeout,
)

logger = logging.getLogger(__name__)


class ScanCursor:
    """扫描游标.

    results 保存当前页，创建时即为第一页。游标在以下任一情况下结束:
        - 当前页没有命中文档
        - 命中总数为 0
        - 响应中没有 scroll_id
        - 服务端返回空页

    游标不是线程安全的。使用完毕后应调用 clear() 释放服务端上下文，
    也可以作为上下文管理器使用.

    Example:
        >>> with ScanService(es_client, "users").size(100).do() as cursor:
        ...     for page in cursor:
        ...         handle(page.hits.hits)
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        keep_alive: str,
        results: SearchResult,
        max_response_size: int | None = None,
    ):
        self.es_client = es_client
        self.keep_alive = keep_alive or DEFAULT_KEEP_ALIVE
        self.results = results
        self.max_response_size = max_response_size
        self.scroll_id = results.scroll_id
        self.current_page = 0
        self._exhausted = False
        self._cleared = False

    def total_hits(self) -> int:
        """命中总数."""
        return self.results.total_hits()

    def _at_end(self) -> bool:
        return (
            not self.results.has_hits()
            or self.results.total_hits() == 0
            or not self.results.scroll_id
        )

    def next(self) -> SearchResult | StreamEnd:
        """获取下一页.

        Returns:
            下一页的 SearchResult，没有更多数据时返回 EOS

        Raises:
            ScrollClearedError: 游标已被清除后调用时抛出
        """
        if self._cleared:
            raise ScrollClearedError("elastic: scroll context has been cleared")
        if self._exhausted or self._at_end():
            self._exhausted = True
            return EOS

        page = fetch_scroll_page(
            self.es_client,
            self.results.scroll_id,
            self.keep_alive,
            self.max_response_size,
        )
        if page.scroll_id:
            self.scroll_id = page.scroll_id
        if not page.has_hits():
            logger.debug(f"扫描结束，共翻页 {self.current_page} 次")
            self._exhausted = True
            return EOS

        self.results = page
        self.current_page += 1
        logger.debug(f"扫描第 {self.current_page} 页，本页 {len(page.hits)} 条")
        return page

    def __iter__(self) -> Iterator[SearchResult]:
        if self.current_page == 0 and self.results.has_hits():
            yield self.results
        while True:
            page = self.next()
            if page is EOS:
                return
            yield page

    def clear(self) -> None:
        """释放服务端的滚动上下文，之后调用 next() 会抛出 ScrollClearedError."""
        if self._cleared:
            return
        if self.scroll_id:
            release_scroll(self.es_client, self.scroll_id)
        self._cleared = True

    def __enter__(self) -> ScanCursor:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()


class ScanService:
    """扫描服务.

    按查询条件打开滚动查询，返回第一页已就绪的 ScanCursor。未指定排序时使用 _doc 排序，
    这是遍历全部文档最高效的方式.

    Args:
        es_client: Elasticsearch 客户端实例
        *indices: 索引名称，可以为空（搜索所有索引）

    Example:
        >>> cursor = (
        ...     ScanService(es_client, "logs-*")
        ...     .query({"term": {"level": "error"}})
        ...     .size(500)
        ...     .keep_alive("2m")
        ...     .do()
        ... )
        >>> print(cursor.total_hits())
    """

    def __init__(self, es_client: Elasticsearch, *indices: str):
        self.es_client = es_client
        self._indices: list[str] = list(indices)
        self._query: QueryLike = None
        self._sorts: list[Any] = []
        self._fields: list[str] | None = None
        self._size: int | None = None
        self._keep_alive = DEFAULT_KEEP_ALIVE
        self._body: dict[str, Any] | None = None
        self._routing: str | None = None
        self._preference: str | None = None
        self._max_response_size: int | None = None
        self._request_timeout: float | None = None

    # ========== 构建方法 ==========

    def index(self, *indices: str) -> ScanService:
        self._indices.extend(indices)
        return self

    def query(self, query: QueryLike) -> ScanService:
        """设置查询条件，支持原始 DSL 字典和 elasticsearch.dsl 的 Query 对象."""
        self._query = query
        return self

    def sort(self, field: str, ascending: bool = True) -> ScanService:
        self._sorts.append(SortInfo(field, ascending))
        return self

    def sort_with_info(self, info: SortInfo) -> ScanService:
        self._sorts.append(info)
        return self

    def fields(self, *fields: str) -> ScanService:
        """只返回指定的 stored fields."""
        self._fields = list(fields)
        return self

    def size(self, size: int) -> ScanService:
        """每页文档数."""
        self._size = size
        return self

    def keep_alive(self, keep_alive: str) -> ScanService:
        """滚动上下文保留时间，如 "5m"."""
        self._keep_alive = keep_alive
        return self

    scroll = keep_alive

    def body(self, body: dict[str, Any]) -> ScanService:
        """设置原始请求体，构建方法设置的参数优先."""
        self._body = body
        return self

    def routing(self, routing: str) -> ScanService:
        self._routing = routing
        return self

    def preference(self, preference: str) -> ScanService:
        self._preference = preference
        return self

    def max_response_size(self, max_bytes: int) -> ScanService:
        """单页响应体的最大字节数，超过时抛出 ResponseSizeExceededError."""
        self._max_response_size = max_bytes
        return self

    def request_timeout(self, seconds: float) -> ScanService:
        self._request_timeout = seconds
        return self

    # ========== 执行 ==========

    def _build_search_kwargs(self) -> dict[str, Any]:
        kwargs = body_to_kwargs(self._body)
        kwargs["scroll"] = self._keep_alive or DEFAULT_KEEP_ALIVE
        if self._indices:
            kwargs["index"] = ",".join(self._indices)
        if self._query is not None:
            kwargs["query"] = to_dsl_dict(self._query)
        if self._sorts:
            kwargs["sort"] = [
                s.source() if isinstance(s, SortInfo) else to_dsl_dict(s) for s in self._sorts
            ]
        elif "sort" not in kwargs:
            kwargs["sort"] = ["_doc"]
        if self._size is not None and self._size > 0:
            kwargs["size"] = self._size
        if self._fields is not None:
            kwargs["stored_fields"] = self._fields
        if self._routing:
            kwargs["routing"] = self._routing
        if self._preference:
            kwargs["preference"] = self._preference
        return kwargs

    def do(self) -> ScanCursor:
        """打开滚动查询.

        Returns:
            第一页已就绪的 ScanCursor

        Raises:
            SearchEngineError: ES 拒绝请求时抛出
            ResponseSizeExceededError: 第一页响应体超过限制时抛出
        """
        client = with_request_timeout(self.es_client, self._request_timeout)
        results = open_scroll(client, self._build_search_kwargs(), self._max_response_size)
        logger.info(
            f"扫描已打开: indices={self._indices or ['_all']}, 命中总数 {results.total_hits()}"
        )
        return ScanCursor(client, self._keep_alive, results, self._max_response_size)
