"""滚动查询核心工具类."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from elasticsearch import Elasticsearch

from ..parsers import SearchHit, SearchResult
from ..typing import QueryLike
from ..utils import to_dsl_dict
from .exceptions import NoScrollIdError, ScrollClearedError
from .models import DEFAULT_KEEP_ALIVE, EOF, SortInfo, StreamEnd
from .utils import (
    body_to_kwargs,
    fetch_scroll_page,
    open_scroll,
    release_scroll,
    with_request_timeout,
)

logger = logging.getLogger(__name__)


class ScrollService:
    """滚动查询.

    第一次调用 do() 打开滚动查询并返回第一页（即使没有命中也会返回该页），
    之后每次调用使用最新的 scroll_id 获取下一页。某一页没有命中或响应中没有
    scroll_id 时，下一次调用返回 EOF，此后一直返回 EOF。

    实例不是线程安全的。使用完毕后应调用 clear() 释放服务端上下文，
    也可以作为上下文管理器使用。本类不做重试，请求失败时异常直接抛出，
    此时服务端上下文仍需调用方 clear().

    Args:
        es_client: Elasticsearch 客户端实例
        *indices: 索引名称

    Example:
        >>> with ScrollService(es_client, "users").size(100) as scroll:
        ...     while True:
        ...         page = scroll.do()
        ...         if page is EOF:
        ...             break
        ...         for hit in page.hits.hits:
        ...             print(hit.id)
    """

    def __init__(self, es_client: Elasticsearch, *indices: str):
        self.es_client = es_client
        self._indices: list[str] = list(indices)
        self._query: QueryLike = None
        self._search_source: Any = None
        self._body: dict[str, Any] | None = None
        self._sorts: list[Any] = []
        self._size: int | None = None
        self._keep_alive = DEFAULT_KEEP_ALIVE
        self._fetch_source: Any = None
        self._routing: str | None = None
        self._preference: str | None = None
        self._slice: dict[str, int] | None = None
        self._track_total_hits: bool | int | None = None
        self._ignore_unavailable: bool | None = None
        self._allow_no_indices: bool | None = None
        self._max_response_size: int | None = None
        self._request_timeout: float | None = None

        self._scroll_id: str | None = None
        self._started = False
        self._exhausted = False
        self._cleared = False

    # ========== 构建方法 ==========

    def index(self, *indices: str) -> ScrollService:
        self._indices.extend(indices)
        return self

    def query(self, query: QueryLike) -> ScrollService:
        """设置查询条件，支持原始 DSL 字典和 elasticsearch.dsl 的 Query 对象."""
        self._query = query
        return self

    def search_source(self, search: Any) -> ScrollService:
        """使用 elasticsearch.dsl.Search（或等价的请求体字典）作为请求体.

        Example:
            >>> from elasticsearch.dsl import Search
            >>> s = Search().query("match", title="python").source(["title"])
            >>> ScrollService(es_client, "blogs").search_source(s)
        """
        self._search_source = search
        return self

    def body(self, body: dict[str, Any]) -> ScrollService:
        """设置原始请求体，构建方法设置的参数优先."""
        self._body = body
        return self

    def sort(self, field: str, ascending: bool = True) -> ScrollService:
        self._sorts.append(SortInfo(field, ascending))
        return self

    def sort_with_info(self, info: SortInfo) -> ScrollService:
        self._sorts.append(info)
        return self

    def sort_by(self, *sorters: Any) -> ScrollService:
        """追加任意排序定义，如 "_score"、{"price": "desc"}."""
        self._sorts.extend(sorters)
        return self

    def size(self, size: int) -> ScrollService:
        """每页文档数."""
        self._size = size
        return self

    def keep_alive(self, keep_alive: str) -> ScrollService:
        """滚动上下文保留时间，如 "5m"."""
        self._keep_alive = keep_alive
        return self

    scroll = keep_alive

    def fetch_source(self, fetch: bool) -> ScrollService:
        """是否返回 _source."""
        self._fetch_source = fetch
        return self

    def fetch_source_context(
        self,
        includes: list[str] | None = None,
        excludes: list[str] | None = None,
    ) -> ScrollService:
        """只返回 _source 中指定的字段."""
        context: dict[str, Any] = {}
        if includes:
            context["includes"] = includes
        if excludes:
            context["excludes"] = excludes
        self._fetch_source = context
        return self

    def routing(self, routing: str) -> ScrollService:
        self._routing = routing
        return self

    def preference(self, preference: str) -> ScrollService:
        self._preference = preference
        return self

    def slice(self, slice_id: int, max_slices: int) -> ScrollService:
        """切片滚动，多个切片可以由不同的消费者并行读取."""
        self._slice = {"id": slice_id, "max": max_slices}
        return self

    def track_total_hits(self, track: bool | int) -> ScrollService:
        self._track_total_hits = track
        return self

    def ignore_unavailable(self, ignore: bool) -> ScrollService:
        self._ignore_unavailable = ignore
        return self

    def allow_no_indices(self, allow: bool) -> ScrollService:
        self._allow_no_indices = allow
        return self

    def max_response_size(self, max_bytes: int) -> ScrollService:
        """单页响应体的最大字节数，超过时抛出 ResponseSizeExceededError."""
        self._max_response_size = max_bytes
        return self

    def request_timeout(self, seconds: float) -> ScrollService:
        self._request_timeout = seconds
        return self

    def scroll_id(self, scroll_id: str) -> ScrollService:
        """从已有的 scroll_id 继续翻页，do() 不再发起首次搜索.

        Raises:
            NoScrollIdError: scroll_id 为空时抛出
        """
        if not scroll_id:
            raise NoScrollIdError("elastic: no scroll id to resume from")
        self._scroll_id = scroll_id
        self._started = True
        return self

    # ========== 执行 ==========

    @property
    def current_scroll_id(self) -> str | None:
        return self._scroll_id

    def _build_search_kwargs(self) -> dict[str, Any]:
        kwargs = body_to_kwargs(to_dsl_dict(self._search_source))
        kwargs.update(body_to_kwargs(self._body))
        kwargs["scroll"] = self._keep_alive or DEFAULT_KEEP_ALIVE
        if self._indices:
            kwargs["index"] = ",".join(self._indices)
        if self._query is not None:
            kwargs["query"] = to_dsl_dict(self._query)
        if self._sorts:
            kwargs["sort"] = [
                s.source() if isinstance(s, SortInfo) else to_dsl_dict(s) for s in self._sorts
            ]
        if self._size is not None and self._size > 0:
            kwargs["size"] = self._size
        if self._fetch_source is not None:
            kwargs["source"] = self._fetch_source
        if self._routing:
            kwargs["routing"] = self._routing
        if self._preference:
            kwargs["preference"] = self._preference
        if self._slice is not None:
            kwargs["slice"] = self._slice
        if self._track_total_hits is not None:
            kwargs["track_total_hits"] = self._track_total_hits
        if self._ignore_unavailable is not None:
            kwargs["ignore_unavailable"] = self._ignore_unavailable
        if self._allow_no_indices is not None:
            kwargs["allow_no_indices"] = self._allow_no_indices
        return kwargs

    def do(self) -> SearchResult | StreamEnd:
        """获取下一页.

        Returns:
            下一页的 SearchResult，没有更多数据时返回 EOF

        Raises:
            ScrollClearedError: clear() 之后调用时抛出
            SearchEngineError: ES 拒绝请求时抛出（滚动上下文过期为 ResourceNotFoundError）
            ResponseSizeExceededError: 响应体超过限制时抛出
        """
        if self._cleared:
            raise ScrollClearedError("elastic: scroll context has been cleared")
        if self._exhausted:
            return EOF

        client = with_request_timeout(self.es_client, self._request_timeout)

        if not self._started:
            page = open_scroll(client, self._build_search_kwargs(), self._max_response_size)
            self._started = True
            logger.info(
                f"滚动查询已打开: indices={self._indices or ['_all']}, 命中总数 {page.total_hits()}"
            )
            self._advance(page)
            return page

        if not self._scroll_id:
            self._exhausted = True
            return EOF

        page = fetch_scroll_page(client, self._scroll_id, self._keep_alive, self._max_response_size)
        self._advance(page)
        if not page.has_hits():
            logger.debug("滚动查询结束")
            return EOF
        logger.debug(f"滚动翻页，本页 {len(page.hits)} 条")
        return page

    def _advance(self, page: SearchResult) -> None:
        # 旧的 scroll_id 保留下来，clear() 时仍可释放上下文
        if page.scroll_id:
            self._scroll_id = page.scroll_id
        if not page.has_hits() or not page.scroll_id:
            self._exhausted = True

    def __iter__(self) -> Iterator[SearchResult]:
        while True:
            page = self.do()
            if page is EOF:
                return
            yield page

    def iter_hits(self) -> Iterator[SearchHit]:
        """逐条返回命中文档."""
        for page in self:
            yield from page.hits.hits

    def clear(self) -> None:
        """释放服务端的滚动上下文，之后调用 do() 会抛出 ScrollClearedError."""
        if self._cleared:
            return
        if self._scroll_id:
            release_scroll(self.es_client, self._scroll_id)
        self._cleared = True

    def __enter__(self) -> ScrollService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()
