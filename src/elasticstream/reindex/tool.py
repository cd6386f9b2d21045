"""重建索引核心工具类."""

from __future__ import annotations

import logging

from elasticsearch import ApiError, Elasticsearch, TransportError

from ..bulk import BulkIndexRequest, BulkService
from ..exceptions import ElasticStreamError, ResponseDecodeError, translate_api_error
from ..parsers import SearchHit
from ..scroll import DEFAULT_KEEP_ALIVE, ScanCursor, ScanService
from ..typing import ProgressFunc, QueryLike
from ..utils import response_body, to_dsl_dict
from .exceptions import ReindexConfigError, ReindexError
from .models import ReindexerResponse

logger = logging.getLogger(__name__)

DEFAULT_BULK_SIZE = 500


class Reindexer:
    """重建索引.

    使用扫描游标读取源索引中的文档，按原文档ID写入目标索引。目标客户端为空时写回源集群。
    每累积 bulk_size 个操作提交一次，扫描结束后再提交剩余的操作。

    单个文档写入失败只计入 failed，不会中断；请求失败、响应无法解析或 ES 拒绝请求时
    立即中止并抛出 ReindexError，异常的 response 属性保存已完成部分的统计。
    无论成功与否，结束时都会释放源集群的滚动上下文。

    Args:
        source_client: 源集群客户端
        source_index: 源索引
        target_index: 目标索引
        target_client: 目标集群客户端，默认与源客户端相同
        query: 只复制匹配该查询的文档
        bulk_size: 每批提交的操作数，默认 500
        scroll: 滚动上下文保留时间，默认 "5m"
        progress: 进度回调 progress(current, total)，设置后会先统计文档总数
        stats_only: 为 False 时在响应中保留失败项详情

    Example:
        >>> def on_progress(current, total):
        ...     print(f"{current}/{total}")
        >>> reindexer = Reindexer(
        ...     source_client,
        ...     "orders-2023",
        ...     "orders-archive",
        ...     target_client=archive_client,
        ...     progress=on_progress,
        ... )
        >>> response = reindexer.do()
    """

    def __init__(
        self,
        source_client: Elasticsearch,
        source_index: str,
        target_index: str,
        target_client: Elasticsearch | None = None,
        query: QueryLike = None,
        bulk_size: int = DEFAULT_BULK_SIZE,
        scroll: str = DEFAULT_KEEP_ALIVE,
        progress: ProgressFunc | None = None,
        stats_only: bool = True,
    ):
        self.source_client = source_client
        self.source_index = source_index
        self.target_index = target_index
        self.target_client = target_client
        self._query = query
        self.bulk_size = bulk_size
        self._scroll = scroll
        self._progress = progress
        self._stats_only = stats_only

    # ========== 构建方法 ==========

    def with_target_client(self, client: Elasticsearch) -> Reindexer:
        self.target_client = client
        return self

    def query(self, query: QueryLike) -> Reindexer:
        self._query = query
        return self

    def with_bulk_size(self, size: int) -> Reindexer:
        self.bulk_size = size
        return self

    def scroll(self, keep_alive: str) -> Reindexer:
        self._scroll = keep_alive
        return self

    def progress(self, func: ProgressFunc) -> Reindexer:
        self._progress = func
        return self

    def stats_only(self, stats_only: bool) -> Reindexer:
        self._stats_only = stats_only
        return self

    # ========== 执行 ==========

    def _validate(self) -> None:
        if self.source_client is None:
            raise ReindexConfigError("缺少源集群客户端")
        if not self.source_index:
            raise ReindexConfigError("缺少源索引")
        if not self.target_index:
            raise ReindexConfigError("缺少目标索引")
        if self.bulk_size <= 0:
            self.bulk_size = DEFAULT_BULK_SIZE
        if not self._scroll:
            self._scroll = DEFAULT_KEEP_ALIVE

    def do(self) -> ReindexerResponse:
        """执行重建索引.

        Returns:
            重建索引的统计结果

        Raises:
            ReindexConfigError: 配置不完整时抛出
            ReindexError: 重建过程中失败时抛出
        """
        self._validate()
        response = ReindexerResponse()
        target_client = self.target_client or self.source_client
        cursor: ScanCursor | None = None

        logger.info(f"开始重建索引: {self.source_index} -> {self.target_index}")
        try:
            total = self._count() if self._progress else 0

            scanner = ScanService(self.source_client, self.source_index).scroll(self._scroll)
            scanner.size(self.bulk_size)
            if self._query is not None:
                scanner.query(self._query)
            cursor = scanner.do()

            bulk = BulkService(target_client, index=self.target_index)
            current = 0
            for page in cursor:
                for hit in page.hits.hits:
                    if self._progress:
                        current += 1
                        self._progress(current, total)
                    bulk.add(self._to_index_request(hit))
                    if bulk.number_of_actions() >= self.bulk_size:
                        self._commit(bulk, response)

            if bulk.number_of_actions() > 0:
                self._commit(bulk, response)
        except (ApiError, TransportError, ElasticStreamError) as e:
            logger.error(
                f"重建索引失败: {e}，已成功 {response.success}，失败 {response.failed}"
            )
            raise ReindexError(f"elastic: reindex failed: {e}", response) from e
        finally:
            if cursor is not None:
                self._release(cursor)

        logger.info(
            f"重建索引完成: 成功 {response.success}，失败 {response.failed}，"
            f"提交 {response.bulk_commits} 次"
        )
        return response

    def _count(self) -> int:
        kwargs = {"index": self.source_index}
        if self._query is not None:
            kwargs["query"] = to_dsl_dict(self._query)
        try:
            result = self.source_client.count(**kwargs)
        except ApiError as e:
            raise translate_api_error(e) from e
        data = response_body(result)
        if not isinstance(data, dict) or "count" not in data:
            raise ResponseDecodeError(f"count 响应格式不正确: {data!r}")
        return int(data["count"])

    def _to_index_request(self, hit: SearchHit) -> BulkIndexRequest:
        if not isinstance(hit.source, dict):
            raise ResponseDecodeError(f"文档 {hit.id} 没有可用的 _source")
        return BulkIndexRequest(
            index=self.target_index,
            id=hit.id,
            type=hit.type,
            routing=hit.routing,
            doc=hit.source,
        )

    def _commit(self, bulk: BulkService, response: ReindexerResponse) -> None:
        result = bulk.do()
        response.add_bulk_response(result, self._stats_only)
        logger.debug(
            f"重建索引第 {response.bulk_commits} 次提交: 累计成功 {response.success}，"
            f"累计失败 {response.failed}"
        )

    def _release(self, cursor: ScanCursor) -> None:
        try:
            cursor.clear()
        except (ApiError, TransportError, ElasticStreamError) as e:
            logger.warning(f"释放滚动上下文失败: {e}")
