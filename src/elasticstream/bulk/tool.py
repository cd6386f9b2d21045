"""批量请求核心工具类."""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, Elasticsearch

from ..exceptions import ResponseDecodeError, translate_api_error
from .exceptions import BulkValidationError
from .models import BulkResponse
from .requests import BulkableRequest

logger = logging.getLogger(__name__)


class BulkService:
    """批量请求.

    按顺序累积 index/create/update/delete 操作，以一次 NDJSON 请求提交到 _bulk 接口。

    提交语义:
    - 传输层异常（连接失败、超时）整体失败，原样抛出，不返回部分结果
    - 整个请求被 ES 拒绝（4xx/5xx）时抛出 SearchEngineError
    - 单个操作失败（如版本冲突）不抛出异常，需通过响应的 failed()/succeeded() 检查

    本类不做任何重试，也不限制批次大小，由调用方根据 number_of_actions()
    或 estimated_size_in_bytes() 决定何时提交。实例不是线程安全的。

    Args:
        es_client: Elasticsearch 客户端实例
        index: 默认索引，操作未指定索引时使用
        refresh: 提交后的刷新策略（True、False 或 "wait_for"）
        routing: 默认路由
        pipeline: 默认 ingest pipeline
        timeout: 服务端等待活跃分片的超时时间，如 "1m"
        wait_for_active_shards: 需要的活跃分片数
        request_timeout: 客户端请求超时时间（秒）

    Example:
        >>> bulk = BulkService(es_client, index="users")
        >>> bulk.add(BulkIndexRequest(id="1", doc={"name": "Alice"}))
        >>> bulk.add(BulkDeleteRequest(id="2"))
        >>> response = bulk.do()
        >>> print(len(response.succeeded()), len(response.failed()))
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        index: str | None = None,
        refresh: bool | str | None = None,
        routing: str | None = None,
        pipeline: str | None = None,
        timeout: str | None = None,
        wait_for_active_shards: int | str | None = None,
        request_timeout: float | None = None,
    ):
        self.es_client = es_client
        self.index = index
        self.refresh = refresh
        self.routing = routing
        self.pipeline = pipeline
        self.timeout = timeout
        self.wait_for_active_shards = wait_for_active_shards
        self.request_timeout = request_timeout
        self._requests: list[BulkableRequest] = []

    def add(self, *requests: BulkableRequest) -> BulkService:
        """追加一个或多个操作.

        Returns:
            self，支持链式调用
        """
        self._requests.extend(requests)
        return self

    def number_of_actions(self) -> int:
        """当前排队的操作数."""
        return len(self._requests)

    def reset(self) -> None:
        """清空排队的操作."""
        self._requests = []

    def body_as_string(self) -> str:
        """生成 NDJSON 请求体，每行以换行符结尾."""
        lines: list[str] = []
        for request in self._requests:
            lines.extend(request.source())
        return "".join(f"{line}\n" for line in lines)

    def estimated_size_in_bytes(self) -> int:
        """请求体的 UTF-8 字节数."""
        return len(self.body_as_string().encode("utf-8"))

    def _build_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.index:
            params["index"] = self.index
        if self.refresh is not None:
            params["refresh"] = self.refresh
        if self.routing:
            params["routing"] = self.routing
        if self.pipeline:
            params["pipeline"] = self.pipeline
        if self.timeout:
            params["timeout"] = self.timeout
        if self.wait_for_active_shards is not None:
            params["wait_for_active_shards"] = self.wait_for_active_shards
        return params

    def _client(self) -> Elasticsearch:
        if self.request_timeout is not None:
            return self.es_client.options(request_timeout=self.request_timeout)
        return self.es_client

    def do(self) -> BulkResponse:
        """提交所有排队的操作.

        成功后清空队列，实例可以继续复用.

        Returns:
            批量响应，items 与提交的操作一一对应

        Raises:
            BulkValidationError: 没有任何排队的操作时抛出
            SearchEngineError: 整个请求被 ES 拒绝时抛出
            ResponseDecodeError: 响应结构不正确时抛出
        """
        if not self._requests:
            raise BulkValidationError("elastic: No bulk actions to commit")

        body = self.body_as_string()
        params = self._build_params()
        action_count = len(self._requests)

        try:
            response = self._client().bulk(operations=body, **params)
        except ApiError as e:
            logger.error(f"批量提交被拒绝: {e}")
            raise translate_api_error(e) from e

        result = BulkResponse.from_dict(response)
        if len(result.items) != action_count:
            raise ResponseDecodeError(
                f"批量响应项数量 ({len(result.items)}) 与提交的操作数 ({action_count}) 不一致"
            )

        failed = result.failed()
        if failed:
            logger.warning(
                f"批量提交完成: 共 {action_count} 个操作, 失败 {len(failed)}, 耗时 {result.took}ms"
            )
        else:
            logger.info(f"批量提交完成: 全部成功 ({action_count}), 耗时 {result.took}ms")

        self.reset()
        return result
