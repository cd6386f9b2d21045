"""批量请求模块.

该模块提供 Elasticsearch Bulk API 的请求构建与提交功能，包括：
- index/create/update/delete 操作的 NDJSON 序列化
- 批量提交与逐项结果核对（部分成功不视为异常）

示例用法:
    >>> from elasticstream.bulk import BulkService, BulkIndexRequest
    >>> bulk = BulkService(es_client, index="users")
    >>> bulk.add(BulkIndexRequest(id="1", doc={"name": "Alice"}))
    >>> response = bulk.do()
    >>> print(f"成功: {len(response.succeeded())}, 失败: {len(response.failed())}")
"""

from .exceptions import (
    BulkOperationError,
    BulkSerializationError,
    BulkValidationError,
)
from .models import (
    BulkAction,
    BulkErrorDetails,
    BulkResponse,
    BulkResponseItem,
)
from .requests import (
    BulkableRequest,
    BulkDeleteRequest,
    BulkIndexRequest,
    BulkUpdateRequest,
    encode_document,
)
from .tool import BulkService

__all__ = [
    "BulkAction",
    "BulkErrorDetails",
    "BulkResponse",
    "BulkResponseItem",
    "BulkableRequest",
    "BulkIndexRequest",
    "BulkUpdateRequest",
    "BulkDeleteRequest",
    "encode_document",
    "BulkService",
    "BulkOperationError",
    "BulkSerializationError",
    "BulkValidationError",
]
