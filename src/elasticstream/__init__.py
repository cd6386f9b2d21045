"""elasticstream - Elasticsearch 数据流转工具库.

在 elasticsearch-py 客户端之上提供批量写入、滚动读取和重建索引的高层封装。

主要功能:
    - BulkService: 批量请求的 NDJSON 序列化、提交与逐项结果核对
    - ScanService / ScrollService: 滚动翻页游标（结束标记分别为 EOS / EOF）
    - Reindexer: 扫描源索引并批量写入目标索引，支持跨集群与进度回调
    - SearchResult / Aggregations: 搜索结果与聚合结果解析
    - GeoPoint: 地理坐标点值类型

使用示例:
    from elasticstream import ScrollService, BulkService, BulkIndexRequest

    bulk = BulkService(target_client, index="users-v2")
    with ScrollService(source_client, "users").size(500) as scroll:
        for hit in scroll.iter_hits():
            bulk.add(BulkIndexRequest(id=hit.id, doc=hit.source))
    bulk.do()
"""

__version__ = "0.3.0"

# 导出批量请求
from elasticstream.bulk import (
    BulkAction,
    BulkDeleteRequest,
    BulkIndexRequest,
    BulkResponse,
    BulkResponseItem,
    BulkService,
    BulkUpdateRequest,
)

# 导出客户端工厂
from elasticstream.connection import (
    ClientFactory,
    ClusterConfig,
    ClusterRole,
    ConnectionConfig,
)

# 导出异常
from elasticstream.exceptions import (
    ElasticStreamError,
    EngineTimeoutError,
    ResourceNotFoundError,
    ResponseDecodeError,
    SearchEngineError,
    VersionConflictError,
    is_conflict,
    is_not_found,
    is_status_code,
    is_timeout,
    translate_api_error,
)

# 导出地理坐标
from elasticstream.geo import GeoPoint

# 导出结果解析
from elasticstream.parsers import Aggregations, ResponseParser, SearchHit, SearchResult

# 导出重建索引
from elasticstream.reindex import ReindexError, Reindexer, ReindexerResponse

# 导出滚动查询
from elasticstream.scroll import (
    EOF,
    EOS,
    PointInTime,
    ScanCursor,
    ScanService,
    ScrollClearedError,
    ScrollService,
    SortInfo,
    StreamEnd,
    close_point_in_time,
    open_point_in_time,
)

__all__ = [
    # 版本
    "__version__",
    # 批量请求
    "BulkService",
    "BulkAction",
    "BulkIndexRequest",
    "BulkUpdateRequest",
    "BulkDeleteRequest",
    "BulkResponse",
    "BulkResponseItem",
    # 滚动查询
    "ScanService",
    "ScanCursor",
    "ScrollService",
    "SortInfo",
    "StreamEnd",
    "EOS",
    "EOF",
    "PointInTime",
    "open_point_in_time",
    "close_point_in_time",
    "ScrollClearedError",
    # 重建索引
    "Reindexer",
    "ReindexerResponse",
    "ReindexError",
    # 结果解析
    "SearchResult",
    "SearchHit",
    "Aggregations",
    "ResponseParser",
    # 地理坐标
    "GeoPoint",
    # 客户端工厂
    "ClientFactory",
    "ClusterConfig",
    "ClusterRole",
    "ConnectionConfig",
    # 异常
    "ElasticStreamError",
    "SearchEngineError",
    "ResourceNotFoundError",
    "VersionConflictError",
    "EngineTimeoutError",
    "ResponseDecodeError",
    "translate_api_error",
    "is_status_code",
    "is_not_found",
    "is_conflict",
    "is_timeout",
]
