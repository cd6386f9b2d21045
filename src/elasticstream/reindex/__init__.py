"""重建索引模块.

通过扫描游标读取源索引，再以批量请求写入目标索引（可以是另一个集群）.

示例用法:
    >>> from elasticstream.reindex import Reindexer
    >>> response = Reindexer(es_client, "users-v1", "users-v2", bulk_size=1000).do()
    >>> print(f"成功: {response.success}, 失败: {response.failed}")
"""

from .exceptions import ReindexConfigError, ReindexError
from .models import ReindexerResponse
from .tool import DEFAULT_BULK_SIZE, Reindexer

__all__ = [
    "Reindexer",
    "ReindexerResponse",
    "ReindexError",
    "ReindexConfigError",
    "DEFAULT_BULK_SIZE",
]
