"""滚动查询模块.

提供两种翻页游标和 point-in-time 辅助函数:
- ScanService/ScanCursor: 扫描游标，next() 结束时返回 EOS
- ScrollService: 滚动查询，do() 结束时返回 EOF
- open_point_in_time/close_point_in_time: point-in-time 的打开与关闭

示例用法:
    >>> from elasticstream.scroll import ScrollService, EOF
    >>> with ScrollService(es_client, "users").size(100) as scroll:
    ...     for hit in scroll.iter_hits():
    ...         print(hit.id)
"""

from .exceptions import (
    NoScrollIdError,
    ResponseSizeExceededError,
    ScrollClearedError,
    ScrollError,
)
from .models import DEFAULT_KEEP_ALIVE, EOF, EOS, SortInfo, StreamEnd
from .pit import PointInTime, close_point_in_time, open_point_in_time
from .scan import ScanCursor, ScanService
from .tool import ScrollService

__all__ = [
    "ScanService",
    "ScanCursor",
    "ScrollService",
    "PointInTime",
    "open_point_in_time",
    "close_point_in_time",
    "SortInfo",
    "StreamEnd",
    "EOS",
    "EOF",
    "DEFAULT_KEEP_ALIVE",
    "ScrollError",
    "ScrollClearedError",
    "NoScrollIdError",
    "ResponseSizeExceededError",
]
