"""滚动查询数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# 未指定 keep_alive 时使用的滚动上下文保留时间
DEFAULT_KEEP_ALIVE = "5m"


class StreamEnd(Enum):
    """翻页结束标记.

    两种游标的结束标记是不同的值，调用方需要按各自的标记判断:
        - EOS: ScanCursor.next() 的结束标记
        - EOF: ScrollService.do() 的结束标记

    结束标记通过返回值传递而不是异常，因此不会被当成失败处理.
    """

    EOS = "EOS"
    EOF = "EOF"

    def __bool__(self) -> bool:
        return False


EOS = StreamEnd.EOS
EOF = StreamEnd.EOF


@dataclass(frozen=True)
class SortInfo:
    """排序字段.

    Attributes:
        field: 字段名
        ascending: 是否升序
        missing: 缺失值的排序位置，如 "_last"
        unmapped_type: 字段未映射时使用的类型
        mode: 多值字段的取值方式，如 "min"、"max"、"avg"

    Examples:
        >>> SortInfo("created_at", ascending=False).source()
        {'created_at': {'order': 'desc'}}
    """

    field: str
    ascending: bool = True
    missing: Any = None
    unmapped_type: str | None = None
    mode: str | None = None

    def source(self) -> dict[str, Any]:
        options: dict[str, Any] = {"order": "asc" if self.ascending else "desc"}
        if self.missing is not None:
            options["missing"] = self.missing
        if self.unmapped_type:
            options["unmapped_type"] = self.unmapped_type
        if self.mode:
            options["mode"] = self.mode
        return {self.field: options}
