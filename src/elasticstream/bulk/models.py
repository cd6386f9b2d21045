"""批量操作响应数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..exceptions import ResponseDecodeError
from ..utils import response_body


class BulkAction(Enum):
    """批量操作类型枚举."""

    INDEX = "index"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class BulkErrorDetails:
    """单个批量操作项的错误详情.

    Attributes:
        type: 错误类型，如 "version_conflict_engine_exception"
        reason: 错误原因
        index: 索引名称
        shard: 分片编号
        caused_by: 根本原因
    """

    type: str
    reason: str
    index: str | None = None
    shard: str | None = None
    caused_by: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> BulkErrorDetails:
        if isinstance(data, str):
            return cls(type="unknown", reason=data)
        return cls(
            type=data.get("type", "unknown"),
            reason=data.get("reason", "unknown error"),
            index=data.get("index"),
            shard=data.get("shard"),
            caused_by=data.get("caused_by"),
        )


@dataclass(frozen=True)
class BulkResponseItem:
    """单个批量操作项的执行结果.

    Attributes:
        action: 操作类型
        index: 索引名称
        id: 文档ID
        status: HTTP状态码
        type: 文档类型（仅旧版本 ES 返回）
        version: 文档版本
        result: 执行结果，如 "created"、"updated"、"deleted"、"noop"、"not_found"
        seq_no: 序列号
        primary_term: 主分片任期
        forced_refresh: 是否强制刷新
        shards: 分片执行信息
        error: 错误详情，成功时为 None
        get_result: update 操作请求返回文档时的 get 结果
    """

    action: BulkAction
    index: str | None
    id: str | None
    status: int
    type: str | None = None
    version: int | None = None
    result: str | None = None
    seq_no: int | None = None
    primary_term: int | None = None
    forced_refresh: bool = False
    shards: dict[str, Any] | None = None
    error: BulkErrorDetails | None = None
    get_result: dict[str, Any] | None = None

    @property
    def succeeded(self) -> bool:
        """状态码为 2xx 时视为成功."""
        return 200 <= self.status <= 299

    @classmethod
    def from_dict(cls, action: str, data: dict[str, Any]) -> BulkResponseItem:
        try:
            bulk_action = BulkAction(action)
        except ValueError as e:
            raise ResponseDecodeError(f"未知的批量操作类型: {action}") from e

        error = data.get("error")
        return cls(
            action=bulk_action,
            index=data.get("_index"),
            id=data.get("_id"),
            status=data.get("status", 0),
            type=data.get("_type"),
            version=data.get("_version"),
            result=data.get("result"),
            seq_no=data.get("_seq_no"),
            primary_term=data.get("_primary_term"),
            forced_refresh=data.get("forced_refresh", False),
            shards=data.get("_shards"),
            error=BulkErrorDetails.from_dict(error) if error else None,
            get_result=data.get("get"),
        )


@dataclass
class BulkResponse:
    """批量提交的响应.

    items 与提交的操作一一对应、顺序一致。单个操作失败不会抛出异常，
    调用方需要通过 failed()/succeeded() 检查.

    Attributes:
        took: 耗时（毫秒）
        errors: 是否存在失败的操作项
        items: 操作结果列表
    """

    took: int = 0
    errors: bool = False
    items: list[BulkResponseItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, response: Any) -> BulkResponse:
        """解析 _bulk 接口的响应.

        Raises:
            ResponseDecodeError: 响应结构不正确时抛出
        """
        data = response_body(response)
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"批量响应必须是 JSON 对象，实际类型: {type(data)}")

        raw_items = data.get("items", [])
        if not isinstance(raw_items, list):
            raise ResponseDecodeError(f"批量响应 items 格式不正确: {raw_items!r}")

        items: list[BulkResponseItem] = []
        for raw in raw_items:
            # 每一项形如 {"index": {...}}
            if not isinstance(raw, dict) or len(raw) != 1:
                raise ResponseDecodeError(f"批量响应项格式不正确: {raw!r}")
            action, item = next(iter(raw.items()))
            if not isinstance(item, dict):
                raise ResponseDecodeError(f"批量响应项格式不正确: {raw!r}")
            items.append(BulkResponseItem.from_dict(action, item))

        return cls(
            took=data.get("took", 0),
            errors=data.get("errors", False),
            items=items,
        )

    def by_action(self, *actions: BulkAction) -> list[BulkResponseItem]:
        """返回指定操作类型的结果."""
        return [item for item in self.items if item.action in actions]

    def indexed(self) -> list[BulkResponseItem]:
        """返回所有 index 操作的结果."""
        return self.by_action(BulkAction.INDEX)

    def created(self) -> list[BulkResponseItem]:
        """返回所有 create 操作的结果."""
        return self.by_action(BulkAction.CREATE)

    def updated(self) -> list[BulkResponseItem]:
        """返回所有 update 操作的结果."""
        return self.by_action(BulkAction.UPDATE)

    def deleted(self) -> list[BulkResponseItem]:
        """返回所有 delete 操作的结果."""
        return self.by_action(BulkAction.DELETE)

    def by_id(self, doc_id: str) -> list[BulkResponseItem]:
        """返回指定文档ID的所有操作结果."""
        return [item for item in self.items if item.id == doc_id]

    def succeeded(self) -> list[BulkResponseItem]:
        """返回所有成功的操作结果."""
        return [item for item in self.items if item.succeeded]

    def failed(self) -> list[BulkResponseItem]:
        """返回所有失败的操作结果."""
        return [item for item in self.items if not item.succeeded]

    def get_error_summary(self) -> str:
        """获取错误摘要."""
        failed = self.failed()
        if not failed:
            return "No errors"
        summary = f"Total errors: {len(failed)}\n"
        for i, item in enumerate(failed[:10], 1):  # 只显示前10个错误
            reason = item.error.reason if item.error else "unknown error"
            summary += (
                f"{i}. [{item.action.value}] "
                f"Index: {item.index}, DocID: {item.id}, "
                f"Status: {item.status}, Reason: {reason}\n"
            )
        if len(failed) > 10:
            summary += f"... and {len(failed) - 10} more errors\n"
        return summary
