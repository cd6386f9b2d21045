"""重建索引数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..bulk import BulkResponse, BulkResponseItem


@dataclass
class ReindexerResponse:
    """重建索引的统计结果.

    Attributes:
        success: 成功写入的文档数
        failed: 写入失败的文档数
        errors: 失败项详情，stats_only=True 时始终为空
        bulk_commits: 批量提交次数
    """

    success: int = 0
    failed: int = 0
    errors: list[BulkResponseItem] = field(default_factory=list)
    bulk_commits: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed

    def add_bulk_response(self, response: BulkResponse, stats_only: bool = True) -> None:
        """累加一次批量提交的结果."""
        failed = response.failed()
        self.success += len(response.succeeded())
        self.failed += len(failed)
        self.bulk_commits += 1
        if not stats_only:
            self.errors.extend(failed)
