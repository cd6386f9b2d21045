"""
搜索结果数据模型.

SearchResult 对应一次搜索/滚动请求的响应，创建后不可变.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from elasticstream.exceptions import ResponseDecodeError
from elasticstream.parsers.aggregations import Aggregations
from elasticstream.utils import response_body

T = TypeVar("T")


@dataclass(frozen=True)
class TotalHits:
    """
    命中总数.

    Attributes:
        value: 命中数量
        relation: "eq" 表示精确值，"gte" 表示下界
    """

    value: int = 0
    relation: str = "eq"

    @classmethod
    def from_raw(cls, raw: Any) -> TotalHits:
        """兼容 ES 6.x 的整数格式和 ES 7.x+ 的 {"value", "relation"} 格式."""
        if raw is None:
            return cls()
        if isinstance(raw, dict):
            return cls(value=int(raw.get("value", 0)), relation=raw.get("relation", "eq"))
        return cls(value=int(raw))


@dataclass(frozen=True)
class ShardsInfo:
    """分片执行信息."""

    total: int = 0
    successful: int = 0
    skipped: int = 0
    failed: int = 0
    failures: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ShardsInfo:
        data = data or {}
        return cls(
            total=data.get("total", 0),
            successful=data.get("successful", 0),
            skipped=data.get("skipped", 0),
            failed=data.get("failed", 0),
            failures=data.get("failures", []),
        )


@dataclass(frozen=True)
class SearchHit:
    """
    单个命中文档.

    Attributes:
        index: 索引名
        id: 文档 ID
        type: 文档类型（仅旧版本 ES 返回）
        score: 相关性得分
        source: 文档源数据，未返回 _source 时为 None
        fields: 通过 fields/docvalue_fields 请求的字段
        highlight: 高亮片段
        sort: 排序值（用于 search_after）
        routing: 路由值
        version: 文档版本
        seq_no: 序列号
        primary_term: 主分片任期
        inner_hits: 嵌套命中
    """

    index: str | None = None
    id: str | None = None
    type: str | None = None
    score: float | None = None
    source: dict[str, Any] | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    highlight: dict[str, list[str]] = field(default_factory=dict)
    sort: list[Any] = field(default_factory=list)
    routing: str | None = None
    version: int | None = None
    seq_no: int | None = None
    primary_term: int | None = None
    inner_hits: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchHit:
        """从 ES 响应中的单个 hit 创建."""
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"命中文档格式不正确: {data!r}")
        return cls(
            index=data.get("_index"),
            id=data.get("_id"),
            type=data.get("_type"),
            score=data.get("_score"),
            source=data.get("_source"),
            fields=data.get("fields") or {},
            highlight=data.get("highlight") or {},
            sort=data.get("sort") or [],
            routing=data.get("_routing"),
            version=data.get("_version"),
            seq_no=data.get("_seq_no"),
            primary_term=data.get("_primary_term"),
            inner_hits=data.get("inner_hits") or {},
        )


@dataclass(frozen=True)
class SearchHits:
    """命中文档集合."""

    total: TotalHits = field(default_factory=TotalHits)
    max_score: float | None = None
    hits: list[SearchHit] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SearchHits:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"hits 格式不正确: {data!r}")
        raw_hits = data.get("hits") or []
        if not isinstance(raw_hits, list):
            raise ResponseDecodeError(f"hits.hits 格式不正确: {raw_hits!r}")
        try:
            total = TotalHits.from_raw(data.get("total"))
        except (TypeError, ValueError) as e:
            raise ResponseDecodeError(f"hits.total 格式不正确: {e}") from e
        return cls(
            total=total,
            max_score=data.get("max_score"),
            hits=[SearchHit.from_dict(hit) for hit in raw_hits],
        )

    def __len__(self) -> int:
        return len(self.hits)


@dataclass(frozen=True)
class SearchResult:
    """
    一页搜索结果.

    Attributes:
        took_in_millis: 查询耗时（毫秒）
        timed_out: 是否超时
        scroll_id: 滚动游标 ID
        pit_id: point-in-time ID
        hits: 命中文档集合
        aggregations: 聚合结果
        suggest: 搜索建议原始数据
        shards: 分片信息
        terminated_early: 是否提前终止
        status: 状态码（仅 msearch 子响应返回）
    """

    took_in_millis: int = 0
    timed_out: bool = False
    scroll_id: str | None = None
    pit_id: str | None = None
    hits: SearchHits = field(default_factory=SearchHits)
    aggregations: Aggregations = field(default_factory=Aggregations)
    suggest: dict[str, Any] = field(default_factory=dict)
    shards: ShardsInfo = field(default_factory=ShardsInfo)
    terminated_early: bool | None = None
    status: int | None = None

    @classmethod
    def from_dict(cls, response: Any) -> SearchResult:
        """
        解析 ES 搜索响应.

        Args:
            response: 原始字典或 elasticsearch 客户端返回的 ObjectApiResponse

        Returns:
            SearchResult 实例

        Raises:
            ResponseDecodeError: 响应不是 JSON 对象或 hits 部分格式不正确
        """
        data = response_body(response)
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"搜索响应必须是 JSON 对象，实际类型: {type(data)}")

        return cls(
            took_in_millis=data.get("took", 0),
            timed_out=data.get("timed_out", False),
            scroll_id=data.get("_scroll_id"),
            pit_id=data.get("pit_id"),
            hits=SearchHits.from_dict(data.get("hits")),
            aggregations=Aggregations(data.get("aggregations")),
            suggest=data.get("suggest") or {},
            shards=ShardsInfo.from_dict(data.get("_shards")),
            terminated_early=data.get("terminated_early"),
            status=data.get("status"),
        )

    def total_hits(self) -> int:
        """命中总数."""
        return self.hits.total.value

    def has_hits(self) -> bool:
        """本页是否包含命中文档."""
        return len(self.hits.hits) > 0

    def each(self, transform: Callable[[dict[str, Any]], T]) -> list[T]:
        """对本页每个文档的 _source 应用转换函数."""
        return [transform(hit.source or {}) for hit in self.hits.hits]
