"""
聚合与建议结果数据类型定义.

包含分桶、统计、百分位数、去重计数、单值指标、建议项、高亮命中等数据类.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from elasticstream.parsers.aggregations import Aggregations

T = TypeVar("T")

# 桶内的标准字段，其余字段均视为子聚合
BUCKET_STANDARD_FIELDS = frozenset(
    {"key", "key_as_string", "doc_count", "from", "from_as_string", "to", "to_as_string"}
)


@dataclass
class HighlightedHit(Generic[T]):
    """
    高亮命中结果.

    封装文档源数据及其高亮片段.

    Attributes:
        source: 原始文档数据（或转换后的业务对象）
        highlights: 高亮字段映射，key 为字段名，value 为高亮片段列表
        score: 相关性得分
        doc_id: 文档 ID
        index: 索引名
    """

    source: T
    highlights: dict[str, list[str]] = field(default_factory=dict)
    score: float | None = None
    doc_id: str | None = None
    index: str | None = None

    def get_highlight(self, field_name: str, default: str = "") -> str:
        """获取指定字段的第一个高亮片段."""
        fragments = self.highlights.get(field_name, [])
        return fragments[0] if fragments else default

    def get_all_highlights(self, field_name: str) -> list[str]:
        """获取指定字段的所有高亮片段."""
        return self.highlights.get(field_name, [])


@dataclass
class AggregationBucket:
    """
    聚合桶.

    terms、histogram、date_histogram、range、filters 等分桶聚合共用.

    Attributes:
        key: 桶键值（filters 聚合为过滤器名称）
        doc_count: 文档数量
        key_as_string: 格式化后的键（date_histogram 等）
        aggregations: 子聚合结果
        from_value: range 聚合的下界
        to_value: range 聚合的上界
    """

    key: Any
    doc_count: int
    key_as_string: str | None = None
    aggregations: Aggregations | None = None
    from_value: float | None = None
    to_value: float | None = None

    def get_sub_agg(self, name: str) -> Any:
        """获取子聚合的原始数据."""
        if self.aggregations is None:
            return None
        return self.aggregations.get(name)


@dataclass
class ValueMetricResult:
    """
    单值指标聚合结果（avg、sum、min、max、value_count）.

    Attributes:
        value: 指标值，无文档时为 None
        value_as_string: 格式化后的值
    """

    value: float | None
    value_as_string: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueMetricResult:
        """从 ES 响应字典创建."""
        return cls(value=data.get("value"), value_as_string=data.get("value_as_string"))


@dataclass
class StatsResult:
    """
    统计聚合结果.

    Attributes:
        count: 文档数量
        min: 最小值
        max: 最大值
        avg: 平均值
        sum: 总和

    扩展统计额外字段:
        sum_of_squares: 平方和
        variance: 方差
        std_deviation: 标准差
        std_deviation_bounds: 标准差边界
    """

    count: int
    min: float | None
    max: float | None
    avg: float | None
    sum: float | None
    # 扩展统计字段（extended_stats）
    sum_of_squares: float | None = None
    variance: float | None = None
    std_deviation: float | None = None
    std_deviation_bounds: dict[str, float] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatsResult:
        """从 ES 响应字典创建."""
        return cls(
            count=data.get("count", 0),
            min=data.get("min"),
            max=data.get("max"),
            avg=data.get("avg"),
            sum=data.get("sum"),
            sum_of_squares=data.get("sum_of_squares"),
            variance=data.get("variance"),
            std_deviation=data.get("std_deviation"),
            std_deviation_bounds=data.get("std_deviation_bounds"),
        )


@dataclass
class PercentilesResult:
    """
    百分位数聚合结果.

    Attributes:
        values: 百分位数值映射，key 为百分位（如 "50.0"），value 为对应值
    """

    values: dict[str, float | None]

    def get_percentile(self, percentile: float) -> float | None:
        """
        获取指定百分位的值.

        Args:
            percentile: 百分位数（如 50.0, 95.0, 99.0）

        Returns:
            百分位值或 None
        """
        float_key = f"{float(percentile)}"
        if float_key in self.values:
            return self.values[float_key]

        if percentile == int(percentile):
            int_key = str(int(percentile))
            if int_key in self.values:
                return self.values[int_key]

        return None

    @property
    def p50(self) -> float | None:
        """获取 P50（中位数）."""
        return self.get_percentile(50.0)

    @property
    def p95(self) -> float | None:
        """获取 P95."""
        return self.get_percentile(95.0)

    @property
    def p99(self) -> float | None:
        """获取 P99."""
        return self.get_percentile(99.0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PercentilesResult:
        """从 ES 响应字典创建.

        兼容 keyed=true（字典）和 keyed=false（列表）两种返回格式.
        """
        values = data.get("values", {})
        if isinstance(values, list):
            values = {f"{float(item['key'])}": item.get("value") for item in values}
        return cls(values=values)


@dataclass
class CardinalityResult:
    """
    去重计数聚合结果.

    Attributes:
        value: 去重后的数量
    """

    value: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardinalityResult:
        """从 ES 响应字典创建."""
        return cls(value=data.get("value", 0))


@dataclass
class SuggestionItem:
    """
    搜索建议项.

    Attributes:
        text: 建议文本
        score: 建议得分
        freq: 出现频率（部分建议器支持）
        highlighted: 高亮后的文本（部分建议器支持）
    """

    text: str
    score: float | None = None
    freq: int | None = None
    highlighted: str | None = None
