"""
聚合结果解析.

Aggregations 保存响应中 "aggregations" 部分的原始数据，按需解析为带类型的结果对象.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from elasticstream.parsers.types import (
    BUCKET_STANDARD_FIELDS,
    AggregationBucket,
    CardinalityResult,
    PercentilesResult,
    StatsResult,
    ValueMetricResult,
)


class Aggregations(Mapping[str, Any]):
    """
    聚合结果集合.

    只读映射，key 为聚合名称，value 为原始聚合数据.
    各 typed 访问方法在聚合不存在时返回 None（分桶类方法返回空列表）.

    使用示例:
        aggs = result.aggregations

        for bucket in aggs.terms("by_status"):
            print(bucket.key, bucket.doc_count)
            avg = bucket.aggregations.value_metric("avg_price")

        stats = aggs.stats("price_stats")
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Aggregations({list(self._data)})"

    def to_dict(self) -> dict[str, Any]:
        """返回原始聚合数据的浅拷贝."""
        return dict(self._data)

    # ========== 指标聚合 ==========

    def value_metric(self, name: str) -> ValueMetricResult | None:
        """解析单值指标聚合（avg/sum/min/max/value_count 等）."""
        data = self._get(name)
        if data is None:
            return None
        return ValueMetricResult.from_dict(data)

    def stats(self, name: str) -> StatsResult | None:
        """解析 stats 聚合."""
        data = self._get(name)
        if data is None:
            return None
        return StatsResult.from_dict(data)

    def extended_stats(self, name: str) -> StatsResult | None:
        """解析 extended_stats 聚合."""
        return self.stats(name)

    def percentiles(self, name: str) -> PercentilesResult | None:
        """解析 percentiles 聚合."""
        data = self._get(name)
        if data is None:
            return None
        return PercentilesResult.from_dict(data)

    def cardinality(self, name: str) -> CardinalityResult | None:
        """解析 cardinality 聚合."""
        data = self._get(name)
        if data is None:
            return None
        return CardinalityResult.from_dict(data)

    def top_hits(self, name: str) -> list[dict[str, Any]]:
        """解析 top_hits 聚合，返回原始命中列表."""
        data = self._get(name)
        if data is None:
            return []
        return data.get("hits", {}).get("hits", [])

    # ========== 分桶聚合 ==========

    def terms(self, name: str) -> list[AggregationBucket]:
        """解析 terms 聚合."""
        return self._buckets(name)

    def histogram(self, name: str) -> list[AggregationBucket]:
        """解析 histogram 聚合."""
        return self._buckets(name)

    def date_histogram(self, name: str) -> list[AggregationBucket]:
        """解析 date_histogram 聚合."""
        return self._buckets(name)

    def range(self, name: str) -> list[AggregationBucket]:
        """解析 range/date_range 聚合."""
        return self._buckets(name)

    def filters(self, name: str) -> list[AggregationBucket]:
        """解析 filters 聚合.

        匿名过滤器返回列表，命名过滤器返回字典，命名时桶的 key 为过滤器名称.
        """
        return self._buckets(name)

    def single_bucket(self, name: str) -> AggregationBucket | None:
        """解析单桶聚合（filter、global、missing、nested、reverse_nested 等）."""
        data = self._get(name)
        if data is None:
            return None
        return _make_bucket(None, data)

    def filter(self, name: str) -> AggregationBucket | None:
        """解析 filter 聚合."""
        return self.single_bucket(name)

    def path(self, *names: str) -> Any:
        """
        按路径访问多层单桶聚合的原始数据.

        示例:
            # aggregations -> only_errors -> avg_latency
            aggs.path("only_errors", "avg_latency")
        """
        if not names:
            return None
        current: Any = self._data
        for name in names:
            if not isinstance(current, Mapping):
                return None
            current = current.get(name)
        return current

    # ========== 内部辅助方法 ==========

    def _get(self, name: str) -> dict[str, Any] | None:
        data = self._data.get(name)
        if isinstance(data, Mapping):
            return dict(data)
        return None

    def _buckets(self, name: str) -> list[AggregationBucket]:
        data = self._get(name)
        if data is None:
            return []
        buckets = data.get("buckets", [])
        if isinstance(buckets, Mapping):
            return [_make_bucket(key, bucket) for key, bucket in buckets.items()]
        return [_make_bucket(bucket.get("key"), bucket) for bucket in buckets]


def _make_bucket(key: Any, bucket: Mapping[str, Any]) -> AggregationBucket:
    sub_aggs = {k: v for k, v in bucket.items() if k not in BUCKET_STANDARD_FIELDS}
    return AggregationBucket(
        key=key,
        doc_count=bucket.get("doc_count", 0),
        key_as_string=bucket.get("key_as_string"),
        aggregations=Aggregations(sub_aggs),
        from_value=bucket.get("from"),
        to_value=bucket.get("to"),
    )
