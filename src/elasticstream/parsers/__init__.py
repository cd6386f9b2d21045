"""结果解析器模块.

提供 ES 搜索结果的反序列化和聚合结果解析功能.
"""

from elasticstream.parsers.aggregations import Aggregations
from elasticstream.parsers.response import ResponseParser
from elasticstream.parsers.results import (
    SearchHit,
    SearchHits,
    SearchResult,
    ShardsInfo,
    TotalHits,
)
from elasticstream.parsers.types import (
    AggregationBucket,
    CardinalityResult,
    HighlightedHit,
    PercentilesResult,
    StatsResult,
    SuggestionItem,
    ValueMetricResult,
)

__all__ = [
    "ResponseParser",
    "SearchResult",
    "SearchHits",
    "SearchHit",
    "TotalHits",
    "ShardsInfo",
    "Aggregations",
    "AggregationBucket",
    "ValueMetricResult",
    "StatsResult",
    "PercentilesResult",
    "CardinalityResult",
    "SuggestionItem",
    "HighlightedHit",
]
