"""聚合结果解析单元测试."""

import pytest

from elasticstream.parsers import Aggregations

AGGS = {
    "avg_price": {"value": 42.5, "value_as_string": "42.50"},
    "price_stats": {"count": 4, "min": 10.0, "max": 80.0, "avg": 42.5, "sum": 170.0},
    "price_ext": {
        "count": 4,
        "min": 10.0,
        "max": 80.0,
        "avg": 42.5,
        "sum": 170.0,
        "sum_of_squares": 9500.0,
        "variance": 568.75,
        "std_deviation": 23.85,
        "std_deviation_bounds": {"upper": 90.2, "lower": -5.2},
    },
    "latency": {"values": {"50.0": 120.0, "95.0": 480.0, "99.0": 900.0}},
    "latency_list": {"values": [{"key": 50.0, "value": 110.0}, {"key": 99.0, "value": 700.0}]},
    "users": {"value": 17},
    "by_status": {
        "doc_count_error_upper_bound": 0,
        "sum_other_doc_count": 0,
        "buckets": [
            {"key": "active", "doc_count": 3, "avg_age": {"value": 30.0}},
            {"key": "inactive", "doc_count": 1, "avg_age": {"value": 50.0}},
        ],
    },
    "per_day": {
        "buckets": [
            {"key_as_string": "2024-01-01", "key": 1704067200000, "doc_count": 2},
        ]
    },
    "price_ranges": {
        "buckets": [
            {"key": "*-50.0", "to": 50.0, "doc_count": 2},
            {"key": "50.0-*", "from": 50.0, "doc_count": 2},
        ]
    },
    "named_filters": {
        "buckets": {
            "errors": {"doc_count": 5},
            "warnings": {"doc_count": 7},
        }
    },
    "only_errors": {
        "doc_count": 5,
        "avg_latency": {"value": 250.0},
    },
    "top": {"hits": {"total": {"value": 1}, "hits": [{"_id": "1", "_source": {"a": 1}}]}},
}


@pytest.fixture
def aggs() -> Aggregations:
    return Aggregations(AGGS)


class TestMetricAggregations:
    """指标聚合测试."""

    def test_value_metric(self, aggs) -> None:
        result = aggs.value_metric("avg_price")
        assert result.value == 42.5
        assert result.value_as_string == "42.50"

    def test_stats(self, aggs) -> None:
        result = aggs.stats("price_stats")
        assert result.count == 4
        assert result.sum == 170.0
        assert result.variance is None

    def test_extended_stats(self, aggs) -> None:
        result = aggs.extended_stats("price_ext")
        assert result.std_deviation == 23.85
        assert result.std_deviation_bounds["upper"] == 90.2

    def test_percentiles_keyed(self, aggs) -> None:
        """测试 keyed 格式的百分位数."""
        result = aggs.percentiles("latency")
        assert result.p50 == 120.0
        assert result.p95 == 480.0
        assert result.p99 == 900.0

    def test_percentiles_list(self, aggs) -> None:
        """测试列表格式的百分位数."""
        result = aggs.percentiles("latency_list")
        assert result.get_percentile(50) == 110.0
        assert result.p95 is None

    def test_cardinality(self, aggs) -> None:
        assert aggs.cardinality("users").value == 17

    def test_top_hits(self, aggs) -> None:
        assert aggs.top_hits("top") == [{"_id": "1", "_source": {"a": 1}}]

    def test_missing_metric(self, aggs) -> None:
        """测试不存在的聚合返回 None."""
        assert aggs.value_metric("missing") is None
        assert aggs.stats("missing") is None
        assert aggs.percentiles("missing") is None
        assert aggs.cardinality("missing") is None
        assert aggs.top_hits("missing") == []


class TestBucketAggregations:
    """分桶聚合测试."""

    def test_terms_with_sub_aggregations(self, aggs) -> None:
        """测试 terms 桶及其子聚合."""
        buckets = aggs.terms("by_status")
        assert [(b.key, b.doc_count) for b in buckets] == [("active", 3), ("inactive", 1)]
        assert buckets[0].aggregations.value_metric("avg_age").value == 30.0
        assert buckets[1].get_sub_agg("avg_age") == {"value": 50.0}

    def test_date_histogram(self, aggs) -> None:
        bucket = aggs.date_histogram("per_day")[0]
        assert bucket.key == 1704067200000
        assert bucket.key_as_string == "2024-01-01"
        assert len(bucket.aggregations) == 0

    def test_range(self, aggs) -> None:
        buckets = aggs.range("price_ranges")
        assert buckets[0].to_value == 50.0
        assert buckets[0].from_value is None
        assert buckets[1].from_value == 50.0

    def test_named_filters(self, aggs) -> None:
        """测试命名过滤器的桶 key 为过滤器名称."""
        buckets = aggs.filters("named_filters")
        assert {b.key: b.doc_count for b in buckets} == {"errors": 5, "warnings": 7}

    def test_single_bucket(self, aggs) -> None:
        bucket = aggs.filter("only_errors")
        assert bucket.doc_count == 5
        assert bucket.aggregations.value_metric("avg_latency").value == 250.0

    def test_missing_buckets(self, aggs) -> None:
        """测试不存在的分桶聚合返回空列表."""
        assert aggs.terms("missing") == []
        assert aggs.histogram("missing") == []
        assert aggs.single_bucket("missing") is None


class TestAggregationsMapping:
    """映射行为与路径访问测试."""

    def test_mapping(self, aggs) -> None:
        assert "avg_price" in aggs
        assert aggs["users"] == {"value": 17}
        assert len(aggs) == len(AGGS)
        assert aggs.to_dict() == AGGS

    def test_path(self, aggs) -> None:
        assert aggs.path("only_errors", "avg_latency") == {"value": 250.0}
        assert aggs.path("only_errors", "missing") is None
        assert aggs.path("avg_price", "value", "deeper") is None
        assert aggs.path() is None
