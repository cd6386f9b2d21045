"""搜索结果数据模型单元测试."""

import pytest

from elasticstream.exceptions import ResponseDecodeError
from elasticstream.parsers import SearchHit, SearchResult, TotalHits

RAW_RESPONSE = {
    "took": 12,
    "timed_out": False,
    "_scroll_id": "c2Nhbjs2OzM0NDg1ODpzRlBLc0FXNlNyNm5JWUc1",
    "_shards": {"total": 5, "successful": 5, "skipped": 0, "failed": 0},
    "hits": {
        "total": {"value": 2, "relation": "eq"},
        "max_score": 1.5,
        "hits": [
            {
                "_index": "tweets",
                "_id": "1",
                "_score": 1.5,
                "_routing": "u1",
                "_seq_no": 3,
                "_primary_term": 1,
                "_source": {"user": "olivere", "message": "Welcome to Golang and Elasticsearch."},
                "highlight": {"message": ["Welcome to <em>Golang</em>"]},
                "sort": [1, "a"],
            },
            {"_index": "tweets", "_id": "2", "_score": 1.0, "_source": {"user": "sandrae"}},
        ],
    },
}


class TestTotalHits:
    """TotalHits 测试."""

    def test_object_format(self) -> None:
        """测试 ES 7.x+ 的对象格式."""
        assert TotalHits.from_raw({"value": 10000, "relation": "gte"}) == TotalHits(10000, "gte")

    def test_integer_format(self) -> None:
        """测试 ES 6.x 的整数格式."""
        assert TotalHits.from_raw(42) == TotalHits(42, "eq")

    def test_missing(self) -> None:
        assert TotalHits.from_raw(None) == TotalHits()


class TestSearchResult:
    """SearchResult.from_dict 测试."""

    def test_parse(self) -> None:
        """测试解析完整的响应."""
        result = SearchResult.from_dict(RAW_RESPONSE)

        assert result.took_in_millis == 12
        assert result.timed_out is False
        assert result.scroll_id == "c2Nhbjs2OzM0NDg1ODpzRlBLc0FXNlNyNm5JWUc1"
        assert result.shards.successful == 5
        assert result.total_hits() == 2
        assert result.hits.max_score == 1.5
        assert result.has_hits()

    def test_hit_fields(self) -> None:
        """测试命中文档字段."""
        hit = SearchResult.from_dict(RAW_RESPONSE).hits.hits[0]

        assert isinstance(hit, SearchHit)
        assert hit.index == "tweets"
        assert hit.id == "1"
        assert hit.routing == "u1"
        assert hit.seq_no == 3
        assert hit.primary_term == 1
        assert hit.source["user"] == "olivere"
        assert hit.highlight == {"message": ["Welcome to <em>Golang</em>"]}
        assert hit.sort == [1, "a"]

    def test_each(self) -> None:
        """测试对每个文档应用转换函数."""
        result = SearchResult.from_dict(RAW_RESPONSE)
        assert result.each(lambda source: source["user"]) == ["olivere", "sandrae"]

    def test_empty_response(self) -> None:
        """测试没有 hits 的响应."""
        result = SearchResult.from_dict({})
        assert result.total_hits() == 0
        assert not result.has_hits()
        assert result.scroll_id is None
        assert len(result.aggregations) == 0

    def test_object_api_response(self) -> None:
        """测试解析带 body 属性的客户端响应."""

        class FakeApiResponse:
            body = RAW_RESPONSE

        assert SearchResult.from_dict(FakeApiResponse()).total_hits() == 2

    @pytest.mark.parametrize(
        "response",
        [
            [],
            {"hits": []},
            {"hits": {"hits": {"_id": "1"}}},
            {"hits": {"hits": ["not-a-hit"]}},
            {"hits": {"total": "many", "hits": []}},
        ],
    )
    def test_malformed(self, response) -> None:
        """测试结构不正确的响应."""
        with pytest.raises(ResponseDecodeError):
            SearchResult.from_dict(response)

    def test_frozen(self) -> None:
        """测试结果不可变."""
        result = SearchResult.from_dict(RAW_RESPONSE)
        with pytest.raises(AttributeError):
            result.scroll_id = "other"  # type: ignore[misc]
