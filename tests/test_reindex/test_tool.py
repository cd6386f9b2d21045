"""重建索引 Reindexer 单元测试."""

import json
import math
from unittest.mock import MagicMock

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import Elasticsearch

from elasticstream.exceptions import ResponseDecodeError, SearchEngineError
from elasticstream.reindex import Reindexer, ReindexerResponse
from elasticstream.reindex.exceptions import ReindexConfigError, ReindexError
from tests.helpers import make_api_error, make_hit, make_page


def fake_bulk(failing_ids=()):
    """根据请求体生成 _bulk 响应，failing_ids 中的文档返回版本冲突."""

    def bulk(operations, **params):
        lines = operations.strip().split("\n")
        items = []
        for meta_line in lines[::2]:
            action, meta = next(iter(json.loads(meta_line).items()))
            if meta["_id"] in failing_ids:
                item = {
                    "_index": meta["_index"],
                    "_id": meta["_id"],
                    "status": 409,
                    "error": {"type": "version_conflict_engine_exception", "reason": "conflict"},
                }
            else:
                item = {"_index": meta["_index"], "_id": meta["_id"], "status": 201}
            items.append({action: item})
        return {"took": 1, "errors": bool(failing_ids), "items": items}

    return bulk


def source_pages(total, page_size):
    """把 total 个文档按 page_size 切分为首页和后续的滚动页."""
    hits = [make_hit(str(i), {"n": i}) for i in range(1, total + 1)]
    chunks = [hits[i : i + page_size] for i in range(0, total, page_size)] or [[]]
    pages = [make_page(chunk, total=total, scroll_id=f"s{n}") for n, chunk in enumerate(chunks)]
    return pages[0], pages[1:] + [make_page([], total=total, scroll_id="s-end")]


@pytest.fixture
def source_client() -> MagicMock:
    return MagicMock(spec=Elasticsearch)


@pytest.fixture
def target_client() -> MagicMock:
    client = MagicMock(spec=Elasticsearch)
    client.bulk.side_effect = fake_bulk()
    return client


def setup_source(client, total, page_size):
    first, rest = source_pages(total, page_size)
    client.search.return_value = first
    client.scroll.side_effect = rest


class TestReindexerConfig:
    """配置校验测试."""

    def test_defaults(self, source_client) -> None:
        """测试默认值."""
        reindexer = Reindexer(source_client, "a", "b")
        assert reindexer.bulk_size == 500
        assert reindexer.target_client is None

    def test_missing_source_index(self, source_client) -> None:
        with pytest.raises(ReindexConfigError, match="源索引"):
            Reindexer(source_client, "", "b").do()

    def test_missing_target_index(self, source_client) -> None:
        with pytest.raises(ReindexConfigError, match="目标索引"):
            Reindexer(source_client, "a", "").do()

    def test_missing_source_client(self) -> None:
        with pytest.raises(ReindexConfigError, match="源集群客户端"):
            Reindexer(None, "a", "b").do()

    def test_fluent_setters(self, source_client, target_client) -> None:
        """测试链式设置."""
        progress = MagicMock()
        reindexer = (
            Reindexer(source_client, "a", "b")
            .with_target_client(target_client)
            .with_bulk_size(10)
            .scroll("1m")
            .query({"term": {"x": 1}})
            .progress(progress)
            .stats_only(False)
        )
        assert reindexer.target_client is target_client
        assert reindexer.bulk_size == 10


class TestReindexerDo:
    """重建索引执行测试."""

    @pytest.mark.parametrize("total,bulk_size", [(7, 3), (6, 3), (1, 500), (0, 10)])
    def test_bulk_commit_count(self, source_client, target_client, total, bulk_size) -> None:
        """测试 K 个文档提交 ceil(K / bulk_size) 次."""
        setup_source(source_client, total, page_size=2)

        response = Reindexer(
            source_client, "src", "dst", target_client=target_client, bulk_size=bulk_size
        ).do()

        assert response.bulk_commits == math.ceil(total / bulk_size)
        assert target_client.bulk.call_count == response.bulk_commits
        assert response.success + response.failed == total
        assert response.success == total

    def test_index_requests(self, source_client, target_client) -> None:
        """测试写入目标索引时保留文档ID、路由和内容."""
        source_client.search.return_value = make_page(
            [make_hit("42", {"name": "alice"}, _routing="tenant-1")], total=1
        )
        source_client.scroll.return_value = make_page([], total=1)

        Reindexer(source_client, "src", "dst", target_client=target_client).do()

        call_kwargs = target_client.bulk.call_args[1]
        assert call_kwargs["index"] == "dst"
        assert call_kwargs["operations"] == (
            '{"index":{"_index":"dst","_id":"42","routing":"tenant-1"}}\n{"name":"alice"}\n'
        )

    def test_scan_request(self, source_client, target_client) -> None:
        """测试扫描源索引的请求参数."""
        setup_source(source_client, 0, page_size=1)

        Reindexer(
            source_client,
            "src",
            "dst",
            target_client=target_client,
            query={"term": {"status": "active"}},
            bulk_size=100,
            scroll="1m",
        ).do()

        source_client.search.assert_called_once_with(
            index="src",
            scroll="1m",
            query={"term": {"status": "active"}},
            sort=["_doc"],
            size=100,
        )
        target_client.bulk.assert_not_called()

    def test_same_cluster_by_default(self, source_client) -> None:
        """测试未指定目标客户端时写回源集群."""
        setup_source(source_client, 2, page_size=2)
        source_client.bulk.side_effect = fake_bulk()

        response = Reindexer(source_client, "src", "dst").do()

        assert response.success == 2
        source_client.bulk.assert_called_once()

    def test_progress(self, source_client, target_client) -> None:
        """测试进度回调."""
        setup_source(source_client, 3, page_size=2)
        source_client.count.return_value = {"count": 3}
        calls = []

        Reindexer(
            source_client,
            "src",
            "dst",
            target_client=target_client,
            query={"match_all": {}},
            progress=lambda current, total: calls.append((current, total)),
        ).do()

        source_client.count.assert_called_once_with(index="src", query={"match_all": {}})
        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_no_count_without_progress(self, source_client, target_client) -> None:
        """测试未设置进度回调时不统计总数."""
        setup_source(source_client, 1, page_size=1)
        Reindexer(source_client, "src", "dst", target_client=target_client).do()
        source_client.count.assert_not_called()

    def test_partial_failures_stats_only(self, source_client, target_client) -> None:
        """测试单个文档失败只计数."""
        setup_source(source_client, 4, page_size=2)
        target_client.bulk.side_effect = fake_bulk(failing_ids={"2"})

        response = Reindexer(source_client, "src", "dst", target_client=target_client).do()

        assert response.success == 3
        assert response.failed == 1
        assert response.errors == []

    def test_partial_failures_collected(self, source_client, target_client) -> None:
        """测试 stats_only=False 时保留失败项详情."""
        setup_source(source_client, 4, page_size=2)
        target_client.bulk.side_effect = fake_bulk(failing_ids={"2", "4"})

        response = Reindexer(
            source_client, "src", "dst", target_client=target_client, stats_only=False
        ).do()

        assert response.failed == 2
        assert [item.id for item in response.errors] == ["2", "4"]

    def test_scroll_cleared_on_success(self, source_client, target_client) -> None:
        """测试完成后释放滚动上下文."""
        setup_source(source_client, 2, page_size=2)
        Reindexer(source_client, "src", "dst", target_client=target_client).do()
        source_client.clear_scroll.assert_called_once_with(scroll_id="s-end")


class TestReindexerFailure:
    """失败处理测试."""

    def test_bulk_rejected(self, source_client, target_client) -> None:
        """测试批量请求被拒绝时中止，并保留已完成部分的统计."""
        setup_source(source_client, 4, page_size=2)
        target_client.bulk.side_effect = [
            {
                "items": [
                    {"index": {"_index": "dst", "_id": "1", "status": 201}},
                    {"index": {"_index": "dst", "_id": "2", "status": 201}},
                ]
            },
            make_api_error(503),
        ]

        with pytest.raises(ReindexError) as exc_info:
            Reindexer(
                source_client, "src", "dst", target_client=target_client, bulk_size=2
            ).do()

        assert isinstance(exc_info.value.response, ReindexerResponse)
        assert exc_info.value.response.success == 2
        assert exc_info.value.response.bulk_commits == 1
        assert isinstance(exc_info.value.__cause__, SearchEngineError)
        source_client.clear_scroll.assert_called_once()

    def test_transport_error(self, source_client, target_client) -> None:
        """测试传输层异常被包装为 ReindexError."""
        source_client.search.return_value = make_page([make_hit("1")], total=2, scroll_id="s1")
        source_client.scroll.side_effect = ESConnectionError("connection refused")

        with pytest.raises(ReindexError) as exc_info:
            Reindexer(source_client, "src", "dst", target_client=target_client).do()

        assert isinstance(exc_info.value.__cause__, ESConnectionError)
        source_client.clear_scroll.assert_called_once_with(scroll_id="s1")

    def test_hit_without_source(self, source_client, target_client) -> None:
        """测试命中文档没有 _source."""
        hit = {"_index": "src", "_id": "1"}
        source_client.search.return_value = make_page([hit], total=1)

        with pytest.raises(ReindexError) as exc_info:
            Reindexer(source_client, "src", "dst", target_client=target_client).do()

        assert isinstance(exc_info.value.__cause__, ResponseDecodeError)
        target_client.bulk.assert_not_called()

    def test_clear_failure_does_not_mask_result(self, source_client, target_client) -> None:
        """测试释放滚动上下文失败时只记录日志."""
        setup_source(source_client, 1, page_size=1)
        source_client.clear_scroll.side_effect = make_api_error(500)

        response = Reindexer(source_client, "src", "dst", target_client=target_client).do()

        assert response.success == 1
