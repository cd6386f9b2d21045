"""测试辅助函数."""

from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ApiError
from elasticsearch.exceptions import HTTP_EXCEPTIONS


def make_api_error(status, body=None):
    """构造与 elasticsearch 客户端抛出的一致的 ApiError."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )
    error_cls = HTTP_EXCEPTIONS.get(status, ApiError)
    return error_cls(message=f"HTTP {status}", meta=meta, body=body or {})


def make_hit(doc_id, source=None, index="users", **extra):
    hit = {"_index": index, "_id": doc_id, "_score": None, "_source": source or {"id": doc_id}}
    hit.update(extra)
    return hit


def make_page(hits, total=None, scroll_id="scroll-1"):
    """构造一页搜索/滚动响应."""
    page = {
        "took": 1,
        "timed_out": False,
        "_shards": {"total": 1, "successful": 1, "skipped": 0, "failed": 0},
        "hits": {
            "total": {"value": len(hits) if total is None else total, "relation": "eq"},
            "max_score": None,
            "hits": hits,
        },
    }
    if scroll_id is not None:
        page["_scroll_id"] = scroll_id
    return page
