"""滚动查询与重建索引使用示例.

本文件展示了 ScanService、ScrollService、时间点（PIT）和 Reindexer 的常见用法。
"""

from elasticsearch import Elasticsearch
from elasticsearch.dsl import Q, Search

from elasticstream.connection import ClientFactory, ClusterConfig, ClusterRole
from elasticstream.scroll import (
    ScanService,
    ScrollService,
    close_point_in_time,
    open_point_in_time,
)

es_client = Elasticsearch(["http://localhost:9200"])


# ==================== 示例1：扫描整个索引 ====================
def example_scan():
    """按 _doc 顺序遍历索引中的全部文档."""
    with ScanService(es_client, "users").query(Q("term", city="北京")).size(500).do() as cursor:
        print(f"匹配总数: {cursor.total_hits()}")
        for page in cursor:
            for hit in page.hits.hits:
                print(hit.id, hit.source)


# ==================== 示例2：手动翻页直到 EOF ====================
def example_scroll_pages():
    """逐页调用 do()，返回值为假时说明已经没有更多数据."""
    search = Search().query("match", message="error").sort("-@timestamp").source(["message"])
    scroll = ScrollService(es_client, "logs-*").search_source(search).size(200).keep_alive("2m")

    try:
        while page := scroll.do():
            print(f"本页 {len(page.hits)} 条, scroll_id={page.scroll_id}")
    finally:
        scroll.clear()


# ==================== 示例3：切片并行滚动 ====================
def example_sliced_scroll(slice_id: int, max_slices: int = 4):
    """每个工作进程只处理一个切片."""
    with ScrollService(es_client, "logs-*").slice(slice_id, max_slices).size(1000) as scroll:
        count = sum(1 for _ in scroll.iter_hits())
    print(f"切片 {slice_id}: {count} 条")


# ==================== 示例4：时间点 ====================
def example_point_in_time():
    """打开时间点后在 search 请求中使用，最后关闭."""
    pit = open_point_in_time(es_client, "users", keep_alive="1m")
    try:
        response = es_client.search(pit=pit.source(), size=10, sort=["_shard_doc"])
        print(response["hits"]["total"])
    finally:
        close_point_in_time(es_client, pit)


# ==================== 示例5：跨集群重建索引 ====================
def example_reindex():
    """从源集群复制文档到目标集群，并打印进度."""
    factory = ClientFactory(
        [
            ClusterConfig(hosts=["http://old-cluster:9200"], role=ClusterRole.SOURCE),
            ClusterConfig(hosts=["http://new-cluster:9200"], role=ClusterRole.TARGET),
        ]
    )

    with factory:
        reindexer = factory.create_reindexer(
            "users-v1",
            "users-v2",
            bulk_size=1000,
            query={"range": {"age": {"gte": 18}}},
            progress=lambda current, total: print(f"\r进度: {current}/{total}", end=""),
        )
        response = reindexer.do()

    print(f"\n成功={response.success}, 失败={response.failed}, 批次={response.bulk_commits}")


def main():
    """运行所有示例."""
    example_scan()
    example_scroll_pages()
    example_sliced_scroll(0)
    example_point_in_time()
    example_reindex()


if __name__ == "__main__":
    main()
