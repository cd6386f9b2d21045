"""批量操作使用示例.

本文件展示了如何使用 BulkService 组装并提交 Elasticsearch 批量请求。
"""

from dataclasses import dataclass

from elasticsearch import Elasticsearch

from elasticstream.bulk import (
    BulkDeleteRequest,
    BulkIndexRequest,
    BulkService,
    BulkUpdateRequest,
)

# 创建 Elasticsearch 客户端连接
es_client = Elasticsearch(["http://localhost:9200"])


@dataclass
class User:
    name: str
    age: int
    city: str


# ==================== 示例1：批量索引 ====================
def example_bulk_index():
    """批量索引文档到 Elasticsearch."""
    users = {
        "1": User("张三", 25, "北京"),
        "2": User("李四", 30, "上海"),
        "3": User("王五", 28, "广州"),
    }

    bulk = BulkService(es_client, index="users", refresh="wait_for")
    for doc_id, user in users.items():
        # dataclass 会自动转换为字典
        bulk.add(BulkIndexRequest(id=doc_id, doc=user))

    print(f"待提交操作数: {bulk.number_of_actions()}")
    print(f"请求体大小: {bulk.estimated_size_in_bytes()} 字节")

    response = bulk.do()
    print(f"批量索引结果: 成功={len(response.succeeded())}, 失败={len(response.failed())}")
    return response


# ==================== 示例2：混合操作 ====================
def example_mixed_operations():
    """在一个批量请求中混合更新、创建和删除."""
    bulk = BulkService(es_client, index="users")
    bulk.add(
        BulkUpdateRequest(id="1", doc={"age": 26}, retry_on_conflict=3),
        BulkUpdateRequest(id="4", doc={"name": "赵六", "age": 35}, doc_as_upsert=True),
        BulkIndexRequest(id="5", op_type="create", doc={"name": "钱七"}),
        BulkDeleteRequest(id="3"),
    )

    # 提交前查看 NDJSON 请求体
    print(bulk.body_as_string())

    response = bulk.do()
    # 部分失败不会抛出异常，需要检查每一项
    if response.errors:
        print(response.get_error_summary())
    for item in response.updated():
        print(f"更新 {item.id}: {item.result}")
    return response


# ==================== 示例3：按条数分批提交 ====================
def example_batched_commit(batch_size: int = 1000):
    """生成大量文档并按固定条数分批提交."""
    bulk = BulkService(es_client, index="logs", request_timeout=60)
    total_failed = 0

    for i in range(10000):
        bulk.add(BulkIndexRequest(doc={"seq": i, "message": f"日志 {i}"}))
        if bulk.number_of_actions() >= batch_size:
            total_failed += len(bulk.do().failed())

    if bulk.number_of_actions() > 0:
        total_failed += len(bulk.do().failed())

    print(f"失败总数: {total_failed}")


def main():
    """运行所有示例."""
    print("=" * 50)
    print("批量操作示例")
    print("=" * 50)

    example_bulk_index()
    example_mixed_operations()
    example_batched_commit()


if __name__ == "__main__":
    main()
