"""批量请求体构建使用示例.

本文件展示了如何使用 BulkBody 和 BulkBodyBuilder 构建 _bulk 请求体，
并交给 Elasticsearch 客户端发送。bulkflow 本身不发送网络请求。
"""

import logging

from elasticsearch import Elasticsearch

from bulkflow.bulk import (
    BulkBody,
    BulkBodyBuilder,
    BulkBodyConfig,
    BulkBodyFullError,
    BulkOperation,
    ByteSize,
)

logging.basicConfig(level=logging.INFO)

# 创建 Elasticsearch 客户端连接
es_client = Elasticsearch(["http://localhost:9200"])

# ES 8 不再接受 _type，操作项和配置均使用 doc_type=None
DOC_TYPE = None


# ==================== 示例1：手动累加与封口 ====================
def example_manual_body():
    """逐个写入操作项，写满时发送并复用请求体."""
    body = BulkBody(5 * ByteSize.MB)
    operations = [
        BulkOperation.index(
            "users", {"name": "张三", "age": 25}, doc_id="1", doc_type=DOC_TYPE
        ),
        BulkOperation.create(
            "users", {"name": "李四", "age": 30}, doc_id="2", doc_type=DOC_TYPE
        ),
        BulkOperation.update("users", "1", {"city": "杭州"}, doc_type=DOC_TYPE),
        BulkOperation.delete("users", "3", doc_type=DOC_TYPE),
    ]

    for operation in operations:
        try:
            body.add(operation)
        except BulkBodyFullError:
            # 请求体已封口：发送后清空缓冲区，下一次写入会自动解除封口
            es_client.bulk(body=body.drain())
            body.add(operation)

    body.done()
    response = es_client.bulk(body=body.drain())
    print(f"批量写入完成: errors={response['errors']}")


# ==================== 示例2：自动分批 ====================
def example_builder():
    """使用 BulkBodyBuilder 将大量文档切分为多个请求体."""
    builder = BulkBodyBuilder(
        BulkBodyConfig(max_size="1mb", max_actions=1000, doc_type=DOC_TYPE)
    )
    documents = ({"id": str(i), "value": i} for i in range(10000))

    for batch in builder.iter_batches(
        BulkOperation.index("metrics", doc, doc_id=doc["id"], doc_type=DOC_TYPE)
        for doc in documents
    ):
        es_client.bulk(body=batch.body)
        print(f"已发送批次: {batch.count} 个操作, {batch.size} 字节")


# ==================== 示例3：文档列表辅助方法 ====================
def example_document_helpers():
    """批量更新与删除."""
    builder = BulkBodyBuilder(BulkBodyConfig(doc_type=DOC_TYPE))

    updates = [
        {"id": "1", "age": 26},
        {"id": "2", "name": "王小五"},
    ]
    for batch in builder.update_documents("users", updates):
        es_client.bulk(body=batch.body)

    for batch in builder.delete_documents("users", ["1", "2"]):
        es_client.bulk(body=batch.body)


if __name__ == "__main__":
    example_manual_body()
    example_builder()
    example_document_helpers()
