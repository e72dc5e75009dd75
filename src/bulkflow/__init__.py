"""bulkflow - Elasticsearch Bulk Request Body Builder.

这是一个用于构建 Elasticsearch _bulk 请求体的 Python 库，只负责请求体的编码、
分批与封口，不负责网络传输。

主要功能:
    - BulkBody: 大小受限的请求体累加器
    - BulkOperation: 批量操作项（index/create/update/delete）
    - BulkBodyBuilder: 将大量操作项切分为多个请求体

使用示例:
    from bulkflow import BulkBody, BulkOperation, ByteSize

    body = BulkBody(5 * ByteSize.MB)
    body.add(BulkOperation.index("users", {"name": "Alice"}, doc_id="1"))
    body.done()
    payload = body.drain()
"""

__version__ = "0.1.0"

# 导出批量请求体组件
from bulkflow.bulk import (
    BodyState,
    BulkAction,
    BulkBatch,
    BulkBody,
    BulkBodyBuilder,
    BulkBodyConfig,
    BulkBodyError,
    BulkBodyFullError,
    BulkEntry,
    BulkOperation,
    BulkValidationError,
    ByteSize,
)

# 导出异常
from bulkflow.exceptions import BulkflowError

__all__ = [
    # 版本
    "__version__",
    # 请求体
    "BulkBody",
    "BulkBodyBuilder",
    "BulkBodyConfig",
    "BulkBatch",
    # 操作项
    "BulkEntry",
    "BulkOperation",
    # 枚举
    "BulkAction",
    "BodyState",
    "ByteSize",
    # 异常
    "BulkflowError",
    "BulkBodyError",
    "BulkBodyFullError",
    "BulkValidationError",
]
