"""批量请求体模块.

该模块用于构建 Elasticsearch _bulk 接口的请求体，包括：
- 操作项契约（BulkEntry）及默认实现（BulkOperation）
- 大小受限的请求体累加器（BulkBody），支持封口与清空后复用
- 自动分批构建工具（BulkBodyBuilder）

本模块只负责构建请求体，不发送网络请求。

示例用法:
    >>> from elasticsearch import Elasticsearch
    >>> from bulkflow.bulk import BulkBody, BulkOperation, ByteSize
    >>> body = BulkBody(10 * ByteSize.MB)
    >>> body.add(BulkOperation.index("users", {"name": "Alice"}, doc_id="1"))
    >>> body.done()
    >>> Elasticsearch("http://localhost:9200").bulk(body=body.drain())
"""

from .body import BulkBody
from .exceptions import (
    BulkBodyError,
    BulkBodyFullError,
    BulkValidationError,
)
from .framing import build_document, build_header, frame_entry
from .models import (
    BodyState,
    BulkAction,
    BulkBatch,
    BulkBodyConfig,
    BulkEntry,
    BulkOperation,
    ByteSize,
)
from .tool import BulkBodyBuilder
from .utils import format_byte_size, parse_byte_size

__all__ = [
    "BodyState",
    "BulkAction",
    "BulkBatch",
    "BulkBody",
    "BulkBodyBuilder",
    "BulkBodyConfig",
    "BulkEntry",
    "BulkOperation",
    "ByteSize",
    "BulkBodyError",
    "BulkBodyFullError",
    "BulkValidationError",
    "build_document",
    "build_header",
    "frame_entry",
    "format_byte_size",
    "parse_byte_size",
]
