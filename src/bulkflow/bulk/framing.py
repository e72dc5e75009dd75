"""批量请求体记录构建模块.

每个操作项被编码为两行 JSON：操作头和文档，各以换行符结尾::

    {"index":{"_index":"users","_type":"_doc","_id":"1"}}
    {"name":"Alice"}

序列化使用 Elasticsearch 客户端自带的 JsonSerializer（紧凑格式、UTF-8），
以保证与客户端发送普通请求体时的编码行为一致。
"""

from __future__ import annotations

from typing import Any, Protocol

from elasticsearch.serializer import JsonSerializer

from bulkflow.typing import HeaderDict

from .exceptions import BulkValidationError
from .models import BulkAction, BulkEntry

NEWLINE = b"\n"


class Serializer(Protocol):
    """请求体序列化器协议，与 elastic_transport 的 Serializer.dumps 一致."""

    def dumps(self, data: Any) -> bytes: ...


DEFAULT_SERIALIZER = JsonSerializer()


def build_header(
    action: BulkAction,
    index_name: str,
    doc_type: str | None,
    doc_id: str,
) -> HeaderDict:
    """构建操作头.

    Args:
        action: 操作类型
        index_name: 索引名称
        doc_type: 文档类型，为 None 时不输出 ``_type``
        doc_id: 文档ID

    Returns:
        形如 {"index": {"_index": ..., "_type": ..., "_id": ...}} 的字典
    """
    meta = {"_index": index_name}
    if doc_type is not None:
        meta["_type"] = doc_type
    meta["_id"] = doc_id
    return {action.value: meta}


def build_document(action: BulkAction, document: Any) -> Any:
    """构建文档行内容.

    UPDATE 操作需要包装为部分更新格式，并启用 doc_as_upsert（不存在时创建）；
    其他操作直接使用原文档。
    """
    if action == BulkAction.UPDATE:
        return {"doc": document, "doc_as_upsert": True}
    return document


def encode_line(data: Any, serializer: Serializer | None = None) -> bytes:
    """将一行内容序列化为 JSON 字节.

    默认序列化器直接调用 ``json_dumps``，字符串文档也会被编码为 JSON 字符串；
    自定义序列化器调用其 ``dumps`` 方法。

    Raises:
        elasticsearch.exceptions.SerializationError: 值无法序列化时抛出
        BulkValidationError: 自定义序列化器输出多行时抛出
    """
    if serializer is None:
        line = DEFAULT_SERIALIZER.json_dumps(data)
    else:
        line = serializer.dumps(data)
    if NEWLINE in line:
        raise BulkValidationError(f"编码结果包含换行符，无法写入批量请求体: {line!r}")
    return line


def frame_entry(entry: BulkEntry, serializer: Serializer | None = None) -> bytes:
    """将操作项编码为完整的两行记录.

    按 索引名称、文档类型、文档ID、操作类型、文档 的顺序查询操作项，
    任一查询或序列化失败时异常原样抛出。

    Returns:
        ``操作头 + b"\\n" + 文档 + b"\\n"``
    """
    index_name = entry.get_index_name()
    doc_type = entry.get_doc_type()
    doc_id = entry.get_doc_id()
    action = BulkAction.coerce(entry.get_action())
    header = encode_line(build_header(action, index_name, doc_type, doc_id), serializer)

    document = build_document(action, entry.get_document())
    values = encode_line(document, serializer)

    return b"".join((header, NEWLINE, values, NEWLINE))
