"""批量请求体构建工具类."""

import logging
from typing import Any
from collections.abc import Callable, Iterable, Iterator

from .body import BulkBody
from .exceptions import BulkBodyFullError, BulkValidationError
from .framing import Serializer
from .models import BulkAction, BulkBatch, BulkBodyConfig, BulkEntry, BulkOperation
from .utils import format_byte_size

logger = logging.getLogger(__name__)

# set_config 中表示“未传入”，以便 doc_type=None 可用于关闭 _type
_UNSET: Any = object()


class BulkBodyBuilder:
    """批量请求体构建工具类.

    将任意数量的操作项切分为多个已封口的 _bulk 请求体，每个请求体可直接交给
    传输层发送。支持：
    - 按大小上限自动分批
    - 按操作数上限分批
    - 流式处理（不需要将所有操作项加载到内存）

    Args:
        config: 请求体配置，默认使用 BulkBodyConfig 的默认值
        serializer: 自定义序列化器，默认使用 Elasticsearch 客户端的 JsonSerializer
    """

    def __init__(
        self,
        config: BulkBodyConfig | None = None,
        serializer: Serializer | None = None,
    ):
        self.config = config if config is not None else BulkBodyConfig()
        self.serializer = serializer
        logger.info(
            f"初始化批量请求体构建工具: max_size={format_byte_size(self.config.max_size)}, "
            f"max_actions={self.config.max_actions}"
        )

    @staticmethod
    def _seal(body: BulkBody) -> BulkBatch:
        """封口并取出请求体，缓冲区清空后可继续复用."""
        count = body.count
        body.done()
        data = body.drain()
        return BulkBatch(body=data, count=count, size=len(data))

    def iter_batches(
        self,
        entries: Iterable[BulkEntry],
        progress_callback: Callable[[int, BulkBatch], None] | None = None,
    ) -> Iterator[BulkBatch]:
        """流式生成已封口的批量请求体.

        请求体写满时（BulkBodyFullError）先产出当前批次，再将被拒绝的操作项写入
        新一轮请求体。操作项查询或序列化失败时异常直接抛出。

        Args:
            entries: 操作项迭代器
            progress_callback: 进度回调函数，参数为 (已处理操作数, 当前批次)

        Yields:
            已封口的批量请求体

        Example:
            >>> builder = BulkBodyBuilder(BulkBodyConfig(max_size="5mb"))
            >>> operations = (BulkOperation.index("logs", {"n": i}) for i in range(100000))
            >>> for batch in builder.iter_batches(operations):
            ...     es_client.bulk(body=batch.body)
        """
        body = BulkBody.from_config(self.config, serializer=self.serializer)
        max_actions = self.config.max_actions
        batch_count = 0
        processed_count = 0

        def emit() -> BulkBatch:
            nonlocal batch_count, processed_count
            batch = self._seal(body)
            batch_count += 1
            processed_count += batch.count
            logger.info(
                f"批次 {batch_count}: {batch.count} 个操作, "
                f"{format_byte_size(batch.size)}"
            )
            if progress_callback:
                progress_callback(processed_count, batch)
            return batch

        for entry in entries:
            try:
                body.add(entry)
            except BulkBodyFullError:
                yield emit()
                body.add(entry)

            if max_actions is not None and body.count >= max_actions:
                yield emit()

        if len(body):
            yield emit()

    def build(self, entries: Iterable[BulkEntry]) -> list[BulkBatch]:
        """构建全部批量请求体.

        Args:
            entries: 操作项列表

        Returns:
            已封口的批量请求体列表，输入为空时返回空列表
        """
        return list(self.iter_batches(entries))

    def set_config(
        self,
        max_size: int | str | None = None,
        max_actions: int | None = None,
        doc_type: str | None = _UNSET,
    ) -> None:
        """更新工具配置.

        Args:
            max_size: 请求体大小上限
            max_actions: 每个请求体最多包含的操作数
            doc_type: 文档类型，传入 None 时操作头不输出 _type
        """
        self.config = BulkBodyConfig(
            max_size=max_size if max_size is not None else self.config.max_size,
            max_actions=(
                max_actions if max_actions is not None else self.config.max_actions
            ),
            doc_type=doc_type if doc_type is not _UNSET else self.config.doc_type,
        )
        logger.info(
            f"更新配置: max_size={format_byte_size(self.config.max_size)}, "
            f"max_actions={self.config.max_actions}, "
            f"doc_type={self.config.doc_type}"
        )

    def _document_operations(
        self,
        action: BulkAction,
        index_name: str,
        documents: Iterable[dict[str, Any]],
        doc_id_field: str | None,
    ) -> Iterator[BulkOperation]:
        """将文档列表转换为 INDEX 或 CREATE 操作项."""
        for doc in documents:
            doc_id = ""
            if doc_id_field and doc.get(doc_id_field) is not None:
                doc_id = str(doc[doc_id_field])

            yield BulkOperation(
                action=action,
                index_name=index_name,
                doc_id=doc_id,
                source=doc,
                doc_type=self.config.doc_type,
            )

    def index_documents(
        self,
        index_name: str,
        documents: Iterable[dict[str, Any]],
        doc_id_field: str | None = None,
    ) -> list[BulkBatch]:
        """构建批量索引请求体.

        Args:
            index_name: 索引名称
            documents: 文档列表
            doc_id_field: 用作文档ID的字段名，如果不指定则让ES自动生成ID

        Returns:
            已封口的批量请求体列表

        Example:
            >>> builder = BulkBodyBuilder()
            >>> documents = [{"id": "1", "name": "Alice"}, {"id": "2", "name": "Bob"}]
            >>> batches = builder.index_documents("users", documents, doc_id_field="id")
        """
        return self.build(
            self._document_operations(
                BulkAction.INDEX, index_name, documents, doc_id_field
            )
        )

    def create_documents(
        self,
        index_name: str,
        documents: Iterable[dict[str, Any]],
        doc_id_field: str | None = None,
    ) -> list[BulkBatch]:
        """构建批量创建请求体，文档已存在时 ES 会返回冲突错误.

        Args:
            index_name: 索引名称
            documents: 文档列表
            doc_id_field: 用作文档ID的字段名，如果不指定则让ES自动生成ID

        Returns:
            已封口的批量请求体列表
        """
        return self.build(
            self._document_operations(
                BulkAction.CREATE, index_name, documents, doc_id_field
            )
        )

    def update_documents(
        self,
        index_name: str,
        updates: Iterable[dict[str, Any]],
        doc_id_field: str = "id",
    ) -> list[BulkBatch]:
        """构建批量更新请求体.

        更新操作以 doc_as_upsert 方式写入：文档存在则部分更新，不存在则创建。

        Args:
            index_name: 索引名称
            updates: 更新数据列表，每个元素应包含文档ID和要更新的字段
            doc_id_field: 用作文档ID的字段名，默认为 "id"

        Returns:
            已封口的批量请求体列表

        Raises:
            BulkValidationError: 更新数据中缺少文档ID字段时抛出

        Example:
            >>> builder = BulkBodyBuilder()
            >>> updates = [
            ...     {"id": "1", "name": "Alice Smith"},
            ...     {"id": "2", "name": "Bob Johnson"},
            ... ]
            >>> batches = builder.update_documents("users", updates)
        """
        operations: list[BulkOperation] = []

        for update_data in updates:
            doc_id = update_data.get(doc_id_field)
            if doc_id is None or doc_id == "":
                raise BulkValidationError(
                    f"更新数据中缺少文档ID字段 '{doc_id_field}': {update_data}"
                )

            # 排除ID字段，只保留需要更新的字段
            source = {k: v for k, v in update_data.items() if k != doc_id_field}

            operations.append(
                BulkOperation.update(
                    index_name, str(doc_id), source, doc_type=self.config.doc_type
                )
            )

        return self.build(operations)

    def delete_documents(
        self,
        index_name: str,
        doc_ids: Iterable[str],
    ) -> list[BulkBatch]:
        """构建批量删除请求体.

        Args:
            index_name: 索引名称
            doc_ids: 文档ID列表

        Returns:
            已封口的批量请求体列表
        """
        return self.build(
            BulkOperation.delete(index_name, str(doc_id), doc_type=self.config.doc_type)
            for doc_id in doc_ids
        )
