"""批量请求体数据模型定义模块.

提供批量操作类型（BulkAction）、字节单位（ByteSize）、请求体状态（BodyState）、
操作项契约（BulkEntry）及其默认实现（BulkOperation）、请求体配置（BulkBodyConfig）
和封口批次（BulkBatch）。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any

from .exceptions import BulkValidationError
from .utils import parse_byte_size


class BulkAction(Enum):
    """批量操作类型枚举."""

    CREATE = "create"
    INDEX = "index"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def coerce(cls, value: BulkAction | str) -> BulkAction:
        """将字符串或枚举值转换为 BulkAction.

        Raises:
            BulkValidationError: 当值不是支持的操作类型时抛出
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise BulkValidationError(
                f"不支持的操作类型: {value!r}，"
                f"可选值: {', '.join(a.value for a in cls)}"
            ) from None


class ByteSize(IntEnum):
    """字节单位常量.

    Examples:
        >>> 10 * ByteSize.MB
        10485760
    """

    KB = 1024
    MB = 1024**2
    GB = 1024**3


class BodyState(Enum):
    """批量请求体状态枚举.

    Attributes:
        OPEN: 可继续写入操作项
        SEALED: 已写入结束分隔符，在缓冲区被清空前拒绝写入
    """

    OPEN = "open"
    SEALED = "sealed"


class BulkEntry(ABC):
    """批量操作项契约.

    任何可写入批量请求体的操作都需要实现以下五个查询方法。每个查询都可能抛出异常，
    异常会原样传递给 ``BulkBody.add`` 的调用方，且不会写入任何字节。
    """

    @abstractmethod
    def get_index_name(self) -> str:
        """返回目标索引名称."""

    @abstractmethod
    def get_doc_type(self) -> str | None:
        """返回文档类型（``_type``）."""

    @abstractmethod
    def get_doc_id(self) -> str:
        """返回文档ID，空字符串表示由 ES 自动生成."""

    @abstractmethod
    def get_action(self) -> BulkAction | str:
        """返回操作类型."""

    @abstractmethod
    def get_document(self) -> Any:
        """返回文档内容（可 JSON 序列化的值）."""


@dataclass(frozen=True)
class BulkOperation(BulkEntry):
    """批量操作项数据类.

    Attributes:
        action: 操作类型，可传入字符串，创建时自动转换为 BulkAction
        index_name: 索引名称
        doc_id: 文档ID（可选，为空时由 ES 自动生成）
        source: 文档源数据（UPDATE 操作时为需要更新的部分字段）
        doc_type: 文档类型，默认为 "_doc"，为 None 时操作头不输出 _type

    Raises:
        BulkValidationError: 当操作类型不支持或索引名称为空时抛出

    Examples:
        >>> op = BulkOperation.index("users", {"name": "Alice"}, doc_id="1")
        >>> op.get_action()
        <BulkAction.INDEX: 'index'>
    """

    action: BulkAction
    index_name: str
    doc_id: str = ""
    source: Any = None
    doc_type: str | None = "_doc"

    def __post_init__(self) -> None:
        """校验并规范化操作项."""
        object.__setattr__(self, "action", BulkAction.coerce(self.action))
        if not self.index_name:
            raise BulkValidationError("index_name 不能为空")

    @classmethod
    def index(
        cls,
        index_name: str,
        source: Any,
        doc_id: str = "",
        doc_type: str | None = "_doc",
    ) -> BulkOperation:
        """创建 INDEX 操作项（存在则覆盖）."""
        return cls(BulkAction.INDEX, index_name, doc_id, source, doc_type)

    @classmethod
    def create(
        cls,
        index_name: str,
        source: Any,
        doc_id: str = "",
        doc_type: str | None = "_doc",
    ) -> BulkOperation:
        """创建 CREATE 操作项（已存在时 ES 返回冲突）."""
        return cls(BulkAction.CREATE, index_name, doc_id, source, doc_type)

    @classmethod
    def update(
        cls, index_name: str, doc_id: str, source: Any, doc_type: str | None = "_doc"
    ) -> BulkOperation:
        """创建 UPDATE 操作项，写入时会包装为 doc_as_upsert."""
        return cls(BulkAction.UPDATE, index_name, doc_id, source, doc_type)

    @classmethod
    def delete(
        cls, index_name: str, doc_id: str, doc_type: str | None = "_doc"
    ) -> BulkOperation:
        """创建 DELETE 操作项."""
        return cls(BulkAction.DELETE, index_name, doc_id, None, doc_type)

    def get_index_name(self) -> str:
        return self.index_name

    def get_doc_type(self) -> str | None:
        return self.doc_type

    def get_doc_id(self) -> str:
        return self.doc_id

    def get_action(self) -> BulkAction:
        return self.action

    def get_document(self) -> Any:
        return self.source


@dataclass
class BulkBodyConfig:
    """批量请求体配置模型.

    Attributes:
        max_size: 请求体大小上限，字节数或大小格式字符串（如 "10mb"），
            默认 100mb（与 ES 默认的 http.max_content_length 一致）
        max_actions: 每个请求体最多包含的操作数，默认不限制
        doc_type: 文档列表辅助方法使用的文档类型，默认 "_doc"，
            为 None 时操作头不输出 _type

    Raises:
        BulkValidationError: 当参数不合法时抛出

    Examples:
        >>> config = BulkBodyConfig(max_size="5mb", max_actions=1000)
        >>> config.max_size
        5242880
    """

    max_size: int | str = 100 * ByteSize.MB
    max_actions: int | None = None
    doc_type: str | None = "_doc"

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        self.max_size = parse_byte_size(self.max_size)
        if self.max_size <= 0:
            raise BulkValidationError(f"max_size 必须 > 0，当前值: {self.max_size}")
        if self.max_actions is not None and self.max_actions < 1:
            raise BulkValidationError(
                f"max_actions 必须 >= 1，当前值: {self.max_actions}"
            )


@dataclass
class BulkBatch:
    """已封口的批量请求体.

    Attributes:
        body: 可直接作为 _bulk 请求体发送的字节序列
        count: 包含的操作数
        size: 请求体字节数
    """

    body: bytes
    count: int
    size: int
