"""批量请求体累加器模块.

BulkBody 将操作项逐个编码写入缓冲区，在缓冲区达到大小上限或调用方显式调用
``done()`` 时写入结束分隔符并封口。封口后拒绝继续写入，直到调用方清空缓冲区：
下一次 ``add()`` 观察到缓冲区为空时会自动解除封口，开始新一轮累加。

典型用法::

    body = BulkBody(10 * ByteSize.MB)
    for entry in entries:
        try:
            body.add(entry)
        except BulkBodyFullError:
            send(body.drain())  # drain() 读取并清空缓冲区
            body.add(entry)
    body.done()
    send(body.drain())

BulkBody 不是线程安全的，多个生产者共享时需要在整个
add/done/读取/清空 周期内持有同一把锁。
"""

from __future__ import annotations

import logging

from .exceptions import BulkBodyFullError, BulkValidationError
from .framing import NEWLINE, Serializer, frame_entry
from .models import BodyState, BulkBodyConfig, BulkEntry
from .utils import format_byte_size, parse_byte_size

logger = logging.getLogger(__name__)


class BulkBody:
    """大小受限的 _bulk 请求体构建器.

    大小上限是软水位：写入前只检查缓冲区当前大小是否已达到上限，不预估本次
    写入的记录大小，因此单条记录可以使缓冲区超出上限，超出会在下一次写入时
    被发现并触发封口。

    Args:
        max_size: 大小上限，字节数或大小格式字符串（如 "10mb"），必须 > 0
        serializer: 自定义序列化器，默认使用 Elasticsearch 客户端的 JsonSerializer

    Attributes:
        buffer: 请求体缓冲区，调用方可直接读取和清空

    Raises:
        BulkValidationError: 当 max_size 不合法时抛出
    """

    def __init__(
        self,
        max_size: int | str,
        serializer: Serializer | None = None,
    ) -> None:
        size = parse_byte_size(max_size)
        if size <= 0:
            raise BulkValidationError(f"max_size 必须 > 0，当前值: {size}")
        self._max_size = size
        self._serializer = serializer
        self._done = False
        self._count = 0
        self.buffer = bytearray()

    @classmethod
    def from_config(
        cls, config: BulkBodyConfig, serializer: Serializer | None = None
    ) -> BulkBody:
        """根据配置创建请求体."""
        return cls(config.max_size, serializer=serializer)

    @property
    def max_size(self) -> int:
        """大小上限（字节）."""
        return self._max_size

    @property
    def is_done(self) -> bool:
        """是否已封口."""
        return self._done

    @property
    def state(self) -> BodyState:
        """请求体当前状态."""
        return BodyState.SEALED if self._done else BodyState.OPEN

    @property
    def count(self) -> int:
        """缓冲区上次为空以来写入的操作数."""
        return self._count if self.buffer else 0

    @property
    def remaining(self) -> int:
        """距离大小上限的剩余字节数."""
        return max(self._max_size - len(self.buffer), 0)

    def __len__(self) -> int:
        return len(self.buffer)

    def getvalue(self) -> bytes:
        """返回缓冲区内容的快照."""
        return bytes(self.buffer)

    def drain(self) -> bytes:
        """读取并清空缓冲区.

        封口标志不在此处清除，而是由下一次 ``add()`` 观察到空缓冲区时清除。
        """
        data = bytes(self.buffer)
        self.buffer.clear()
        return data

    def add(self, entry: BulkEntry) -> int:
        """写入一个操作项.

        Args:
            entry: 操作项

        Returns:
            本次写入的字节数

        Raises:
            BulkBodyFullError: 已封口，或写入前缓冲区已达到大小上限（此时会自动封口）
            BulkValidationError: 操作类型不支持或编码结果包含换行符
            elasticsearch.exceptions.SerializationError: 操作头或文档无法序列化

        操作项查询方法抛出的异常原样传递，失败时不写入任何字节。
        """
        # 缓冲区被外部清空，说明上一批已发送，解除封口
        if not self.buffer:
            self._count = 0
            if self._done:
                logger.debug("检测到缓冲区已清空，解除封口")
                self._done = False

        if self._done:
            logger.warning("批量请求体已封口，拒绝写入")
            raise BulkBodyFullError()

        if len(self.buffer) >= self._max_size:
            logger.warning(
                f"批量请求体已达到大小上限 {format_byte_size(self._max_size)}"
                f"（当前 {format_byte_size(len(self.buffer))}），自动封口"
            )
            self.done()
            raise BulkBodyFullError()

        record = frame_entry(entry, self._serializer)
        self.buffer.extend(record)
        self._count += 1

        if len(record) > self._max_size:
            logger.warning(
                f"单条记录大小 {format_byte_size(len(record))} 超过上限 "
                f"{format_byte_size(self._max_size)}"
            )
        logger.debug(f"写入记录 {len(record)} 字节，当前 {len(self.buffer)} 字节")
        return len(record)

    def done(self) -> None:
        """写入结束分隔符并封口，已封口时不做任何操作."""
        if self._done:
            return
        if not self.buffer:
            self._count = 0
        self.buffer.extend(NEWLINE)
        self._done = True
        logger.info(
            f"批量请求体已封口: {self.count} 个操作，"
            f"{format_byte_size(len(self.buffer))}"
        )
