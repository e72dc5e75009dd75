"""批量请求体工具函数模块.

提供 ES 大小格式（如 "10mb"）的解析与格式化功能，用于配置请求体大小上限。
"""

import re

from .exceptions import BulkValidationError

# ES 大小格式正则：数字 + 大小单位（b, kb, mb, gb, tb, pb）不区分大小写
_SIZE_PATTERN = re.compile(r"^(\d+)(b|kb|mb|gb|tb|pb)$", re.IGNORECASE)

# 大小单位到字节的转换映射（按 1024 进制）
_SIZE_UNIT_TO_BYTES: dict[str, int] = {
    "b": 1,
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
    "tb": 1024**4,
    "pb": 1024**5,
}

_FORMAT_UNITS = ("b", "kb", "mb", "gb", "tb", "pb")


def parse_byte_size(value: int | str) -> int:
    """将大小值解析为字节数.

    整数原样返回；字符串按 ES 大小格式解析，单位不区分大小写。

    Args:
        value: 字节数，或大小格式字符串，如 "10mb", "512KB", "1gb"

    Returns:
        字节数

    Raises:
        BulkValidationError: 当值既不是整数也不是合法的大小格式时抛出

    Examples:
        >>> parse_byte_size("1kb")
        1024
        >>> parse_byte_size("10MB")
        10485760
        >>> parse_byte_size(2048)
        2048
    """
    # bool 是 int 的子类，需单独排除
    if isinstance(value, bool):
        raise BulkValidationError(f"无效的大小值: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise BulkValidationError(f"无效的大小值: {value!r}")

    match = _SIZE_PATTERN.match(value.strip())
    if not match:
        raise BulkValidationError(
            f"无效的大小格式: {value!r}，应为数字加单位，如 '10mb'"
        )
    number = int(match.group(1))
    unit = match.group(2).lower()
    return number * _SIZE_UNIT_TO_BYTES[unit]


def format_byte_size(size: int) -> str:
    """将字节数格式化为便于阅读的字符串，用于日志输出.

    Examples:
        >>> format_byte_size(512)
        '512b'
        >>> format_byte_size(1536)
        '1.5kb'
        >>> format_byte_size(10 * 1024 * 1024)
        '10mb'
    """
    value = float(size)
    for unit in _FORMAT_UNITS:
        if abs(value) < 1024 or unit == _FORMAT_UNITS[-1]:
            if value.is_integer():
                return f"{int(value)}{unit}"
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{size}b"  # pragma: no cover
