"""批量请求体工具函数单元测试."""

import pytest

from bulkflow.bulk.exceptions import BulkValidationError
from bulkflow.bulk.utils import format_byte_size, parse_byte_size


class TestParseByteSize:
    """parse_byte_size 函数测试."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1b", 1),
            ("1kb", 1024),
            ("10mb", 10 * 1024**2),
            ("10MB", 10 * 1024**2),
            ("2Gb", 2 * 1024**3),
            ("1tb", 1024**4),
            ("1pb", 1024**5),
            (" 5kb ", 5 * 1024),
            ("0kb", 0),
        ],
    )
    def test_valid_size_strings(self, value: str, expected: int) -> None:
        """测试合法的 ES 大小格式."""
        assert parse_byte_size(value) == expected

    def test_int_passthrough(self) -> None:
        """测试整数原样返回."""
        assert parse_byte_size(2048) == 2048

    @pytest.mark.parametrize(
        "value", ["", "abc", "10", "mb", "10 mb", "1.5mb", "-1kb", "10xb"]
    )
    def test_invalid_size_strings(self, value: str) -> None:
        """测试不合法的大小格式."""
        with pytest.raises(BulkValidationError):
            parse_byte_size(value)

    @pytest.mark.parametrize("value", [None, 1.5, True, [], {}])
    def test_invalid_types(self, value) -> None:
        """测试非法类型."""
        with pytest.raises(BulkValidationError):
            parse_byte_size(value)  # type: ignore[arg-type]


class TestFormatByteSize:
    """format_byte_size 函数测试."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (0, "0b"),
            (512, "512b"),
            (1024, "1kb"),
            (1536, "1.5kb"),
            (10 * 1024**2, "10mb"),
            (3 * 1024**3, "3gb"),
        ],
    )
    def test_format(self, size: int, expected: str) -> None:
        """测试格式化输出."""
        assert format_byte_size(size) == expected
