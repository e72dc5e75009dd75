"""批量请求体异常定义模块."""

from ..exceptions import BulkflowError


class BulkBodyError(BulkflowError):
    """批量请求体基础异常类."""

    pass


class BulkBodyFullError(BulkBodyError):
    """批量请求体已满异常.

    在请求体已封口，或写入前缓冲区大小已达到上限时抛出。
    """

    def __init__(self, message: str = "No more operations can be added") -> None:
        super().__init__(message)


class BulkValidationError(BulkBodyError):
    """批量请求体验证异常.

    当配置参数或操作项不合法时抛出，例如未知的操作类型、非正数的大小上限。
    """

    pass
