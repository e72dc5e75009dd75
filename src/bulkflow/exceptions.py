"""bulkflow 异常定义模块."""


class BulkflowError(Exception):
    """bulkflow 基础异常类."""

    pass
