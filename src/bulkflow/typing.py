"""bulkflow 类型定义模块."""

from typing import Dict

# 操作头内部元数据类型
# 格式: {"_index": 索引名, "_type": 类型, "_id": 文档ID}
HeaderMeta = Dict[str, str]

# 操作头类型
# 格式: {操作类型: HeaderMeta}
HeaderDict = Dict[str, HeaderMeta]
