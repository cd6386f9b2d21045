"""elasticstream 类型定义模块."""

from collections.abc import Callable
from typing import Any, Dict, Union

# 查询类型: elasticsearch.dsl 的 Query/Search 对象（带 to_dict 方法）或原始 DSL 字典
QueryLike = Any

# 文档类型: 字典、dataclass、带 to_dict 的对象、预编码的 JSON 字符串或字节
Document = Union[Dict[str, Any], str, bytes, Any]

# 进度回调: (当前处理数, 总数)
ProgressFunc = Callable[[int, int], None]
