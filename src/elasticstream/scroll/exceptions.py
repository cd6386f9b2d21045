"""滚动查询异常定义模块."""

from ..exceptions import ElasticStreamError


class ScrollError(ElasticStreamError):
    """滚动查询基础异常类."""

    pass


class ScrollClearedError(ScrollError):
    """滚动上下文已被清除后继续翻页时抛出."""

    pass


class NoScrollIdError(ScrollError):
    """需要 scroll_id 但响应中没有返回时抛出."""

    pass


class ResponseSizeExceededError(ScrollError):
    """响应体超过 max_response_size 限制时抛出.

    Attributes:
        size: 实际响应大小（字节）
        limit: 配置的上限（字节）
    """

    def __init__(self, size: int, limit: int):
        super().__init__(f"elastic: response size {size} exceeds limit {limit}")
        self.size = size
        self.limit = limit
