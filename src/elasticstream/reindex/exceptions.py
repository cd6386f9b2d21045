"""重建索引异常定义模块."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import ElasticStreamError

if TYPE_CHECKING:
    from .models import ReindexerResponse


class ReindexConfigError(ElasticStreamError):
    """重建索引配置不完整时抛出，例如缺少源客户端或索引名称."""

    pass


class ReindexError(ElasticStreamError):
    """重建索引中途失败.

    原始异常保存在 __cause__ 中.

    Attributes:
        response: 失败前已完成部分的统计
    """

    def __init__(self, message: str, response: ReindexerResponse):
        super().__init__(message)
        self.response = response
