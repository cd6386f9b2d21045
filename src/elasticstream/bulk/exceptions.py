"""批量操作异常定义模块."""

from ..exceptions import ElasticStreamError


class BulkOperationError(ElasticStreamError):
    """批量操作基础异常类."""

    pass


class BulkValidationError(BulkOperationError):
    """批量操作验证异常（如没有任何待提交的操作）."""

    pass


class BulkSerializationError(BulkOperationError):
    """批量操作序列化异常（文档无法编码为 JSON）."""

    pass
