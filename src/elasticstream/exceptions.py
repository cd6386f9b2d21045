"""elasticstream 异常定义模块.

异常分为三类:
    - 传输层异常（连接失败、超时）: 直接使用 elasticsearch 客户端抛出的原始异常，不做包装
    - 搜索引擎返回的业务异常（4xx/5xx）: 转换为 SearchEngineError 及其子类
    - 响应结构异常: ResponseDecodeError
"""

from __future__ import annotations

from typing import Any

from elasticsearch import ApiError, ConnectionTimeout


class ElasticStreamError(Exception):
    """elasticstream 基础异常类."""

    pass


class ResponseDecodeError(ElasticStreamError):
    """响应结构不符合预期的异常."""

    pass


class SearchEngineError(ElasticStreamError):
    """搜索引擎返回的错误.

    Attributes:
        status: HTTP 状态码
        error_type: 错误类型，如 "index_not_found_exception"
        reason: 错误原因
        root_cause: 根本原因列表
        body: 原始响应体
    """

    def __init__(
        self,
        message: str,
        status: int = 0,
        error_type: str | None = None,
        reason: str | None = None,
        root_cause: list[dict[str, Any]] | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status = status
        self.error_type = error_type
        self.reason = reason
        self.root_cause = root_cause or []
        self.body = body


class ResourceNotFoundError(SearchEngineError):
    """资源不存在（404）."""

    pass


class VersionConflictError(SearchEngineError):
    """版本冲突（409）."""

    pass


class EngineTimeoutError(SearchEngineError):
    """请求超时（408）."""

    pass


_STATUS_ERRORS: dict[int, type[SearchEngineError]] = {
    404: ResourceNotFoundError,
    408: EngineTimeoutError,
    409: VersionConflictError,
}


def translate_api_error(exc: ApiError) -> SearchEngineError:
    """将 elasticsearch 客户端的 ApiError 转换为带类型的 SearchEngineError.

    调用方应使用 ``raise translate_api_error(e) from e`` 保留原始异常链.

    Args:
        exc: elasticsearch 客户端抛出的 ApiError

    Returns:
        对应状态码的 SearchEngineError 子类实例
    """
    status = exc.status_code
    body = exc.body
    error_type = None
    reason = None
    root_cause: list[dict[str, Any]] = []

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error_type = error.get("type")
        reason = error.get("reason")
        root_cause = error.get("root_cause") or []
    elif isinstance(error, str):
        # ES 1.x 时代的错误格式: {"error": "...", "status": 404}
        reason = error

    message = f"elastic: Error {status}"
    if error_type:
        message += f" ({error_type})"
    if reason:
        message += f": {reason}"

    error_cls = _STATUS_ERRORS.get(status, SearchEngineError)
    return error_cls(
        message,
        status=status,
        error_type=error_type,
        reason=reason,
        root_cause=root_cause,
        body=body,
    )


def _status_of(err: BaseException | None) -> int | None:
    if isinstance(err, SearchEngineError):
        return err.status
    if isinstance(err, ApiError):
        return err.status_code
    return None


def is_status_code(err: BaseException | None, code: int) -> bool:
    """判断异常是否对应指定的 HTTP 状态码."""
    return _status_of(err) == code


def is_not_found(err: BaseException | None) -> bool:
    """判断异常是否表示资源不存在（404）."""
    return is_status_code(err, 404)


def is_conflict(err: BaseException | None) -> bool:
    """判断异常是否表示版本冲突（409）."""
    return is_status_code(err, 409)


def is_timeout(err: BaseException | None) -> bool:
    """判断异常是否表示超时.

    同时识别搜索引擎返回的 408 和客户端传输层的 ConnectionTimeout.
    """
    if isinstance(err, ConnectionTimeout):
        return True
    return is_status_code(err, 408)
