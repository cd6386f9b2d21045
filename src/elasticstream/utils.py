"""
elasticstream 工具函数模块

提供 DSL 对象转换、响应体提取和紧凑 JSON 编码等通用函数
"""

import dataclasses
import json
from typing import Any


def dumps_compact(value: Any) -> str:
    """
    将对象编码为紧凑 JSON 字符串（无多余空格，保留非 ASCII 字符）。

    示例:
        >>> dumps_compact({"index": {"_index": "i", "_id": "1"}})
        '{"index":{"_index":"i","_id":"1"}}'
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def to_dsl_dict(value: Any) -> Any:
    """
    将 elasticsearch.dsl 对象转换为原始 DSL。

    支持 Q/Search/A 等带 to_dict() 的对象，字典和列表会递归处理，
    其他值原样返回。

    Args:
        value: DSL 对象、字典或其他值

    Returns:
        可直接 JSON 序列化的值
    """
    if value is None:
        return None
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: to_dsl_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dsl_dict(v) for v in value]
    return value


def to_plain_document(doc: Any) -> Any:
    """将 dataclass 或带 to_dict() 的对象转换为字典，其他值原样返回."""
    if hasattr(doc, "to_dict"):
        return doc.to_dict()
    if dataclasses.is_dataclass(doc) and not isinstance(doc, type):
        return dataclasses.asdict(doc)
    return doc


def response_body(response: Any) -> Any:
    """
    提取客户端响应的原始响应体。

    elasticsearch 8.x 的 API 返回 ObjectApiResponse，响应体位于 .body；
    原始字典则直接返回。
    """
    if isinstance(response, (dict, list)):
        return response
    body = getattr(response, "body", None)
    if body is not None:
        return body
    return response


def response_size(response: Any) -> int:
    """
    获取响应体大小（字节）。

    优先读取响应头中的 Content-Length，缺失时按紧凑 JSON 编码估算。
    响应经过压缩（Content-Encoding 不是 identity）时 Content-Length 是压缩后的大小，
    此时同样按解码后的响应体估算。
    """
    meta = getattr(response, "meta", None)
    headers = getattr(meta, "headers", None)
    if headers is not None:
        try:
            content_length = headers.get("content-length")
            content_encoding = headers.get("content-encoding")
        except AttributeError:
            content_length = None
            content_encoding = None
        if content_encoding and content_encoding.strip().lower() != "identity":
            content_length = None
        if content_length is not None:
            try:
                return int(content_length)
            except (TypeError, ValueError):
                pass
    return len(dumps_compact(response_body(response)).encode("utf-8"))
