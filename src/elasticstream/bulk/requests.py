"""批量操作请求定义模块.

每个请求序列化为 Bulk API 的一行或两行 NDJSON:
    - index/create: 操作元数据行 + 文档行
    - update: 操作元数据行 + 部分更新体行
    - delete: 仅操作元数据行

序列化是纯函数，每次调用 source() 都按当前字段重新计算.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..typing import Document
from ..utils import dumps_compact, to_dsl_dict, to_plain_document
from .exceptions import BulkSerializationError, BulkValidationError
from .models import BulkAction


def encode_document(doc: Document) -> str:
    """将文档编码为单行 JSON.

    - None 编码为 "{}"
    - str 视为已编码的 JSON，原样使用
    - bytes/bytearray 按 UTF-8 解码后原样使用
    - dataclass 或带 to_dict() 的对象先转换为字典
    - 其他值按 JSON 编码

    Raises:
        BulkSerializationError: 文档无法编码为 JSON 时抛出
    """
    if doc is None:
        return "{}"
    if isinstance(doc, str):
        return doc
    if isinstance(doc, (bytes, bytearray)):
        return bytes(doc).decode("utf-8")
    try:
        return dumps_compact(to_plain_document(doc))
    except (TypeError, ValueError) as e:
        raise BulkSerializationError(f"文档无法编码为 JSON: {e}") from e


def _decode_raw(value: Any) -> Any:
    """将预编码的 JSON 文档还原为对象，以便嵌入到更新体中."""
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8")
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError as e:
            raise BulkSerializationError(f"预编码文档不是合法的 JSON: {e}") from e
    return to_plain_document(value)


class BulkableRequest(ABC):
    """可加入批量请求的操作."""

    action: BulkAction

    @abstractmethod
    def source(self) -> list[str]:
        """返回该操作的 NDJSON 行."""

    def __str__(self) -> str:
        return "\n".join(self.source())


def _meta(
    index: str | None,
    type_: str | None,
    doc_id: str | None,
    **options: Any,
) -> dict[str, Any]:
    meta: dict[str, Any] = {}
    if index:
        meta["_index"] = index
    if type_:
        meta["_type"] = type_
    if doc_id:
        meta["_id"] = doc_id
    for key, value in options.items():
        if value is not None:
            meta[key] = value
    return meta


@dataclass(frozen=True)
class BulkIndexRequest(BulkableRequest):
    """index/create 操作.

    Attributes:
        index: 索引名称，为空时使用 BulkService 的默认索引
        id: 文档ID，为空时由 ES 自动生成
        doc: 文档内容
        type: 文档类型（仅用于 ES 6.x 及更早版本）
        op_type: "index"（存在则覆盖）或 "create"（存在则失败）
        routing: 路由
        version: 外部版本号
        version_type: 版本类型，如 "external"
        if_seq_no: 乐观并发控制的序列号
        if_primary_term: 乐观并发控制的主分片任期
        pipeline: ingest pipeline

    Examples:
        >>> BulkIndexRequest(index="i", id="1", doc={"a": 1}).source()
        ['{"index":{"_index":"i","_id":"1"}}', '{"a":1}']
    """

    index: str | None = None
    id: str | None = None
    doc: Document = None
    type: str | None = None
    op_type: str = "index"
    routing: str | None = None
    version: int | None = None
    version_type: str | None = None
    if_seq_no: int | None = None
    if_primary_term: int | None = None
    pipeline: str | None = None

    def __post_init__(self) -> None:
        if self.op_type not in (BulkAction.INDEX.value, BulkAction.CREATE.value):
            raise BulkValidationError(
                f"op_type 必须为 'index' 或 'create'，当前值: '{self.op_type}'"
            )

    @property
    def action(self) -> BulkAction:  # type: ignore[override]
        return BulkAction(self.op_type)

    def source(self) -> list[str]:
        # {"index":{"_index":"test","_id":"1"}}
        # {"field1":"value1"}
        meta = _meta(
            self.index,
            self.type,
            self.id,
            routing=self.routing,
            version=self.version,
            version_type=self.version_type,
            if_seq_no=self.if_seq_no,
            if_primary_term=self.if_primary_term,
            pipeline=self.pipeline,
        )
        return [dumps_compact({self.op_type: meta}), encode_document(self.doc)]


@dataclass(frozen=True)
class BulkUpdateRequest(BulkableRequest):
    """update 操作.

    Attributes:
        index: 索引名称
        id: 文档ID
        type: 文档类型（仅用于 ES 6.x 及更早版本）
        routing: 路由
        retry_on_conflict: 版本冲突时由 ES 服务端重试的次数
        version: 版本号
        version_type: 版本类型
        if_seq_no: 乐观并发控制的序列号
        if_primary_term: 乐观并发控制的主分片任期
        doc: 部分更新的文档
        doc_as_upsert: 文档不存在时是否以 doc 创建
        upsert: 文档不存在时插入的文档
        script: 更新脚本，字符串视为 {"source": script}
        scripted_upsert: 文档不存在时是否仍执行脚本
        detect_noop: 是否检测无变化的更新
        return_source: 是否在响应中返回更新后的 _source
    """

    index: str | None = None
    id: str | None = None
    type: str | None = None
    routing: str | None = None
    retry_on_conflict: int | None = None
    version: int | None = None
    version_type: str | None = None
    if_seq_no: int | None = None
    if_primary_term: int | None = None
    doc: Document = None
    doc_as_upsert: bool | None = None
    upsert: Any = None
    script: Any = None
    scripted_upsert: bool | None = None
    detect_noop: bool | None = None
    return_source: bool | None = None

    action = BulkAction.UPDATE

    def body(self) -> dict[str, Any]:
        """生成部分更新体."""
        body: dict[str, Any] = {}
        if self.doc is not None:
            body["doc"] = _decode_raw(self.doc)
        if self.doc_as_upsert is not None:
            body["doc_as_upsert"] = self.doc_as_upsert
        if self.detect_noop is not None:
            body["detect_noop"] = self.detect_noop
        if self.upsert is not None:
            body["upsert"] = _decode_raw(self.upsert)
        if self.scripted_upsert is not None:
            body["scripted_upsert"] = self.scripted_upsert
        if self.script is not None:
            script = self.script
            if isinstance(script, str):
                script = {"source": script}
            body["script"] = to_dsl_dict(script)
        if self.return_source is not None:
            body["_source"] = self.return_source
        return body

    def source(self) -> list[str]:
        # {"update":{"_index":"test","_id":"1","retry_on_conflict":3}}
        # {"doc":{"field1":"value1"}}
        meta = _meta(
            self.index,
            self.type,
            self.id,
            routing=self.routing,
            retry_on_conflict=self.retry_on_conflict,
            version=self.version,
            version_type=self.version_type,
            if_seq_no=self.if_seq_no,
            if_primary_term=self.if_primary_term,
        )
        try:
            body_line = dumps_compact(self.body())
        except (TypeError, ValueError) as e:
            raise BulkSerializationError(f"更新体无法编码为 JSON: {e}") from e
        return [dumps_compact({"update": meta}), body_line]


@dataclass(frozen=True)
class BulkDeleteRequest(BulkableRequest):
    """delete 操作，只有一行操作元数据."""

    index: str | None = None
    id: str | None = None
    type: str | None = None
    routing: str | None = None
    version: int | None = None
    version_type: str | None = None
    if_seq_no: int | None = None
    if_primary_term: int | None = None

    action = BulkAction.DELETE

    def source(self) -> list[str]:
        meta = _meta(
            self.index,
            self.type,
            self.id,
            routing=self.routing,
            version=self.version,
            version_type=self.version_type,
            if_seq_no=self.if_seq_no,
            if_primary_term=self.if_primary_term,
        )
        return [dumps_compact({"delete": meta})]
