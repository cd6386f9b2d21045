"""
ES 查询结果解析器.

提供将 Elasticsearch 原始响应解析为结构化数据对象的功能.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from elasticstream.parsers.results import SearchHit, SearchResult
from elasticstream.parsers.types import HighlightedHit, SuggestionItem

# 模块级别日志记录器
logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResponseParser(Generic[T]):
    """
    ES 查询结果解析器.

    将 Elasticsearch 原始响应解析为 SearchResult，并把命中文档转换为业务对象.

    使用示例:
        parser = ResponseParser(
            item_transformer=transform_to_alert,
            highlight_fields=["message"],
        )

        for page in scroll_service:
            for alert in parser.parse_hits(page):
                print(alert)
    """

    def __init__(
        self,
        item_transformer: Callable[[dict[str, Any]], T] | None = None,
        highlight_fields: list[str] | None = None,
        include_meta: bool = False,
    ) -> None:
        """
        初始化解析器.

        Args:
            item_transformer: 文档转换函数，将 ES 文档 _source 转换为业务对象
            highlight_fields: 需要提取的高亮字段列表
            include_meta: 是否在转换时包含元数据（_id, _index, _score）
        """
        self._item_transformer = item_transformer
        self._highlight_fields = highlight_fields or []
        self._include_meta = include_meta

    def parse(self, response: Any) -> SearchResult:
        """
        解析原始响应.

        Args:
            response: 原始字典、ObjectApiResponse 或已解析的 SearchResult

        Returns:
            SearchResult 实例
        """
        if isinstance(response, SearchResult):
            return response
        return SearchResult.from_dict(response)

    def parse_hits(self, response: Any) -> list[T]:
        """解析命中文档列表，返回转换后的文档."""
        result = self.parse(response)
        return [self._transform_hit(hit) for hit in result.hits.hits]

    def parse_highlights(
        self,
        response: Any,
        fields: list[str] | None = None,
    ) -> list[HighlightedHit[T]]:
        """
        解析高亮命中.

        Args:
            response: ES 原始响应
            fields: 要提取的高亮字段，None 表示使用初始化时指定的字段

        Returns:
            高亮命中列表
        """
        result = self.parse(response)
        target_fields = fields or self._highlight_fields

        highlighted: list[HighlightedHit[T]] = []
        for hit in result.hits.hits:
            if target_fields:
                highlights = {
                    name: hit.highlight[name]
                    for name in target_fields
                    if name in hit.highlight
                }
            else:
                highlights = dict(hit.highlight)

            highlighted.append(
                HighlightedHit(
                    source=self._transform_hit(hit),
                    highlights=highlights,
                    score=hit.score,
                    doc_id=hit.id,
                    index=hit.index,
                )
            )
        return highlighted

    def parse_suggestions(self, response: Any, suggest_name: str) -> list[SuggestionItem]:
        """解析指定建议器的建议项."""
        result = self.parse(response)
        entries = result.suggest.get(suggest_name, [])

        items: list[SuggestionItem] = []
        for entry in entries:
            for option in entry.get("options", []):
                items.append(
                    SuggestionItem(
                        text=option.get("text", ""),
                        score=option.get("score", option.get("_score")),
                        freq=option.get("freq"),
                        highlighted=option.get("highlighted"),
                    )
                )
        return items

    def _transform_hit(self, hit: SearchHit) -> T:
        source = dict(hit.source or {})

        if self._include_meta:
            source.update({"_id": hit.id, "_index": hit.index, "_score": hit.score})

        if self._item_transformer:
            return self._item_transformer(source)

        return source  # type: ignore
