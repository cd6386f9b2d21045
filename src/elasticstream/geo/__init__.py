"""地理坐标点模块.

提供 GeoPoint 值类型，用于在文档和查询中表示经纬度坐标。

使用示例:
    from elasticstream.geo import GeoPoint

    point = GeoPoint.from_string("40.10,-70.12")
    point.source()  # {"lat": 40.1, "lon": -70.12}
"""

from elasticstream.geo.exceptions import (
    GeoPointError,
    GeoPointParseError,
    InvalidGeoPointError,
)
from elasticstream.geo.models import GeoPoint

__all__ = [
    "GeoPoint",
    "GeoPointError",
    "GeoPointParseError",
    "InvalidGeoPointError",
]
