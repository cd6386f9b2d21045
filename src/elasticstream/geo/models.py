"""地理坐标点数据模型模块."""

from __future__ import annotations

from dataclasses import dataclass

from elasticstream.geo.exceptions import GeoPointParseError, InvalidGeoPointError


@dataclass(frozen=True)
class GeoPoint:
    """地理坐标点数据模型.

    表示一个地理坐标点，包含纬度和经度。
    创建时会自动校验经纬度范围的合法性。

    Attributes:
        lat: 纬度，范围 [-90, 90]
        lon: 经度，范围 [-180, 180]

    Raises:
        InvalidGeoPointError: 当经纬度超出合法范围时抛出

    Examples:
        >>> point = GeoPoint.from_string("40.10,-70.12")
        >>> point.source()
        {'lat': 40.1, 'lon': -70.12}
        >>> point.to_string()
        '40.1,-70.12'
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """校验经纬度范围."""
        if not -90 <= self.lat <= 90:
            raise InvalidGeoPointError(f"纬度值 {self.lat} 超出合法范围 [-90, 90]")
        if not -180 <= self.lon <= 180:
            raise InvalidGeoPointError(f"经度值 {self.lon} 超出合法范围 [-180, 180]")

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> GeoPoint:
        """根据经纬度创建坐标点."""
        return cls(lat=lat, lon=lon)

    @classmethod
    def from_string(cls, lat_lon: str) -> GeoPoint:
        """解析 "lat,lon" 格式的字符串.

        Args:
            lat_lon: 如 "40.10,-70.12"

        Returns:
            GeoPoint 实例

        Raises:
            GeoPointParseError: 缺少逗号或经纬度不是合法数字时抛出
            InvalidGeoPointError: 经纬度超出合法范围时抛出
        """
        parts = lat_lon.split(",", 1)
        if len(parts) != 2:
            raise GeoPointParseError(f"elastic: {lat_lon} is not a valid geo point string")
        try:
            lat = float(parts[0])
            lon = float(parts[1])
        except ValueError as e:
            raise GeoPointParseError(
                f"elastic: {lat_lon} is not a valid geo point string: {e}"
            ) from e
        return cls(lat=lat, lon=lon)

    def source(self) -> dict[str, float]:
        """生成 Elasticsearch 格式的字典，如 {"lat": 40.1, "lon": -70.12}."""
        return {"lat": self.lat, "lon": self.lon}

    def to_string(self) -> str:
        """转换为 "lat,lon" 格式的字符串."""
        return f"{self.lat},{self.lon}"
