"""地理坐标点数据模型单元测试."""

import pytest

from elasticstream.geo.exceptions import GeoPointError, GeoPointParseError, InvalidGeoPointError
from elasticstream.geo.models import GeoPoint


class TestGeoPoint:
    """GeoPoint 数据模型测试."""

    def test_create_valid_point(self) -> None:
        """测试创建合法坐标点."""
        point = GeoPoint(lat=39.9, lon=116.4)
        assert point.lat == 39.9
        assert point.lon == 116.4

    def test_boundary_values(self) -> None:
        """测试边界值."""
        GeoPoint(lat=90, lon=180)
        GeoPoint(lat=-90, lon=-180)

    def test_lat_out_of_range(self) -> None:
        """测试纬度超出范围."""
        with pytest.raises(InvalidGeoPointError, match="纬度"):
            GeoPoint(lat=90.1, lon=0)

    def test_lon_out_of_range(self) -> None:
        """测试经度超出范围."""
        with pytest.raises(InvalidGeoPointError, match="经度"):
            GeoPoint(lat=0, lon=-180.5)

    def test_frozen(self) -> None:
        """测试坐标点不可变."""
        point = GeoPoint(lat=1, lon=2)
        with pytest.raises(AttributeError):
            point.lat = 3  # type: ignore[misc]

    def test_from_lat_lon(self) -> None:
        """测试 from_lat_lon."""
        assert GeoPoint.from_lat_lon(40.1, -70.12) == GeoPoint(40.1, -70.12)


class TestGeoPointFromString:
    """GeoPoint.from_string 测试."""

    def test_parse(self) -> None:
        """测试解析 "lat,lon" 字符串."""
        assert GeoPoint.from_string("40.10,-70.12") == GeoPoint(40.10, -70.12)

    def test_parse_with_spaces(self) -> None:
        """测试逗号两侧带空格."""
        assert GeoPoint.from_string(" 40.10 , -70.12 ") == GeoPoint(40.10, -70.12)

    def test_missing_comma(self) -> None:
        """测试缺少逗号."""
        with pytest.raises(GeoPointParseError, match="not a valid geo point"):
            GeoPoint.from_string("40.10")

    def test_not_a_number(self) -> None:
        """测试经纬度不是数字."""
        with pytest.raises(GeoPointParseError):
            GeoPoint.from_string("abc,-70.12")

    def test_extra_component(self) -> None:
        """测试多余的逗号导致经度无法解析."""
        with pytest.raises(GeoPointParseError):
            GeoPoint.from_string("1,2,3")

    def test_out_of_range_after_parse(self) -> None:
        """测试解析成功但超出范围."""
        with pytest.raises(InvalidGeoPointError):
            GeoPoint.from_string("91,0")

    def test_errors_share_base_class(self) -> None:
        """测试解析异常和范围异常都属于 GeoPointError."""
        assert issubclass(GeoPointParseError, GeoPointError)
        assert issubclass(InvalidGeoPointError, GeoPointError)


class TestGeoPointSerialization:
    """GeoPoint 序列化测试."""

    def test_source(self) -> None:
        """测试生成 ES 格式的字典."""
        assert GeoPoint(40.1, -70.12).source() == {"lat": 40.1, "lon": -70.12}

    def test_to_string(self) -> None:
        """测试生成 "lat,lon" 字符串."""
        assert GeoPoint(40.1, -70.12).to_string() == "40.1,-70.12"

    def test_string_round_trip(self) -> None:
        """测试字符串往返."""
        point = GeoPoint(-33.86, 151.2)
        assert GeoPoint.from_string(point.to_string()) == point
