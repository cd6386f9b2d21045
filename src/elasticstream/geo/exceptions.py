"""地理坐标点异常定义模块."""

from elasticstream.exceptions import ElasticStreamError


class GeoPointError(ElasticStreamError):
    """地理坐标点基础异常."""

    pass


class InvalidGeoPointError(GeoPointError):
    """无效的地理坐标点异常（经纬度超出范围）."""

    pass


class GeoPointParseError(GeoPointError):
    """地理坐标点字符串解析异常（缺少逗号、经纬度不是数字等）."""

    pass
