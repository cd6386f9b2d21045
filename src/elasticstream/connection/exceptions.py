"""客户端配置异常定义模块."""

from ..exceptions import ElasticStreamError


class ClientFactoryError(ElasticStreamError):
    """客户端工厂基础异常类."""

    pass


class ConnectionConfigError(ClientFactoryError):
    """连接配置校验异常.

    当连接配置参数不合法时抛出，例如 hosts 为空、request_timeout 小于 0 等。
    """

    pass


class ClusterNotFoundError(ClientFactoryError):
    """请求的集群角色没有对应配置时抛出."""

    pass
