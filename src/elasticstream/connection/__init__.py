"""ES 客户端工厂模块 - 统一管理 Elasticsearch 客户端的创建和生命周期.

主要组件:
    - ClientFactory: 客户端工厂，按集群角色管理源集群和目标集群
    - ClusterConfig: 集群配置模型
    - ConnectionConfig: 传输层配置模型
    - ClusterRole: 集群角色枚举

使用示例:
    from elasticstream.connection import ClientFactory, ClusterConfig

    factory = ClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
    client = factory.get_client()
"""

from .exceptions import ClientFactoryError, ClusterNotFoundError, ConnectionConfigError
from .models import ClusterConfig, ClusterRole, ConnectionConfig
from .tool import ClientFactory

__all__ = [
    "ClientFactory",
    "ClusterConfig",
    "ConnectionConfig",
    "ClusterRole",
    "ClientFactoryError",
    "ConnectionConfigError",
    "ClusterNotFoundError",
]
