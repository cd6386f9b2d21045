"""ES 客户端工厂工具模块.

使用示例:
    from elasticstream.connection import ClientFactory, ClusterConfig, ClusterRole

    clusters = [
        ClusterConfig(hosts=["http://old-cluster:9200"], role=ClusterRole.SOURCE),
        ClusterConfig(hosts=["http://new-cluster:9200"], role=ClusterRole.TARGET),
    ]

    with ClientFactory(clusters) as factory:
        factory.create_reindexer("orders", "orders").do()
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch

from ..reindex import Reindexer
from .exceptions import ClusterNotFoundError, ConnectionConfigError
from .models import ClusterConfig, ClusterRole, ConnectionConfig

logger = logging.getLogger(__name__)


class ClientFactory:
    """Elasticsearch 客户端工厂.

    按集群角色惰性创建并缓存客户端，每个角色只创建一个客户端。

    Examples:
        >>> factory = ClientFactory([ClusterConfig(hosts=["http://localhost:9200"])])
        >>> client = factory.get_client()
    """

    def __init__(
        self,
        clusters: list[ClusterConfig],
        connection_config: ConnectionConfig | None = None,
    ) -> None:
        """初始化客户端工厂.

        Args:
            clusters: 集群配置列表，不可为空
            connection_config: 传输层配置，默认使用 ConnectionConfig 的默认值

        Raises:
            ConnectionConfigError: 当 clusters 为空时抛出
        """
        if not clusters:
            raise ConnectionConfigError("clusters 不能为空，请提供至少一个集群配置")
        self._clusters = clusters
        self._connection_config = connection_config or ConnectionConfig()
        self._clients: dict[ClusterRole, Elasticsearch] = {}

    def _create_client(self, cluster_config: ClusterConfig) -> Elasticsearch:
        kwargs: dict[str, Any] = {"hosts": cluster_config.hosts}
        kwargs.update(self._connection_config.transport_kwargs())
        kwargs.update(cluster_config.auth_kwargs())
        logger.info(f"创建 {cluster_config.role.value} 集群客户端: {cluster_config.hosts}")
        return Elasticsearch(**kwargs)

    def get_client(self, role: ClusterRole | None = None) -> Elasticsearch:
        """获取指定角色的客户端.

        role 为 None 时，优先返回 DEFAULT 角色的客户端，若不存在则返回列表中第一个集群的客户端。

        Raises:
            ClusterNotFoundError: 当指定角色的集群不存在时抛出
        """
        if role is None:
            return self._get_default_client()

        if role in self._clients:
            return self._clients[role]

        for cluster in self._clusters:
            if cluster.role == role:
                client = self._create_client(cluster)
                self._clients[role] = client
                return client

        raise ClusterNotFoundError(f"未找到角色为 {role.value} 的集群配置")

    def _get_default_client(self) -> Elasticsearch:
        for cluster in self._clusters:
            if cluster.role == ClusterRole.DEFAULT:
                return self.get_client(ClusterRole.DEFAULT)
        return self.get_client(self._clusters[0].role)

    def get_source_client(self) -> Elasticsearch:
        """获取源集群客户端，不存在 SOURCE 角色时回退到默认客户端."""
        try:
            return self.get_client(ClusterRole.SOURCE)
        except ClusterNotFoundError:
            return self.get_client()

    def get_target_client(self) -> Elasticsearch:
        """获取目标集群客户端，不存在 TARGET 角色时回退到默认客户端."""
        try:
            return self.get_client(ClusterRole.TARGET)
        except ClusterNotFoundError:
            return self.get_client()

    def create_reindexer(self, source_index: str, target_index: str, **options: Any) -> Reindexer:
        """创建从源集群到目标集群的 Reindexer.

        Args:
            source_index: 源索引
            target_index: 目标索引
            **options: 传给 Reindexer 的其他参数，如 bulk_size、query、progress

        Example:
            >>> factory.create_reindexer("logs", "logs-v2", bulk_size=1000).do()
        """
        return Reindexer(
            self.get_source_client(),
            source_index,
            target_index,
            target_client=self.get_target_client(),
            **options,
        )

    def __enter__(self) -> ClientFactory:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """上下文管理器退出，自动关闭所有客户端."""
        self.close_all()

    def close_all(self) -> None:
        """关闭所有已创建的客户端并清空缓存.

        关闭后可重新调用 get_client() 创建新的客户端。
        """
        for role, client in self._clients.items():
            try:
                client.close()
            except Exception as e:
                # 单个客户端关闭失败不影响其余客户端
                logger.warning(f"关闭 {role.value} 集群客户端失败: {e}")
                continue
            logger.info(f"{role.value} 集群客户端已关闭")
        self._clients.clear()
