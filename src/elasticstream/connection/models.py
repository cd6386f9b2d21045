"""客户端配置数据模型定义模块.

提供客户端工厂相关的数据模型，包括：
- ClusterRole: 集群角色枚举
- ClusterConfig: 集群配置
- ConnectionConfig: 传输层配置
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ConnectionConfigError


class ClusterRole(Enum):
    """集群角色枚举.

    用于标识集群在重建索引等跨集群操作中的角色。

    Attributes:
        DEFAULT: 默认集群
        SOURCE: 数据来源集群
        TARGET: 数据写入集群
    """

    DEFAULT = "default"
    SOURCE = "source"
    TARGET = "target"


@dataclass
class ClusterConfig:
    """集群配置模型.

    Attributes:
        hosts: ES 节点地址列表（必需，不可为空）
        role: 集群角色，默认 DEFAULT
        username: Basic Auth 用户名
        password: Basic Auth 密码
        api_key: API Key 认证（字符串或元组）
        bearer_token: Bearer Token 认证
        ca_certs: CA 证书文件路径
        verify_certs: 是否验证 SSL 证书，默认 True

    Raises:
        ConnectionConfigError: 当 hosts 为空时抛出

    Examples:
        >>> config = ClusterConfig(
        ...     hosts=["http://localhost:9200"],
        ...     role=ClusterRole.SOURCE,
        ...     username="elastic",
        ...     password="changeme",
        ... )
    """

    hosts: list[str] = field(default_factory=list)
    role: ClusterRole = ClusterRole.DEFAULT
    username: str | None = None
    password: str | None = None
    api_key: str | tuple[str, str] | None = None
    bearer_token: str | None = None
    ca_certs: str | None = None
    verify_certs: bool = True

    def __post_init__(self) -> None:
        if not self.hosts:
            raise ConnectionConfigError("hosts 不能为空，请提供至少一个 ES 节点地址")

    def auth_kwargs(self) -> dict[str, Any]:
        """生成认证与 SSL 相关的客户端参数."""
        kwargs: dict[str, Any] = {}
        if self.username and self.password:
            kwargs["basic_auth"] = (self.username, self.password)
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.bearer_token:
            kwargs["bearer_auth"] = self.bearer_token
        if self.ca_certs:
            kwargs["ca_certs"] = self.ca_certs
        kwargs["verify_certs"] = self.verify_certs
        return kwargs


@dataclass
class ConnectionConfig:
    """传输层配置模型.

    重试、嗅探等行为由 elasticsearch 客户端的传输层负责，这里只是原样传递参数。

    Attributes:
        max_retries: 最大重试次数，默认 3
        retry_on_timeout: 超时是否重试，默认 True
        request_timeout: 请求超时时间（秒），默认 30，必须 >= 0
        http_compress: 是否启用 HTTP 压缩，默认 True
        sniff_on_start: 启动时是否嗅探节点，默认 False
        sniff_on_connection_fail: 连接失败时是否嗅探，默认 False
        sniffer_timeout: 嗅探间隔（秒），默认 60

    Raises:
        ConnectionConfigError: 当参数不合法时抛出
    """

    max_retries: int = 3
    retry_on_timeout: bool = True
    request_timeout: float = 30
    http_compress: bool = True
    sniff_on_start: bool = False
    sniff_on_connection_fail: bool = False
    sniffer_timeout: float = 60

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConnectionConfigError(f"max_retries 必须 >= 0，当前值: {self.max_retries}")
        if self.request_timeout < 0:
            raise ConnectionConfigError(
                f"request_timeout 必须 >= 0，当前值: {self.request_timeout}"
            )

    def transport_kwargs(self) -> dict[str, Any]:
        return {
            "max_retries": self.max_retries,
            "retry_on_timeout": self.retry_on_timeout,
            "request_timeout": self.request_timeout,
            "http_compress": self.http_compress,
            "sniff_on_start": self.sniff_on_start,
            "sniff_on_connection_fail": self.sniff_on_connection_fail,
            "sniffer_timeout": self.sniffer_timeout,
        }
