from typing import Protocol

from mediastream.domain.models.health_status import HealthStatus


class HealthChecker(Protocol):
    """服务健康检查器协议"""

    def check(self) -> HealthStatus:
        """执行健康检查并返回服务状态"""
        ...
