import logging

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from mediastream.domain.external.health_checker import HealthChecker
from mediastream.domain.models.health_status import HealthStatus

logger = logging.getLogger(__name__)


class DatabaseHealthChecker(HealthChecker):
    """数据库健康检查器"""

    service_name = "database"

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def check(self) -> HealthStatus:
        """执行一段简单的sql，用于判断数据库服务是否正常"""
        try:
            with self._session_factory() as session:
                session.execute(text("SELECT 1"))
            return HealthStatus(service=self.service_name, status="ok")
        except Exception as e:
            logger.error(f"数据库健康检查失败: {str(e)}")
            return HealthStatus(
                service=self.service_name,
                status="error",
                details=str(e),
            )
