import logging
import os

from mediastream.domain.external.health_checker import HealthChecker
from mediastream.domain.models.health_status import HealthStatus
from mediastream.infrastructure.external.file_storage.local_file_storage import LocalFileStorage

logger = logging.getLogger(__name__)


class StorageHealthChecker(HealthChecker):
    """本地文件存储健康检查器"""

    service_name = "storage"

    def __init__(self, file_storage: LocalFileStorage) -> None:
        self._file_storage = file_storage

    def check(self) -> HealthStatus:
        """检查基础目录是否存在且可写"""
        try:
            base_path = self._file_storage.base_path
            if not base_path.is_dir():
                return HealthStatus(
                    service=self.service_name,
                    status="error",
                    details=f"base_path_not_exists: {base_path}",
                )
            if not os.access(base_path, os.W_OK):
                return HealthStatus(
                    service=self.service_name,
                    status="error",
                    details=f"base_path_not_writable: {base_path}",
                )
            return HealthStatus(service=self.service_name, status="ok")
        except Exception as e:
            logger.error(f"Storage health check failed: {str(e)}")
            return HealthStatus(service=self.service_name, status="error", details=str(e))
