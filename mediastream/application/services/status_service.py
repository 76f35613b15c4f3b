import logging
from typing import List

from mediastream.domain.external.health_checker import HealthChecker
from mediastream.domain.models.health_status import HealthStatus

logger = logging.getLogger(__name__)


class StatusService:
    """Aggregates health checks for system services."""

    def __init__(self, checkers: List[HealthChecker]) -> None:
        """Create the service with the health checkers."""
        self._checkers = checkers

    def check_all(self) -> List[HealthStatus]:
        """Run all health checks and return their statuses."""
        statuses: List[HealthStatus] = []
        for checker in self._checkers:
            try:
                statuses.append(checker.check())
            except Exception as e:
                service = getattr(checker, "service_name", checker.__class__.__name__)
                logger.error(f"{service} health check failed: {str(e)}")
                statuses.append(
                    HealthStatus(service=str(service), status="error", details=str(e))
                )

        # Include FastAPI itself as always-ok.
        statuses.append(HealthStatus(service="fastapi", status="ok"))
        return statuses
