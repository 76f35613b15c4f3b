import logging
from typing import List

from fastapi import APIRouter, Depends

from mediastream.application.services.status_service import StatusService
from mediastream.domain.models.health_status import HealthStatus
from mediastream.interfaces.schemas import Response
from mediastream.interfaces.service_dependencies import get_status_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/status", tags=["状态模块"])


@router.get(
    "",
    response_model=Response[List[HealthStatus]],
    summary="系统健康检查",
    description="检查本地存储、元数据数据库以及fastapi等服务的健康状态",
)
def get_status(status_service: StatusService = Depends(get_status_service)) -> Response:
    """系统健康检查"""
    statuses = status_service.check_all()

    if any(item.status == "error" for item in statuses):
        return Response.fail(503, "系统存在服务异常", statuses)

    return Response.success(msg="系统健康检查成功", data=statuses)
