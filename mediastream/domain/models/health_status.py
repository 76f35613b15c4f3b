from pydantic import BaseModel


class HealthStatus(BaseModel):
    """服务健康状态"""

    service: str = ""  # 服务名称
    status: str = ""  # 状态，ok或者error
    details: str = ""  # 详细信息
