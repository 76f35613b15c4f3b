import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from mediastream.core.config import get_settings
from mediastream.infrastructure.logging import setup_logging
from mediastream.infrastructure.storage.database import get_database
from mediastream.interfaces.endpoints.routes import router as api_router
from mediastream.interfaces.errors.exception_handlers import register_exception_handlers
from mediastream.interfaces.service_dependencies import (
    get_file_storage,
    get_thumbnail_service,
    get_upload_service,
    uses_database,
)

# 加载配置信息
settings = get_settings()

# 初始化日志记录
setup_logging()
logger = logging.getLogger()

logger.info("应用程序启动中...")

# 定义FastApi路由tags标签
openapi_tags = [
    {
        "name": "文件模块",
        "description": "包含 **上传/列表/流式读取/缩略图/删除** 等API接口。",
    },
    {
        "name": "状态模块",
        "description": "包含 **状态监测** 等API 接口，用于监测系统的运行状态。",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """创建FastAPI应用生命周期上下文管理器"""
    logger.info("mediastream应用正在初始化")

    # 1.初始化元数据数据库
    database = get_database() if uses_database() else None
    if database is not None:
        logger.info("开始初始化数据库客户端")
        database.init()
        logger.info("数据库客户端初始化完成")

    # 2.预先构建存储与服务，配置错误在启动阶段暴露
    get_file_storage()
    get_thumbnail_service()
    get_upload_service()

    try:
        yield
    finally:
        # 3.应用关闭前的清理工作
        logger.info("mediastream应用正在关闭")
        if database is not None:
            database.shutdown()
        logger.info("mediastream应用关闭成功")


app = FastAPI(
    title="mediastream媒体文件服务",
    description="mediastream提供文件上传、分类、缩略图生成以及支持Range的流式读取",
    lifespan=lifespan,
    openapi_tags=openapi_tags,
    version="1.0.0",
)

# 配置CORS中间件，解决跨域问题
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 允许所有来源
    allow_credentials=True,
    allow_methods=["*"],  # 允许所有方法
    allow_headers=["*"],  # 允许所有头部
    expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
)

# 注册全局异常处理器
register_exception_handlers(app)

app.include_router(api_router, prefix=settings.api_base_path.rstrip("/"))
