import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from mediastream.core.config import get_settings
from mediastream.infrastructure.models import Base

logger = logging.getLogger(__name__)


class Database:
    """关系数据库客户端封装类，用于完成数据库的连接、建表与会话工厂的创建"""

    def __init__(self, database_url: Optional[str] = None):
        """构造函数，未传递连接地址时使用配置中的地址"""
        self._settings = get_settings()
        self._database_url = database_url or self._settings.sqlalchemy_database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def init(self) -> None:
        """初始化数据库连接并创建数据表"""
        # 1. 判断是否已经初始化
        if self._engine is not None:
            logger.warning("数据库客户端已初始化，跳过重复初始化。")
            return

        # 2. 创建数据库引擎
        try:
            logger.info("正在初始化数据库客户端...")
            url = make_url(self._database_url)
            connect_args = {}
            if url.get_backend_name() == "sqlite":
                # sqlite文件所在目录需要预先存在，且连接会跨线程使用
                if url.database and url.database != ":memory:":
                    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
                connect_args["check_same_thread"] = False
            self._engine = create_engine(
                url,
                echo=False,
                pool_pre_ping=True,  # 每次从连接池获取连接前先检测连接是否有效
                connect_args=connect_args,
            )

            # 3. 创建会话工厂
            self._session_factory = sessionmaker(
                autocommit=False,  # 禁用自动提交
                autoflush=False,  # 禁用自动刷新
                expire_on_commit=False,
                bind=self._engine,
            )

            # 4. 创建数据表
            Base.metadata.create_all(self._engine)
            logger.info("数据库客户端初始化成功。")
        except Exception as e:
            logger.error(f"数据库客户端初始化失败: {e}")
            raise

    def shutdown(self) -> None:
        """关闭数据库连接"""
        if self._engine:
            self._engine.dispose()
            logger.info("数据库客户端连接已关闭.")
        else:
            logger.warning("数据库客户端未初始化，无法关闭连接.")
        self._engine = None
        self._session_factory = None

    @property
    def engine(self) -> Engine:
        if not self._engine:
            raise RuntimeError("数据库客户端未初始化，请先调用init方法进行初始化。")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """获取数据库会话工厂

        Returns:
            sessionmaker[Session]: 数据库会话工厂
        """
        if not self._session_factory:
            raise RuntimeError("数据库客户端未初始化，请先调用init方法进行初始化。")
        return self._session_factory


@lru_cache()
def get_database() -> Database:
    """获取Database实例"""
    return Database()
