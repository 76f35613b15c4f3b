from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# 约束与索引命名约定，sqlite与其他数据库保持一致
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """全部ORM模型的基类"""

    metadata = MetaData(naming_convention=naming_convention)
