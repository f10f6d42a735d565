import enum
from sqlalchemy import (
    Column, Integer, Enum, ForeignKey, DateTime, UniqueConstraint, func
)
from account_admin.db.base import Base

class GrantPermission(str, enum.Enum):
    """授权级别。封闭枚举，取代旧版本中散落的整数常量。"""
    READABLE = "readable"
    WRITABLE = "writable"
    OWNER = "owner"

    @classmethod
    def for_resource(cls, is_directory: bool) -> "GrantPermission":
        """目录只授予可读，文件授予可写。"""
        return cls.READABLE if is_directory else cls.WRITABLE

    @classmethod
    def for_target(cls) -> "GrantPermission":
        """项目 / 数据源 / UDF 函数的常规授权。"""
        return cls.WRITABLE

    @classmethod
    def for_project_owner(cls) -> "GrantPermission":
        return cls.OWNER

class ResourceGrant(Base):
    __tablename__ = 'resource_grants'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    resource_id = Column(Integer, ForeignKey('resources.id', ondelete='CASCADE'), nullable=False, index=True)
    perm = Column(Enum(GrantPermission), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint('account_id', 'resource_id', name='uq_resource_grant_account_target'),)

class ProjectGrant(Base):
    __tablename__ = 'project_grants'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)
    perm = Column(Enum(GrantPermission), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint('account_id', 'project_id', name='uq_project_grant_account_target'),)

class DataSourceGrant(Base):
    __tablename__ = 'data_source_grants'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    data_source_id = Column(Integer, ForeignKey('data_sources.id', ondelete='CASCADE'), nullable=False, index=True)
    perm = Column(Enum(GrantPermission), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint('account_id', 'data_source_id', name='uq_data_source_grant_account_target'),)

class UdfGrant(Base):
    __tablename__ = 'udf_grants'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    udf_id = Column(Integer, ForeignKey('udf_functions.id', ondelete='CASCADE'), nullable=False, index=True)
    perm = Column(Enum(GrantPermission), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint('account_id', 'udf_id', name='uq_udf_grant_account_target'),)
