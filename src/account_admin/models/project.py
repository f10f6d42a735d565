import enum
from sqlalchemy import (
    Column, Integer, String, Text, Enum, ForeignKey, DateTime, BigInteger, func
)
from sqlalchemy.orm import relationship
from account_admin.db.base import Base

class ReleaseState(enum.Enum): OFFLINE = "offline"; ONLINE = "online"

class Project(Base):
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True)
    code = Column(BigInteger, nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey('accounts.id'), nullable=False, index=True, comment="项目创建者")

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    owner = relationship("Account")

class DataSource(Base):
    __tablename__ = 'data_sources'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

class WorkflowDefinition(Base):
    """
    工作流定义。只读使用：已上线 (ONLINE) 的定义所引用的资源不得被取消授权。
    """
    __tablename__ = 'workflow_definitions'

    id = Column(Integer, primary_key=True)
    code = Column(BigInteger, nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    release_state = Column(Enum(ReleaseState), nullable=False, default=ReleaseState.OFFLINE, index=True)
    resource_ids = Column(Text, nullable=True, comment="引用的资源ID列表，逗号分隔 (e.g., '3,7,12')")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
