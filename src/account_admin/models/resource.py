import enum
from sqlalchemy import (
    Column, Integer, String, Boolean, Enum, ForeignKey, DateTime, BigInteger, func
)
from sqlalchemy.orm import relationship
from account_admin.db.base import Base

class ResourceType(enum.Enum):
    FILE = "file"
    UDF = "udf"

class Resource(Base):
    """
    资源中心条目 - 同一 owner、同一类别下的记录构成一片森林。
    full_name 是从类别根目录起的完整相对路径 (e.g., "sub/b.txt")。
    """
    __tablename__ = 'resources'

    id = Column(Integer, primary_key=True)
    pid = Column(Integer, nullable=True, index=True, comment="父目录资源ID，NULL 表示根节点")
    name = Column(String(255), nullable=False)
    full_name = Column(String(1024), nullable=False, comment="从类别根目录起的完整路径")
    is_directory = Column(Boolean, nullable=False, default=False)
    type = Column(Enum(ResourceType), nullable=False, default=ResourceType.FILE, index=True)
    owner_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    size = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    owner = relationship("Account")

class UdfFunction(Base):
    """UDF 函数定义，其实现 jar 包是一个 UDF 类别的资源。"""
    __tablename__ = 'udf_functions'

    id = Column(Integer, primary_key=True)
    func_name = Column(String(100), nullable=False)
    class_name = Column(String(255), nullable=False)
    resource_id = Column(Integer, ForeignKey('resources.id', ondelete='SET NULL'), nullable=True)
    owner_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
