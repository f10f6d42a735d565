from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from account_admin.db.base import Base

class Tenant(Base):
    """租户表 - 租户编码即远程存储中的命名空间目录名。"""
    __tablename__ = 'tenants'

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True, comment="租户编码，对应存储目录前缀 {base}/{code}")
    description = Column(String(255), nullable=True)
    queue = Column(String(64), nullable=True, comment="租户默认队列")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    accounts = relationship("Account", back_populates="tenant")
