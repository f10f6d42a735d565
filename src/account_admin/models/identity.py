import enum
from sqlalchemy import (
    Column, Integer, String, Enum, ForeignKey, DateTime, func
)
from sqlalchemy.orm import relationship
from account_admin.db.base import Base

class AccountType(enum.Enum):
    ADMIN = "admin"       # 系统内置管理员，不由本服务创建
    GENERAL = "general"   # 普通账户

class AccountState(enum.Enum):
    PENDING = "pending"   # 自助注册后等待管理员激活
    ACTIVE = "active"

class Account(Base):
    """账户表 - 资源、授权与租户归属的主体。"""
    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True, comment="账户唯一主键ID")
    name = Column(String(64), nullable=False, unique=True, index=True, comment="账户名，全局唯一")
    password_hash = Column(String(255), nullable=True, comment="哈希后的账户密码")

    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)

    tenant_id = Column(Integer, ForeignKey('tenants.id'), nullable=True, index=True, comment="所属租户ID")
    account_type = Column(Enum(AccountType), nullable=False, default=AccountType.GENERAL)
    state = Column(Enum(AccountState), nullable=False, default=AccountState.ACTIVE, comment="账户激活状态")
    queue = Column(String(64), nullable=False, default="", comment="队列标签")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="accounts")

    @property
    def is_admin(self) -> bool:
        return self.account_type == AccountType.ADMIN

class AccessToken(Base):
    __tablename__ = 'access_tokens'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    token = Column(String(64), nullable=False, unique=True)
    expire_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

