# src/account_admin/schemas/identity/account_schemas.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime
from account_admin.models import AccountType, AccountState

ACCOUNT_NAME_PATTERN = r"^[a-zA-Z0-9._-]{3,39}$"
EMAIL_PATTERN = r"^([a-z0-9A-Z]+[_|\-|.]?)+[a-z0-9A-Z]@([a-z0-9A-Z]+(-[a-z0-9A-Z]+)?\.)+[a-zA-Z]{2,}$"
PHONE_PATTERN = r"^[0-9]{11}$"

class _PhoneMixin(BaseModel):
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    @field_validator("phone", mode="before")
    @classmethod
    def empty_phone_as_none(cls, v):
        # 前端会把未填写的手机号传成空字符串
        return v or None

class AccountCreate(_PhoneMixin):
    name: str = Field(..., pattern=ACCOUNT_NAME_PATTERN)
    password: str = Field(..., min_length=2, max_length=20)
    email: str = Field(..., min_length=5, max_length=40, pattern=EMAIL_PATTERN)
    tenant_id: int
    queue: str = ""
    state: AccountState = AccountState.ACTIVE

class AccountUpdate(_PhoneMixin):
    name: Optional[str] = Field(None, pattern=ACCOUNT_NAME_PATTERN)
    password: Optional[str] = Field(None, min_length=2, max_length=20)
    email: Optional[str] = Field(None, min_length=5, max_length=40, pattern=EMAIL_PATTERN)
    tenant_id: Optional[int] = None
    queue: Optional[str] = None
    state: Optional[AccountState] = None

class AccountRegister(BaseModel):
    name: str = Field(..., pattern=ACCOUNT_NAME_PATTERN)
    password: str = Field(..., min_length=2, max_length=20)
    repeat_password: str
    email: str = Field(..., min_length=5, max_length=40, pattern=EMAIL_PATTERN)

class AccountRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    tenant_id: Optional[int] = None
    account_type: AccountType
    state: AccountState
    queue: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ActivationFailure(BaseModel):
    name: str
    msg: str

class BatchActivationResult(BaseModel):
    succeeded: List[str] = Field(default_factory=list)
    failed: List[ActivationFailure] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

class PaginatedAccountsResponse(BaseModel):
    items: List[AccountRead]
    total: int
    page: int
    limit: int
