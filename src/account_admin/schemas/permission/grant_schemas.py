# src/account_admin/schemas/permission/grant_schemas.py

from pydantic import BaseModel, Field
from typing import List, Literal
from account_admin.models import GrantPermission

GrantCategory = Literal["resource", "project", "data_source", "udf_function"]

class GrantRead(BaseModel):
    target_id: int
    perm: GrantPermission

class GrantResult(BaseModel):
    """授权集合替换后的结果。granted 即当前完整授权集。"""
    account_id: int
    category: GrantCategory
    granted: List[GrantRead] = Field(default_factory=list)
    added_ids: List[int] = Field(default_factory=list)
    revoked_ids: List[int] = Field(default_factory=list)
