# src/account_admin/schemas/tenant/tenant_schemas.py

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

class ReplicationSummary(BaseModel):
    copied_files: List[str] = Field(default_factory=list)
    created_directories: List[str] = Field(default_factory=list)

class TenantMigrationResult(BaseModel):
    account_id: int
    old_tenant_id: Optional[int] = None
    new_tenant_id: int
    # False: 首次分配租户或资源中心未启用，没有发生物理迁移
    storage_migrated: bool = False
    # key 为资源类别 ("file" / "udf")
    replications: Dict[str, ReplicationSummary] = Field(default_factory=dict)
