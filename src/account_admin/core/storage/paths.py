# src/account_admin/core/storage/paths.py

from account_admin.core.config import settings
from account_admin.models import ResourceType

def join_path(base: str, name: str) -> str:
    """Join a base directory and a slash-delimited relative name."""
    return f"{base.rstrip('/')}/{name.lstrip('/')}"

class TenantStoragePaths:
    """
    租户命名空间的目录布局:

        {base}/{tenant_code}                      tenant namespace
        {base}/{tenant_code}/resources            file resources
        {base}/{tenant_code}/udfs                 UDF resources
        {base}/{tenant_code}/home/{account_id}    per-account home
    """

    def __init__(self, base_path: str = None):
        base = settings.STORAGE_BASE_PATH if base_path is None else base_path
        self.base_path = "/" + base.strip("/") if base.strip("/") else ""

    def tenant_dir(self, tenant_code: str) -> str:
        return f"{self.base_path}/{tenant_code}"

    def resource_dir(self, tenant_code: str) -> str:
        return f"{self.tenant_dir(tenant_code)}/resources"

    def udf_dir(self, tenant_code: str) -> str:
        return f"{self.tenant_dir(tenant_code)}/udfs"

    def category_dir(self, tenant_code: str, resource_type: ResourceType) -> str:
        if resource_type == ResourceType.UDF:
            return self.udf_dir(tenant_code)
        return self.resource_dir(tenant_code)

    def user_home(self, tenant_code: str, account_id: int) -> str:
        return f"{self.tenant_dir(tenant_code)}/home/{account_id}"
