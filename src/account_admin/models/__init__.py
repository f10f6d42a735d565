# account_admin/models/__init__.py

from .tenant import Tenant
from .identity import (
    Account,
    AccessToken,
    AccountType,
    AccountState
)
from .resource import (
    Resource,
    ResourceType,
    UdfFunction
)
from .project import (
    Project,
    DataSource,
    WorkflowDefinition,
    ReleaseState
)
from .permission import (
    GrantPermission,
    ResourceGrant,
    ProjectGrant,
    DataSourceGrant,
    UdfGrant
)
