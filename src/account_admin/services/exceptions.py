# account_admin/services/exceptions.py

from typing import Any, Dict, Iterable, List, Optional, Set

class ServiceException(Exception):
    """Base exception for all service layer errors."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class NotFoundError(ServiceException):
    """Raised when a referenced entity does not exist."""
    pass

class TargetNotFoundError(NotFoundError):
    """Raised when a referenced account / tenant / resource / project id does not resolve."""
    def __init__(self, target_type: str, target_id: Any, message: Optional[str] = None):
        self.target_type = target_type
        self.target_id = target_id
        super().__init__(message or f"{target_type} '{target_id}' not found.")

class AccountNotFoundError(TargetNotFoundError):
    def __init__(self, account_id: Any):
        super().__init__("account", account_id)

class TenantNotFoundError(TargetNotFoundError):
    def __init__(self, tenant_id: Any):
        super().__init__("tenant", tenant_id)

class ProjectNotFoundError(TargetNotFoundError):
    def __init__(self, project_code: Any):
        super().__init__("project", project_code)

class TargetInUseError(ServiceException):
    """
    Raised when a revocation is blocked because released workflow definitions
    still reference the resources.

    `referencing` maps every blocked resource id to the codes of the
    definitions referencing it.
    """
    def __init__(self, target_ids: Iterable[int], referencing: Dict[int, Set[int]]):
        self.target_ids: List[int] = sorted(target_ids)
        self.referencing = {rid: set(referencing.get(rid, ())) for rid in self.target_ids}
        detail = "; ".join(
            f"resource {rid} used by workflow definitions {sorted(defs)}"
            for rid, defs in self.referencing.items()
        )
        super().__init__(f"Resources {self.target_ids} are used by released workflow definitions ({detail}).")

class ResourceMissingError(ServiceException):
    """Raised when a resource record exists but its physical file is gone."""
    def __init__(self, full_name: str, path: Optional[str] = None):
        self.full_name = full_name
        self.path = path
        super().__init__(f"Resource file '{full_name}' does not exist in storage" + (f" ({path})." if path else "."))

class StorageUnavailableError(ServiceException):
    """Raised when a remote storage call fails. Never retried internally."""
    def __init__(self, message: str, operation: Optional[str] = None, path: Optional[str] = None):
        self.operation = operation
        self.path = path
        super().__init__(message)

class StorageConflictError(ServiceException):
    """Raised when a storage write would replace an existing object it was told to keep."""
    def __init__(self, path: str, operation: Optional[str] = None):
        self.operation = operation
        self.path = path
        super().__init__(f"Destination already exists: {path}")

class PermissionDeniedError(ServiceException):
    """Raised when the actor lacks the role required for the operation."""
    pass

class InvalidParameterError(ServiceException):
    """Raised when an input value fails validation."""
    pass

class AccountNameExistsError(ServiceException):
    """Raised when trying to create or rename an account to a name that is already taken."""
    pass

class ProjectOwnershipError(ServiceException):
    """Raised when deleting an account that still owns projects."""
    def __init__(self, project_names: List[str]):
        self.project_names = project_names
        super().__init__(f"Transfer ownership of projects before deleting the account: {','.join(project_names)}")
