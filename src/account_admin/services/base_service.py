# account_admin/services/base_service.py

from account_admin.models import Account
from account_admin.services.exceptions import PermissionDeniedError

class BaseService:
    """Shared role checks for administrative services."""

    @staticmethod
    def _ensure_admin(actor: Account) -> None:
        if actor is None or not actor.is_admin:
            raise PermissionDeniedError("Only administrators can perform this operation.")

    @staticmethod
    def _ensure_admin_or_self(actor: Account, account_id: int) -> None:
        if actor is None or (not actor.is_admin and actor.id != account_id):
            raise PermissionDeniedError("No permission to operate on this account.")
