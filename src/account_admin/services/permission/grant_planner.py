# src/account_admin/services/permission/grant_planner.py
"""
Pure helpers behind grant reconciliation. Nothing here touches the database:
the service loads the old grant ids and the usage index, asks for a plan,
and only mutates when the plan is not blocked.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Set

from account_admin.services.exceptions import InvalidParameterError, TargetInUseError

logger = logging.getLogger(__name__)

def parse_target_ids(raw: Any, allow_path_ids: bool = False) -> List[int]:
    """
    Normalizes a requested id set into a de-duplicated list (first occurrence wins).

    Accepts None, an int, a comma separated string ("5,5,7") or an iterable of
    either. With `allow_path_ids`, a token may be an ancestor chain such as
    "1-4-9" (a resource together with its parent directories) and every id
    in the chain is requested.
    """
    if raw is None:
        return []
    items = [raw] if isinstance(raw, (str, int)) else list(raw)

    ids: List[int] = []
    for item in items:
        if isinstance(item, bool):
            raise InvalidParameterError(f"Invalid target id '{item}'.")
        if isinstance(item, int):
            ids.append(item)
            continue
        for token in str(item).split(","):
            token = token.strip()
            if not token:
                continue
            segments = token.split("-") if allow_path_ids else [token]
            for segment in segments:
                try:
                    ids.append(int(segment.strip()))
                except ValueError:
                    raise InvalidParameterError(f"Invalid target id '{token}'.") from None
    return list(dict.fromkeys(ids))

def build_usage_index(definitions: Iterable[Any]) -> Dict[int, Set[int]]:
    """
    resource id -> codes of the released workflow definitions referencing it.

    `definitions` are objects with `code` and a comma separated `resource_ids`.
    """
    index: Dict[int, Set[int]] = {}
    for definition in definitions:
        for token in (definition.resource_ids or "").split(","):
            token = token.strip()
            if not token:
                continue
            try:
                resource_id = int(token)
            except ValueError:
                logger.warning(f"workflow definition {definition.code} has malformed resource id '{token}', ignored")
                continue
            index.setdefault(resource_id, set()).add(definition.code)
    return index

@dataclass
class GrantPlan:
    requested: List[int]
    to_revoke: Set[int] = field(default_factory=set)
    to_add: Set[int] = field(default_factory=set)
    # 被已上线工作流引用、因而不能取消授权的资源
    blocked: Dict[int, Set[int]] = field(default_factory=dict)

    @property
    def is_blocked(self) -> bool:
        return bool(self.blocked)

    def ensure_allowed(self) -> None:
        if not self.blocked:
            return
        logger.error("can't revoke grants, resources are used by released workflow definitions")
        for resource_id, definitions in sorted(self.blocked.items()):
            logger.error(f"resource id:{resource_id} is used by workflow definitions {sorted(definitions)}")
        raise TargetInUseError(self.blocked.keys(), self.blocked)

def plan_grant_change(
    requested: Iterable[int],
    old_granted: Iterable[int],
    usage_index: Mapping[int, Set[int]],
) -> GrantPlan:
    """
    Computes the delta between the previous and the requested grant set.

    The requested set fully replaces the old one. Revoking an id that appears
    in `usage_index` blocks the whole change.
    """
    requested_ids = list(dict.fromkeys(requested))
    requested_set = set(requested_ids)
    old_set = set(old_granted)

    to_revoke = old_set - requested_set
    blocked = {rid: set(usage_index[rid]) for rid in to_revoke if usage_index.get(rid)}

    return GrantPlan(
        requested=requested_ids,
        to_revoke=to_revoke,
        to_add=requested_set - old_set,
        blocked=blocked,
    )
