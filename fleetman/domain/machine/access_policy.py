"""Who may manage a machine."""
from __future__ import annotations

from typing import AbstractSet, Optional, Union

from fleetman.domain.machine.machine_aggregate import Machine
from fleetman.domain.machine.value_objects import UserId

CLIENT_USER_TYPE = "CLIENT"


class MachineAccessPolicy:
    """Ownership check keyed by user type.

    Users whose type is listed in ``ownership_checked_user_types`` may only
    manage machines they own. User types are matched exactly, so ``"client"``
    is not ``"CLIENT"``; every unlisted type is allowed without an ownership
    check.
    """

    def __init__(self, ownership_checked_user_types: Optional[AbstractSet[str]] = None):
        if ownership_checked_user_types is None:
            ownership_checked_user_types = frozenset({CLIENT_USER_TYPE})
        self.ownership_checked_user_types = frozenset(ownership_checked_user_types)

    def requires_ownership(self, user_type: Optional[str]) -> bool:
        return user_type in self.ownership_checked_user_types

    def can_manage(self,
                   machine: Machine,
                   requesting_user_id: Union[UserId, str, None],
                   user_type: Optional[str]) -> bool:
        if not self.requires_ownership(user_type):
            return True
        return requesting_user_id is not None and machine.is_owned_by(requesting_user_id)

    def owner_scope(self,
                    requesting_user_id: Union[UserId, str, None],
                    user_type: Optional[str]) -> Optional[str]:
        """Owner id a listing must be limited to, or None for an unscoped listing."""
        if not self.requires_ownership(user_type):
            return None
        return str(requesting_user_id) if requesting_user_id is not None else ""
