"""
Authenticated caller context and the ownership predicate shared by every resource
"""
from dataclasses import dataclass
from typing import Optional

from breakfast4u.models.user import UserRole
from breakfast4u.utils.errors import ForbiddenError


@dataclass(frozen=True)
class Actor:
    """Who is making the request. Built once per request from the bearer token."""
    id: int
    role: UserRole
    email: str
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER


def can_act_on(actor: Actor, resource_owner_id: Optional[int]) -> bool:
    """Admins act on anything; everyone else only on what they own."""
    if actor.is_admin:
        return True
    return resource_owner_id is not None and resource_owner_id == actor.id


def ensure_can_act_on(actor: Actor, resource_owner_id: Optional[int], message: str) -> None:
    if not can_act_on(actor, resource_owner_id):
        raise ForbiddenError(message)
