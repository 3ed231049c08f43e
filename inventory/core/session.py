"""
Session context for a signed-in identity.

Replaces a process-wide auth provider: each caller builds a SessionContext and
passes it explicitly to whatever needs the current identity or role.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: str
    email: Optional[str] = None


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


# Higher wins when an identity holds several role rows
ROLE_PRECEDENCE = {
    Role.ADMIN: 2,
    Role.USER: 1,
}

IdentityChangeCallback = Callable[[Optional[Identity], Optional[Identity]], None]


def resolve_role(role_values: Iterable[str]) -> Optional[Role]:
    """Pick the highest-privilege role from the raw role values assigned to one identity."""
    best: Optional[Role] = None
    for value in role_values:
        try:
            role = Role(value)
        except ValueError:
            logger.warning(f"Ignoring unknown role value: {value!r}")
            continue
        if best is None or ROLE_PRECEDENCE[role] > ROLE_PRECEDENCE[best]:
            best = role
    return best


class SessionContext:
    def __init__(self, identity: Optional[Identity] = None, role: Optional[Role] = None):
        self._identity = identity
        self._role = role
        self._listeners: List[IdentityChangeCallback] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def role(self) -> Optional[Role]:
        return self._role

    @property
    def is_admin(self) -> bool:
        return self._role is Role.ADMIN

    def get_current_identity(self) -> Optional[Identity]:
        return self._identity

    def on_identity_change(self, callback: IdentityChangeCallback) -> Callable[[], None]:
        """Register a callback fired with (previous, current) on sign-in/sign-out. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(
        self,
        identity: Identity,
        role_lookup: Optional[Callable[[str], Optional[Role]]] = None
    ) -> None:
        """Set the identity, then resolve its role. The role is never queried before the identity is known."""
        self._set_identity(identity)
        self._role = role_lookup(identity.id) if role_lookup else None

    def sign_out(self) -> None:
        self._role = None
        self._set_identity(None)

    def _set_identity(self, identity: Optional[Identity]) -> None:
        previous = self._identity
        if previous == identity:
            return
        self._identity = identity
        for callback in list(self._listeners):
            try:
                callback(previous, identity)
            except Exception as e:
                logger.error(f"Identity change listener failed: {e}")
