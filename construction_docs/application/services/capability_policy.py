"""Capability policy: the single role → capability table for construction documents.

Every mutating call consults this table (route dependencies first, then the
lifecycle services again before touching storage). There is no role
hierarchy: a capability is granted only if the table lists it for the role.
Unknown or missing roles are granted nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from construction_docs.domain.enums import Capability, Role
from construction_docs.domain.exceptions import PermissionDeniedException

logger = logging.getLogger(__name__)

_READ_CAPABILITIES = frozenset(
    {Capability.DOWNLOAD_DOCUMENT, Capability.VIEW_DOCUMENT_METADATA}
)

CAPABILITY_TABLE: Mapping[Role, frozenset[Capability]] = {
    Role.ADMIN: frozenset(Capability),
    Role.MANAGER: frozenset(Capability),
    Role.EMPLOYEE: _READ_CAPABILITIES,
}


class CapabilityPolicy:
    """Pure lookup over a role → capabilities table (injectable for tests)."""

    def __init__(
        self, table: Mapping[Role, frozenset[Capability]] = CAPABILITY_TABLE
    ) -> None:
        self.table = table

    def capabilities_for(self, role: Role | str | None) -> frozenset[Capability]:
        """Return capabilities granted to role; empty for unknown roles."""
        resolved = Role.parse(role) if role is not None else None
        if resolved is None:
            return frozenset()
        return self.table.get(resolved, frozenset())

    def can(self, role: Role | str | None, capability: Capability | str) -> bool:
        """Return True if the table grants capability to role (fail-closed)."""
        resolved = Capability.parse(capability)
        if resolved is None:
            return False
        return resolved in self.capabilities_for(role)

    def require(self, role: Role | str | None, capability: Capability | str) -> None:
        """Raise PermissionDeniedException unless role is granted capability."""
        if not self.can(role, capability):
            role_value = role.value if isinstance(role, Role) else role
            cap_value = (
                capability.value if isinstance(capability, Capability) else capability
            )
            logger.warning("Capability %s denied for role %r", cap_value, role_value)
            raise PermissionDeniedException(cap_value, role_value)


default_policy = CapabilityPolicy()


def can(role: Role | str | None, capability: Capability | str) -> bool:
    """Module-level shortcut over the default table."""
    return default_policy.can(role, capability)
