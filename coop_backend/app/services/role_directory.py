"""
Role directory.

Static mapping from role identifier to how the dashboard presents it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Union

from coop_backend.app.models.enums import AppRole


@dataclass(frozen=True)
class RoleDisplay:
    role: str
    label: str
    icon: str
    badge_variant: str


ROLE_DIRECTORY: Mapping[str, RoleDisplay] = MappingProxyType({
    AppRole.ADMINISTRATOR.value: RoleDisplay(AppRole.ADMINISTRATOR.value, "Administrador", "shield", "destructive"),
    AppRole.PRESIDENT.value: RoleDisplay(AppRole.PRESIDENT.value, "Presidente", "crown", "default"),
    AppRole.MANAGER.value: RoleDisplay(AppRole.MANAGER.value, "Manager", "briefcase", "default"),
    AppRole.EMPLOYEE.value: RoleDisplay(AppRole.EMPLOYEE.value, "Empleado", "user", "secondary"),
    AppRole.PARTNER.value: RoleDisplay(AppRole.PARTNER.value, "Socio", "users", "default"),
    AppRole.DRIVER.value: RoleDisplay(AppRole.DRIVER.value, "Conductor", "car", "secondary"),
    AppRole.OFFICIAL.value: RoleDisplay(AppRole.OFFICIAL.value, "Dirigente", "flag", "secondary"),
    AppRole.CLIENT.value: RoleDisplay(AppRole.CLIENT.value, "Cliente", "user-check", "outline"),
})

FALLBACK_ICON = "user"
FALLBACK_BADGE_VARIANT = "outline"


def describe_role(role: Union[AppRole, str]) -> RoleDisplay:
    """
    Return the display entry for a role identifier.
    
    Unknown identifiers get a generic entry labelled with the raw
    identifier instead of raising.
    """
    identifier = role.value if isinstance(role, AppRole) else str(role)
    display = ROLE_DIRECTORY.get(identifier)
    if display is None:
        return RoleDisplay(identifier, identifier, FALLBACK_ICON, FALLBACK_BADGE_VARIANT)
    return display


def role_label(role: Union[AppRole, str]) -> str:
    return describe_role(role).label
