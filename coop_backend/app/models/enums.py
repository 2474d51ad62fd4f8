"""
Enumerations shared by the cooperative's models and schemas.
"""

import enum


class AppRole(str, enum.Enum):
    """
    Roles a cooperative member can hold.
    
    A user may hold several roles but acts under exactly one active
    role at a time. No ordering or hierarchy is encoded here.
    """
    ADMINISTRATOR = "administrator"
    PRESIDENT = "president"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    PARTNER = "partner"
    DRIVER = "driver"
    OFFICIAL = "official"
    CLIENT = "client"


class BusStatus(str, enum.Enum):
    """Operational state of a fleet bus."""
    IN_SERVICE = "en_servicio"
    AVAILABLE = "disponible"
    MAINTENANCE = "mantenimiento"
    ON_TOUR = "en_tour"
    OUT_OF_SERVICE = "fuera_de_servicio"


class RoleRequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProvisioningStatus(str, enum.Enum):
    """Outcome of provisioning a single demo account."""
    SUCCESS = "success"
    UPDATED = "updated"
    ALREADY_EXISTS = "already_exists"
    ERROR = "error"
