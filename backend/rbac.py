"""
backend/rbac.py

Role-Based Access Control (RBAC) for the CSV endpoints.

Roles and the tenant-owner flag are issued by the hosted backend; this module
only maps them to CSV capabilities. It trusts its inputs.

Key principle: bulk import writes data, so it needs admin access
(admin, manager, or tenant owner). Everyone signed in can export and
download templates.

Pure Python logic - no FastAPI imports, no network access.
"""

from enum import Enum
from typing import Set


# ============================================================================
# Capability Definitions
# ============================================================================

class Capability(str, Enum):
    """CSV capabilities."""
    CSV_TEMPLATE = "csv:template"
    CSV_EXPORT = "csv:export"
    CSV_VALIDATE = "csv:validate"
    CSV_IMPORT = "csv:import"


# ============================================================================
# Role to Capabilities Mapping
# ============================================================================

READ_CAPABILITIES: Set[str] = {
    Capability.CSV_TEMPLATE.value,
    Capability.CSV_EXPORT.value,
    Capability.CSV_VALIDATE.value,
}

ROLE_CAPABILITIES: dict[str, Set[str]] = {
    "admin": READ_CAPABILITIES | {Capability.CSV_IMPORT.value},
    "manager": READ_CAPABILITIES | {Capability.CSV_IMPORT.value},
    "user": set(READ_CAPABILITIES),
}


# ============================================================================
# Effective Capability Calculation
# ============================================================================

def effective_capabilities(role: str, is_owner: bool = False) -> Set[str]:
    """
    Capabilities for a role, with owners treated as admins.

    Unknown or missing roles fall back to "user" (the hosted backend's default
    role for a signed-in account).
    """
    if is_owner:
        return set(ROLE_CAPABILITIES["admin"])
    role_lower = (role or "").lower()
    return set(ROLE_CAPABILITIES.get(role_lower, ROLE_CAPABILITIES["user"]))
