"""
backend/models.py

Entity kinds, enums, and per-kind CSV schemas.

The schemas here are the single source of truth for template field order,
required fields, and value constraints used by export, templates, validation
and import mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Tuple


# Enums
class EntityKind(str, Enum):
    asset = "asset"
    employee = "employee"


class AssetStatus(str, Enum):
    ready = "ready"
    deployed = "deployed"
    maintenance = "maintenance"
    retired = "retired"


class StatusColor(str, Enum):
    green = "green"
    yellow = "yellow"
    red = "red"


class UserRole(str, Enum):
    admin = "admin"
    manager = "manager"
    user = "user"


VALID_ASSET_STATUSES: Tuple[str, ...] = tuple(s.value for s in AssetStatus)
VALID_STATUS_COLORS: Tuple[str, ...] = tuple(c.value for c in StatusColor)


class UnknownEntityKindError(ValueError):
    """Raised when a CSV operation is asked for an entity kind we don't know."""

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        valid = ", ".join(k.value for k in EntityKind)
        super().__init__(f"Unknown entity kind '{entity_kind}'. Valid options: {valid}")


@dataclass(frozen=True)
class EntitySchema:
    """
    CSV schema for one entity kind.

    fields: template/export column order
    required: fields that must be present as headers and non-empty per row
    skip_blank: required fields whose blank value skips the row at import
        instead of failing validation
    examples: illustrative template values (fields not listed render empty)
    enum_fields: field -> allowed lower-case values
    integer_fields / decimal_fields: numeric format constraints
    """
    kind: EntityKind
    fields: Tuple[str, ...]
    required: Tuple[str, ...]
    examples: Dict[str, str] = field(default_factory=dict)
    enum_fields: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    integer_fields: FrozenSet[str] = frozenset()
    decimal_fields: FrozenSet[str] = frozenset()
    skip_blank: FrozenSet[str] = frozenset()


ASSET_SCHEMA = EntitySchema(
    kind=EntityKind.asset,
    fields=(
        "tag",
        "name",
        "category",
        "status",
        "assigned_to",
        "model",
        "serial",
        "purchase_date",
        "purchase_cost",
        "location",
        "wear",           # years until the asset needs replacement
        "notes",
        "status_color",
        "qty",
    ),
    required=("name", "tag", "category", "status"),
    examples={
        "tag": "ASSET-001",
        "name": "Sample Asset",
        "category": "General",
        "status": "ready",
        "wear": "3",
        "qty": "1",
    },
    enum_fields={
        "status": VALID_ASSET_STATUSES,
        "status_color": VALID_STATUS_COLORS,
    },
    integer_fields=frozenset({"qty"}),
    decimal_fields=frozenset({"purchase_cost"}),
)

EMPLOYEE_SCHEMA = EntitySchema(
    kind=EntityKind.employee,
    fields=("name", "email", "role"),
    required=("name",),
    skip_blank=frozenset({"name"}),
    examples={
        "name": "John Doe",
        "email": "john.doe@example.com",
        "role": "IT Manager",
    },
)

SCHEMAS: Dict[EntityKind, EntitySchema] = {
    EntityKind.asset: ASSET_SCHEMA,
    EntityKind.employee: EMPLOYEE_SCHEMA,
}


def parse_entity_kind(entity_kind) -> EntityKind:
    """Normalize a string (or EntityKind) to EntityKind, case-insensitively."""
    if isinstance(entity_kind, EntityKind):
        return entity_kind
    value = entity_kind.strip().lower() if isinstance(entity_kind, str) else ""
    try:
        return EntityKind(value)
    except ValueError:
        raise UnknownEntityKindError(str(entity_kind))


def get_schema(entity_kind) -> EntitySchema:
    return SCHEMAS[parse_entity_kind(entity_kind)]
