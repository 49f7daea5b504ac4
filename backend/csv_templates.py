"""
backend/csv_templates.py

Bulk-import templates: a canonical header row plus one illustrative example row.
"""

from __future__ import annotations

try:
    from backend.models import get_schema
except ModuleNotFoundError:
    from models import get_schema


def generate_template(entity_kind) -> str:
    """
    Build the import template for "asset" or "employee".

    Output is stable for a given schema: header row in the schema's field
    order, then the example row (empty cells for fields without an example).

    Raises:
        UnknownEntityKindError: for any other entity kind
    """
    schema = get_schema(entity_kind)
    header = ",".join(schema.fields)
    example = ",".join(schema.examples.get(name, "") for name in schema.fields)
    return "\n".join([header, example])


def template_filename(entity_kind) -> str:
    schema = get_schema(entity_kind)
    return f"{schema.kind.value}-import-template.csv"
