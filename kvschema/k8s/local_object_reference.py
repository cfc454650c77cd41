"""Reference to an object in the same namespace, by name."""

from __future__ import annotations

from kvschema.schema import Field, FieldType


def _local_object_reference_fields() -> dict[str, Field]:
    return {
        "name": Field(
            FieldType.STRING,
            description="Name of the referent.",
            required=True,
        ),
    }


def local_object_reference_schema(description):
    """Schema for a single optional local object reference block."""
    return Field(
        FieldType.LIST,
        description=description,
        optional=True,
        max_items=1,
        elem=_local_object_reference_fields(),
    )


def expand_local_object_references(items):
    """Turn a configuration block into a reference, or None when absent."""
    if not items:
        return None
    block = items[0] or {}
    reference: dict[str, str] = {}
    name = block.get("name")
    if isinstance(name, str) and name:
        reference["name"] = name
    return reference


def flatten_local_object_references(ref):
    """Turn a reference into a configuration block list."""
    return [{"name": ref.get("name", "")}]