"""Probe blocks of a virtual machine instance; no probe settings are configurable yet."""

from __future__ import annotations

from kvschema.schema import Field, FieldType


def probe_schema():
    """Schema of a probe block."""
    return Field(
        FieldType.LIST,
        description=(
            "Specification of the desired behavior of the VirtualMachineInstance on the host."
        ),
        optional=True,
        max_items=1,
        elem={},
    )


def expand_probe(items):
    """Turn a probe configuration block into a probe, or None when absent."""
    if not items or items[0] is None:
        return None
    return {}


def flatten_probe(probe):
    """Turn a probe into a configuration block list."""
    return [{}]