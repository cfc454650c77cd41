"""Specification blocks of a virtual machine."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.schema import Field, FieldType, string_in_slice
from kvschema.virtualmachineinstance.template_spec import (
    expand_virtual_machine_instance_template_spec,
    flatten_virtual_machine_instance_template_spec,
    virtual_machine_instance_template_spec_schema,
)


def _virtual_machine_spec_fields() -> dict[str, Field]:
    return {
        "run_strategy": Field(
            FieldType.STRING,
            description=(
                "Running state indicates the requested running state of the "
                "VirtualMachineInstance, mutually exclusive with Running."
            ),
            optional=True,
            validate_func=string_in_slice(
                ["", "Always", "Halted", "Manual", "RerunOnFailure"], False
            ),
        ),
        "template": virtual_machine_instance_template_spec_schema(),
    }


def virtual_machine_spec_schema():
    """Schema of the virtual machine specification block."""
    return Field(
        FieldType.LIST,
        description=(
            "VirtualMachineSpec describes how the proper VirtualMachine should look like."
        ),
        required=True,
        max_items=1,
        elem=_virtual_machine_spec_fields(),
    )


def expand_virtual_machine_spec(items):
    """Turn a specification block into a virtual machine specification.

    Raises ValueError (usually :class:`ExpandError`) when a nested value is invalid.
    """
    if not items or items[0] is None:
        return {}
    block: Mapping = items[0]
    spec: dict = {}
    run_strategy = block.get("run_strategy")
    if isinstance(run_strategy, str) and run_strategy:
        spec["runStrategy"] = run_strategy
    template = block.get("template")
    if isinstance(template, (list, tuple)):
        expanded = expand_virtual_machine_instance_template_spec(template)
        if expanded is not None:
            spec["template"] = expanded
    return spec


def flatten_virtual_machine_spec(spec):
    """Turn a virtual machine specification into a configuration block list."""
    spec = spec or {}
    block: dict = {}
    if spec.get("runStrategy") is not None:
        block["run_strategy"] = spec["runStrategy"]
    if spec.get("template") is not None:
        block["template"] = flatten_virtual_machine_instance_template_spec(spec["template"])
    return [block]