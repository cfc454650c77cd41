"""Virtual machine resource blocks."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.k8s.metadata import (
    expand_metadata,
    flatten_metadata,
    namespaced_metadata_schema,
)
from kvschema.virtualmachine.spec import (
    expand_virtual_machine_spec,
    flatten_virtual_machine_spec,
    virtual_machine_spec_schema,
)
from kvschema.virtualmachine.status import (
    expand_virtual_machine_status,
    flatten_virtual_machine_status,
    virtual_machine_status_schema,
)


def virtual_machine_fields():
    """Top-level fields of a virtual machine resource."""
    return {
        "metadata": namespaced_metadata_schema("VirtualMachine", False),
        "spec": virtual_machine_spec_schema(),
        "status": virtual_machine_status_schema(),
    }


def expand_virtual_machine(items):
    """Turn a virtual machine configuration block into a virtual machine.

    Raises ValueError (usually :class:`ExpandError`) when a nested value is invalid.
    """
    if not items or items[0] is None:
        return {}
    block: Mapping = items[0]
    vm: dict = {}
    metadata = block.get("metadata")
    if isinstance(metadata, (list, tuple)):
        vm["metadata"] = expand_metadata(metadata)
    spec = block.get("spec")
    if isinstance(spec, (list, tuple)):
        vm["spec"] = expand_virtual_machine_spec(spec)
    status = block.get("status")
    if isinstance(status, (list, tuple)):
        vm["status"] = expand_virtual_machine_status(status)
    return vm


def flatten_virtual_machine(vm):
    """Turn a virtual machine into a configuration block list."""
    return [
        {
            "metadata": flatten_metadata(vm.get("metadata") or {}),
            "spec": flatten_virtual_machine_spec(vm.get("spec") or {}),
            "status": flatten_virtual_machine_status(vm.get("status") or {}),
        }
    ]