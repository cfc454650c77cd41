"""Status blocks of a virtual machine."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.schema import Field, FieldType
from kvschema.virtualmachine.conditions import (
    expand_virtual_machine_conditions,
    flatten_virtual_machine_conditions,
    virtual_machine_conditions_schema,
)
from kvschema.virtualmachine.state_change_requests import (
    expand_virtual_machine_state_change_requests,
    flatten_virtual_machine_state_change_requests,
    virtual_machine_state_change_requests_schema,
)


def _virtual_machine_status_fields() -> dict[str, Field]:
    return {
        "created": Field(
            FieldType.BOOL,
            description="Created indicates if the virtual machine is created in the cluster.",
            optional=True,
        ),
        "ready": Field(
            FieldType.BOOL,
            description="Ready indicates if the virtual machine is running and ready.",
            optional=True,
        ),
        "conditions": virtual_machine_conditions_schema(),
        "state_change_requests": virtual_machine_state_change_requests_schema(),
    }


def virtual_machine_status_schema():
    """Schema of the virtual machine status block."""
    return Field(
        FieldType.LIST,
        description=(
            "VirtualMachineStatus represents the status returned by the controller to "
            "describe how the VirtualMachine is doing."
        ),
        optional=True,
        max_items=1,
        elem=_virtual_machine_status_fields(),
    )


def expand_virtual_machine_status(items):
    """Turn a status configuration block into a virtual machine status."""
    if not items or items[0] is None:
        return {}
    block: Mapping = items[0]
    status: dict = {}
    for key in ("created", "ready"):
        if block.get(key) is True:
            status[key] = True
    conditions = block.get("conditions")
    if isinstance(conditions, (list, tuple)):
        expanded = expand_virtual_machine_conditions(conditions)
        if expanded:
            status["conditions"] = expanded
    requests = block.get("state_change_requests")
    if isinstance(requests, (list, tuple)):
        expanded = expand_virtual_machine_state_change_requests(requests)
        if expanded:
            status["stateChangeRequests"] = expanded
    return status


def flatten_virtual_machine_status(status):
    """Turn a virtual machine status into a configuration block list."""
    status = status or {}
    return [
        {
            "created": bool(status.get("created", False)),
            "ready": bool(status.get("ready", False)),
            "conditions": flatten_virtual_machine_conditions(status.get("conditions") or []),
            "state_change_requests": flatten_virtual_machine_state_change_requests(
                status.get("stateChangeRequests") or []
            ),
        }
    ]