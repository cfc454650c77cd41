"""Condition blocks of a virtual machine status."""

from __future__ import annotations

from kvschema.schema import Field, FieldType, string_in_slice

_CONDITION_KEYS = ("type", "status", "reason", "message")


def _virtual_machine_conditions_fields() -> dict[str, Field]:
    return {
        "type": Field(
            FieldType.STRING,
            description=(
                "VirtualMachineConditionType represent the type of the VM as concluded "
                "from its VMi status."
            ),
            optional=True,
            validate_func=string_in_slice(
                ["Failure", "Ready", "Paused", "RenameOperation"], False
            ),
        ),
        "status": Field(
            FieldType.STRING,
            description=(
                "ConditionStatus represents the status of this VM condition, if the VM "
                "currently in the condition."
            ),
            optional=True,
            validate_func=string_in_slice(["True", "False", "Unknown"], False),
        ),
        "reason": Field(
            FieldType.STRING,
            description="Condition reason.",
            optional=True,
        ),
        "message": Field(
            FieldType.STRING,
            description="Condition message.",
            optional=True,
        ),
    }


def virtual_machine_conditions_schema():
    """Schema of the list of virtual machine conditions."""
    return Field(
        FieldType.LIST,
        description=(
            "Hold the state information of the VirtualMachine and its "
            "VirtualMachineInstance."
        ),
        required=True,
        elem=_virtual_machine_conditions_fields(),
    )


def expand_virtual_machine_conditions(items):
    """Turn condition configuration blocks into conditions."""
    items = list(items or ())
    if not items or items[0] is None:
        return [{} for _ in items]
    conditions = []
    for block in items:
        condition: dict = {}
        for key in _CONDITION_KEYS:
            value = block.get(key)
            if isinstance(value, str) and value:
                condition[key] = value
        conditions.append(condition)
    return conditions


def flatten_virtual_machine_conditions(conditions):
    """Turn conditions into configuration blocks."""
    return [
        {key: condition.get(key, "") for key in _CONDITION_KEYS}
        for condition in conditions or ()
    ]