"""State change request blocks of a virtual machine status."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.schema import Field, FieldType, string_in_slice


def _state_change_request_fields() -> dict[str, Field]:
    return {
        "action": Field(
            FieldType.STRING,
            description="Indicates the type of action that is requested. e.g. Start or Stop.",
            optional=True,
            validate_func=string_in_slice(["Start", "Stop"], False),
        ),
        "data": Field(
            FieldType.MAP,
            description="Provides additional data in order to perform the Action.",
            optional=True,
            elem=Field(FieldType.STRING),
        ),
        "uid": Field(
            FieldType.STRING,
            description=(
                "Indicates the UUID of an existing Virtual Machine Instance that this "
                "change request applies to -- if applicable."
            ),
            optional=True,
        ),
    }


def virtual_machine_state_change_requests_schema():
    """Schema of the list of state change requests."""
    return Field(
        FieldType.LIST,
        description=(
            "StateChangeRequests indicates a list of actions that should be taken on a VMI."
        ),
        required=True,
        elem=_state_change_request_fields(),
    )


def expand_virtual_machine_state_change_requests(items):
    """Turn state change request blocks into state change requests."""
    items = list(items or ())
    if not items or items[0] is None:
        return [{} for _ in items]
    requests = []
    for block in items:
        request: dict = {}
        action = block.get("action")
        if isinstance(action, str) and action:
            request["action"] = action
        data = block.get("data")
        if isinstance(data, Mapping) and data:
            request["data"] = {str(k): str(v) for k, v in data.items()}
        uid = block.get("uid")
        if isinstance(uid, str):
            request["uid"] = uid
        requests.append(request)
    return requests


def flatten_virtual_machine_state_change_requests(requests):
    """Turn state change requests into configuration blocks."""
    flattened = []
    for request in requests or ():
        block: dict = {
            "action": request.get("action", ""),
            "data": dict(request.get("data") or {}),
        }
        if request.get("uid") is not None:
            block["uid"] = request["uid"]
        flattened.append(block)
    return flattened