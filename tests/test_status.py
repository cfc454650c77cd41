import pytest

from kvschema.virtualmachine.status import (
    expand_virtual_machine_status,
    flatten_virtual_machine_status,
    virtual_machine_status_schema,
)


def _block():
    return {
        "created": True,
        "ready": True,
        "conditions": [
            {"type": "Ready", "status": "True", "reason": "ok", "message": "running"}
        ],
        "state_change_requests": [{"action": "Start", "data": {"k": "v"}, "uid": "uid-1"}],
    }


def test_expand_empty():
    assert expand_virtual_machine_status([]) == {}
    assert expand_virtual_machine_status([None]) == {}


def test_expand_sets_flags_and_lists():
    status = expand_virtual_machine_status([_block()])
    assert status["created"] is True
    assert status["ready"] is True
    assert status["conditions"][0]["type"] == "Ready"
    assert status["stateChangeRequests"][0]["action"] == "Start"


def test_expand_false_flags_are_omitted():
    status = expand_virtual_machine_status([{"created": False, "ready": False}])
    assert "created" not in status
    assert "ready" not in status


def test_round_trip():
    block = _block()
    assert flatten_virtual_machine_status(expand_virtual_machine_status([block])) == [block]


def test_flatten_empty_status():
    flat = flatten_virtual_machine_status({})
    assert flat == [
        {"created": False, "ready": False, "conditions": [], "state_change_requests": []}
    ]


def test_schema_max_one_block():
    schema = virtual_machine_status_schema()
    with pytest.raises(ValueError):
        schema.validate([_block(), _block()])


def test_schema_accepts_block():
    value = [_block()]
    assert virtual_machine_status_schema().validate(value) == value