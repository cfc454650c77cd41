import pytest

from kvschema.k8s.metadata import expand_metadata
from kvschema.schema import ExpandError
from kvschema.virtualmachineinstance.spec import expand_virtual_machine_instance_spec
from kvschema.virtualmachineinstance.template_spec import (
    expand_virtual_machine_instance_template_spec,
    flatten_virtual_machine_instance_template_spec,
    virtual_machine_instance_template_spec_schema,
)


def _template_block():
    return {
        "metadata": [{"name": "vm", "namespace": "default", "labels": {"app": "demo"}}],
        "spec": [
            {
                "priority_class_name": "",
                "hostname": "vm1",
                "dns_policy": "ClusterFirst",
                "termination_grace_period_seconds": 0,
            }
        ],
    }


def test_expand_absent_template_is_none():
    assert expand_virtual_machine_instance_template_spec([]) is None
    assert expand_virtual_machine_instance_template_spec([None]) is None


def test_expand_uses_metadata_and_spec_expanders():
    block = _template_block()
    template = expand_virtual_machine_instance_template_spec([block])
    assert template["metadata"] == expand_metadata(block["metadata"])
    assert template["spec"] == expand_virtual_machine_instance_spec(block["spec"])


def test_expand_without_spec_key():
    block = _template_block()
    del block["spec"]
    template = expand_virtual_machine_instance_template_spec([block])
    assert "spec" not in template
    assert template["metadata"] == expand_metadata(block["metadata"])


def test_expand_propagates_errors():
    block = _template_block()
    block["spec"][0]["domain"] = [{"resources": [{"requests": {"memory": "a5"}}]}]
    with pytest.raises(ExpandError):
        expand_virtual_machine_instance_template_spec([block])


def test_schema_requires_metadata():
    with pytest.raises(ValueError):
        virtual_machine_instance_template_spec_schema().validate([{"spec": []}])


def test_schema_allows_single_template():
    with pytest.raises(ValueError):
        virtual_machine_instance_template_spec_schema().validate(
            [_template_block(), _template_block()]
        )