import pytest

from kvschema.k8s.toleration import expand_tolerations
from kvschema.quantity import FORMAT_ERROR
from kvschema.schema import ExpandError
from kvschema.virtualmachineinstance.domain_spec import expand_domain_spec
from kvschema.virtualmachineinstance.networks import expand_networks
from kvschema.virtualmachineinstance.spec import (
    expand_virtual_machine_instance_spec,
    flatten_virtual_machine_instance_spec,
    virtual_machine_instance_spec_schema,
)
from kvschema.virtualmachineinstance.volumes import expand_volumes


def _spec_block():
    return {
        "priority_class_name": "high",
        "domain": [
            {
                "resources": [
                    {
                        "requests": {"memory": "64M"},
                        "limits": {},
                        "over_commit_guest_overhead": False,
                    }
                ],
                "devices": [
                    {
                        "disk": [
                            {
                                "name": "rootdisk",
                                "disk_device": [
                                    {
                                        "disk": [
                                            {
                                                "bus": "virtio",
                                                "read_only": False,
                                                "pci_address": "",
                                            }
                                        ]
                                    }
                                ],
                                "serial": "",
                            }
                        ],
                        "interface": [
                            {"name": "main", "interface_binding_method": "InterfaceBridge"}
                        ],
                    }
                ],
            }
        ],
        "node_selector": {"zone": "a"},
        "affinity": [],
        "scheduler_name": "",
        "tolerations": [],
        "eviction_strategy": "LiveMigrate",
        "termination_grace_period_seconds": 30,
        "volume": [{"name": "rootdisk", "volume_source": [{"data_volume": [{"name": "dv"}]}]}],
        "liveness_probe": [],
        "readiness_probe": [],
        "hostname": "vm1",
        "subdomain": "",
        "network": [{"name": "main", "network_source": [{"pod": [{}]}]}],
        "dns_policy": "ClusterFirst",
        "pod_dns_config": [],
    }


def test_expand_empty():
    assert expand_virtual_machine_instance_spec([]) == {}
    assert expand_virtual_machine_instance_spec([None]) == {}


def test_expand_scalar_fields():
    block = _spec_block()
    spec = expand_virtual_machine_instance_spec([block])
    assert spec["priorityClassName"] == block["priority_class_name"]
    assert spec["nodeSelector"] == block["node_selector"]
    assert spec["evictionStrategy"] == block["eviction_strategy"]
    assert spec["terminationGracePeriodSeconds"] == block["termination_grace_period_seconds"]
    assert spec["hostname"] == block["hostname"]
    assert spec["dnsPolicy"] == block["dns_policy"]
    assert "schedulerName" not in spec
    assert "subdomain" not in spec


def test_expand_nested_blocks_use_their_modules():
    block = _spec_block()
    spec = expand_virtual_machine_instance_spec([block])
    assert spec["domain"] == expand_domain_spec(block["domain"])
    assert spec["volumes"] == expand_volumes(block["volume"])
    assert spec["networks"] == expand_networks(block["network"])


def test_expand_empty_affinity_and_dns_config_present():
    spec = expand_virtual_machine_instance_spec([_spec_block()])
    assert spec["affinity"] == {}
    assert spec["dnsConfig"] == {}
    assert "livenessProbe" not in spec


def test_expand_tolerations():
    block = _spec_block()
    block["tolerations"] = [
        {
            "effect": "NoExecute",
            "key": "dedicated",
            "operator": "Equal",
            "toleration_seconds": "30",
            "value": "vm",
        }
    ]
    spec = expand_virtual_machine_instance_spec([block])
    assert spec["tolerations"] == expand_tolerations(block["tolerations"])


def test_bad_toleration_seconds():
    block = _spec_block()
    block["tolerations"] = [{"operator": "Equal", "toleration_seconds": "a5"}]
    with pytest.raises(ValueError, match="toleration_seconds"):
        expand_virtual_machine_instance_spec([block])


@pytest.mark.parametrize("kind", ["requests", "limits"])
def test_bad_domain_resources(kind):
    block = _spec_block()
    block["domain"][0]["resources"][0][kind] = {"storage": "a5"}
    with pytest.raises(ExpandError) as excinfo:
        expand_virtual_machine_instance_spec([block])
    assert str(excinfo.value) == FORMAT_ERROR


def test_round_trip():
    spec = expand_virtual_machine_instance_spec([_spec_block()])
    flattened = flatten_virtual_machine_instance_spec(spec)
    assert len(flattened) == 1
    assert expand_virtual_machine_instance_spec(flattened) == spec


def test_flatten_omits_unset_optionals():
    block = flatten_virtual_machine_instance_spec({})[0]
    assert "eviction_strategy" not in block
    assert "termination_grace_period_seconds" not in block
    assert "pod_dns_config" not in block
    assert block["volume"] == []
    assert block["network"] == []


def test_schema_rejects_unknown_dns_policy():
    with pytest.raises(ValueError):
        virtual_machine_instance_spec_schema().validate([{"dns_policy": "Bogus"}])


def test_schema_rejects_unknown_eviction_strategy():
    with pytest.raises(ValueError):
        virtual_machine_instance_spec_schema().validate([{"eviction_strategy": "Stop"}])


def test_schema_accepts_known_dns_policy():
    value = [{"dns_policy": "ClusterFirst"}]
    assert virtual_machine_instance_spec_schema().validate(value) == value