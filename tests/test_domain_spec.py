import copy

import pytest

from kvschema.schema import ExpandError
from kvschema.virtualmachineinstance.domain_spec import (
    domain_spec_schema,
    expand_domain_spec,
    flatten_domain_spec,
)

FORMAT_MESSAGE = (
    "quantities must match the regular expression "
    "'^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$'"
)


def _config():
    return {
        "resources": [
            {
                "requests": {"memory": "1Gi", "cpu": "1"},
                "limits": {"memory": "2Gi"},
                "over_commit_guest_overhead": False,
            }
        ],
        "devices": [
            {
                "disk": [
                    {
                        "name": "rootdisk",
                        "disk_device": [
                            {"disk": [{"bus": "virtio", "read_only": False, "pci_address": ""}]}
                        ],
                        "serial": "",
                    }
                ],
                "interface": [
                    {"name": "main", "interface_binding_method": "InterfaceMasquerade"}
                ],
            }
        ],
    }


def test_round_trip_basic():
    config = _config()
    assert flatten_domain_spec(expand_domain_spec([config])) == [config]


def test_round_trip_with_features_and_firmware():
    config = _config()
    config["features"] = [{"ssm": [{"enabled": True}]}]
    config["firmware"] = [{"bootloader": [{"efi": [{}]}]}]
    assert flatten_domain_spec(expand_domain_spec([config])) == [config]


def test_expand_interface_binding():
    domain = expand_domain_spec([_config()])
    assert domain["devices"]["interfaces"] == [{"name": "main", "masquerade": {}}]


@pytest.mark.parametrize(
    "method,key",
    [
        ("InterfaceBridge", "bridge"),
        ("InterfaceSlirp", "slirp"),
        ("InterfaceMasquerade", "masquerade"),
        ("InterfaceSRIOV", "sriov"),
    ],
)
def test_binding_methods_round_trip(method, key):
    config = _config()
    config["devices"][0]["interface"][0]["interface_binding_method"] = method
    domain = expand_domain_spec([config])
    assert key in domain["devices"]["interfaces"][0]
    flattened = flatten_domain_spec(domain)[0]["devices"][0]["interface"][0]
    assert flattened["interface_binding_method"] == method


def test_expand_disk_target():
    config = _config()
    target = config["devices"][0]["disk"][0]["disk_device"][0]["disk"][0]
    target["read_only"] = True
    target["pci_address"] = "0000:81:01.10"
    disk = expand_domain_spec([config])["devices"]["disks"][0]
    assert disk["diskDevice"]["disk"] == {
        "bus": "virtio",
        "readOnly": True,
        "pciAddress": "0000:81:01.10",
    }


def test_expand_empty():
    assert expand_domain_spec([]) == {}
    assert expand_domain_spec([None]) == {}


def test_features_disabled_are_empty():
    config = _config()
    config["features"] = [{"ssm": [{"enabled": False}]}]
    domain = expand_domain_spec([config])
    assert domain["features"] == {}
    assert flatten_domain_spec(domain)[0]["features"] is None


@pytest.mark.parametrize("key", ["requests", "limits"])
def test_bad_resource_quantity(key):
    config = copy.deepcopy(_config())
    config["resources"][0][key]["storage"] = "a5"
    with pytest.raises(ExpandError) as info:
        expand_domain_spec([config])
    assert str(info.value) == FORMAT_MESSAGE


def test_schema_accepts_valid_config():
    config = _config()
    assert domain_spec_schema().validate([config]) == [config]


def test_schema_rejects_unknown_binding():
    config = _config()
    config["devices"][0]["interface"][0]["interface_binding_method"] = "Bogus"
    with pytest.raises(ValueError, match="expected value to be one of"):
        domain_spec_schema().validate([config])


def test_schema_rejects_second_block():
    with pytest.raises(ValueError, match="1 item maximum"):
        domain_spec_schema().validate([_config(), _config()])