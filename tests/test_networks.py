import pytest

from kvschema.virtualmachineinstance.networks import (
    expand_networks,
    flatten_networks,
    networks_schema,
)


POD_CONFIG = [
    {
        "name": "default",
        "network_source": [{"pod": [{"vm_network_cidr": "10.10.0.0/24"}]}],
    }
]

MULTUS_CONFIG = [
    {
        "name": "secondary",
        "network_source": [{"multus": [{"network_name": "ns/net", "default": True}]}],
    }
]


@pytest.mark.parametrize("config", [POD_CONFIG, MULTUS_CONFIG])
def test_config_round_trip(config):
    assert flatten_networks(expand_networks(config)) == config


def test_expand_pod_network():
    assert expand_networks(POD_CONFIG) == [
        {"name": "default", "networkSource": {"pod": {"vmNetworkCIDR": "10.10.0.0/24"}}}
    ]


def test_empty_pod_block_still_selects_pod_network():
    config = [
        {
            "name": "both",
            "network_source": [
                {"pod": [], "multus": [{"network_name": "net", "default": False}]}
            ],
        }
    ]
    source = expand_networks(config)[0]["networkSource"]
    assert source["pod"] == {}
    assert source["multus"] == {"networkName": "net"}


def test_empty_multus_block_is_omitted():
    config = [{"name": "n", "network_source": [{"multus": []}]}]
    assert "multus" not in expand_networks(config)[0]["networkSource"]


def test_multus_default_false_flattens_explicitly():
    api = [{"name": "n", "networkSource": {"multus": {"networkName": "net"}}}]
    flat = flatten_networks(api)
    assert flat[0]["network_source"][0]["multus"][0]["default"] is False
    assert expand_networks(flat) == api


def test_api_round_trip():
    api = [
        {"name": "a", "networkSource": {"pod": {"vmNetworkCIDR": "10.0.0.0/8"}}},
        {"name": "b", "networkSource": {"multus": {"networkName": "x", "default": True}}},
    ]
    assert expand_networks(flatten_networks(api)) == api


def test_expand_empty_and_null():
    assert expand_networks([]) == []
    assert expand_networks([None]) == [{}]


def test_schema_accepts_config():
    assert networks_schema().validate(POD_CONFIG) == POD_CONFIG


def test_schema_limits_to_one_item():
    with pytest.raises(ValueError):
        networks_schema().validate(POD_CONFIG + MULTUS_CONFIG)


def test_schema_requires_name():
    with pytest.raises(ValueError):
        networks_schema().validate([{"network_source": []}])


def test_schema_requires_multus_network_name():
    with pytest.raises(ValueError):
        networks_schema().validate(
            [{"name": "n", "network_source": [{"multus": [{"default": True}]}]}]
        )