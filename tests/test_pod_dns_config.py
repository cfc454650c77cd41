import pytest

from kvschema.k8s.pod_dns_config import (
    expand_pod_dns_config,
    flatten_pod_dns_config,
    pod_dns_config_schema,
)


def _block():
    return {
        "nameservers": ["10.0.0.10", "fd00::1"],
        "searches": ["svc.cluster.local", "example.com"],
        "option": [{"name": "ndots", "value": "5"}, {"name": "edns0", "value": ""}],
    }


def test_expand_empty_gives_empty_config():
    assert expand_pod_dns_config([]) == {}
    assert expand_pod_dns_config([None]) == {}


def test_expand_copies_lists():
    block = _block()
    config = expand_pod_dns_config([block])
    assert config["nameservers"] == block["nameservers"]
    assert config["searches"] == block["searches"]


def test_expand_keeps_empty_option_value():
    config = expand_pod_dns_config([_block()])
    assert config["options"] == [
        {"name": "ndots", "value": "5"},
        {"name": "edns0", "value": ""},
    ]


def test_expand_omits_empty_lists():
    config = expand_pod_dns_config([{"nameservers": [], "searches": [], "option": []}])
    assert config == {}


def test_flatten_empty_config():
    assert flatten_pod_dns_config({}) == []


def test_round_trip():
    config = expand_pod_dns_config([_block()])
    flattened = flatten_pod_dns_config(config)
    assert len(flattened) == 1
    assert expand_pod_dns_config(flattened) == config


def test_flatten_option_without_value():
    flattened = flatten_pod_dns_config({"options": [{"name": "rotate"}]})
    assert flattened == [{"option": [{"name": "rotate"}]}]


def test_schema_accepts_valid_block():
    block = [_block()]
    assert pod_dns_config_schema().validate(block) == block


def test_schema_rejects_bad_nameserver():
    with pytest.raises(ValueError):
        pod_dns_config_schema().validate([{"nameservers": ["not-an-ip"]}])


def test_schema_rejects_bad_search_domain():
    with pytest.raises(ValueError):
        pod_dns_config_schema().validate([{"searches": ["Bad_Domain"]}])


def test_schema_allows_single_block_only():
    with pytest.raises(ValueError):
        pod_dns_config_schema().validate([{}, {}])


def test_schema_requires_option_name():
    with pytest.raises(ValueError):
        pod_dns_config_schema().validate([{"option": [{"value": "1"}]}])