import pytest

from kvschema.k8s.label_selector import (
    expand_label_selector,
    flatten_label_selector,
    label_selector_fields,
)


def _all_force_new(fields):
    flags = []
    for field in fields.values():
        flags.append(field.force_new)
        if isinstance(field.elem, dict):
            flags.extend(_all_force_new(field.elem))
    return flags


@pytest.mark.parametrize("updatable, expected", [(True, False), (False, True)])
def test_force_new_follows_updatable(updatable, expected):
    flags = _all_force_new(label_selector_fields(updatable))
    assert flags and all(flag is expected for flag in flags)


@pytest.mark.parametrize("items", [[], [None]])
def test_expand_empty(items):
    assert expand_label_selector(items) == {}


def test_expand_labels_and_expressions():
    config = [
        {
            "match_labels": {"app": "web"},
            "match_expressions": [
                {"key": "tier", "operator": "In", "values": {"b", "a"}},
            ],
        }
    ]
    assert expand_label_selector(config) == {
        "matchLabels": {"app": "web"},
        "matchExpressions": [{"key": "tier", "operator": "In", "values": ["a", "b"]}],
    }


def test_expand_omits_empty_values():
    config = [{"match_expressions": [{"key": "tier", "operator": "Exists", "values": set()}]}]
    assert expand_label_selector(config) == {
        "matchExpressions": [{"key": "tier", "operator": "Exists"}]
    }


def test_round_trip():
    config = [
        {
            "match_labels": {"app": "web", "env": "prod"},
            "match_expressions": [
                {"key": "tier", "operator": "NotIn", "values": frozenset({"cache", "db"})},
            ],
        }
    ]
    assert flatten_label_selector(expand_label_selector(config)) == config


def test_flatten_empty_selector():
    assert flatten_label_selector({}) == [{}]