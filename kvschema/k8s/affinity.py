"""Pod scheduling affinity blocks."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.k8s.label_selector import (
    expand_label_selector,
    flatten_label_selector,
    label_selector_fields,
)
from kvschema.schema import Field, FieldType, string_in_slice, string_match

_REQUIRED = "required_during_scheduling_ignored_during_execution"
_PREFERRED = "preferred_during_scheduling_ignored_during_execution"
_API_REQUIRED = "requiredDuringSchedulingIgnoredDuringExecution"
_API_PREFERRED = "preferredDuringSchedulingIgnoredDuringExecution"

_POD_AFFINITY_DESCRIPTION = (
    "Inter-pod topological affinity. rules that specify that certain pods should be "
    "placed in the same topological domain (e.g. same node, same rack, same zone, "
    "same power domain, etc.)"
)


# Schema


def _affinity_fields() -> dict[str, Field]:
    return {
        "node_affinity": Field(
            FieldType.LIST,
            description="Node affinity scheduling rules for the pod.",
            optional=True,
            max_items=1,
            elem=_node_affinity_fields(),
        ),
        "pod_affinity": Field(
            FieldType.LIST,
            description=_POD_AFFINITY_DESCRIPTION,
            optional=True,
            max_items=1,
            elem=_pod_affinity_fields(),
        ),
        "pod_anti_affinity": Field(
            FieldType.LIST,
            description=_POD_AFFINITY_DESCRIPTION,
            optional=True,
            max_items=1,
            elem=_pod_affinity_fields(),
        ),
    }


def affinity_schema():
    """Schema of the optional pod scheduling constraints block."""
    return Field(
        FieldType.LIST,
        description="Optional pod scheduling constraints.",
        optional=True,
        max_items=1,
        elem=_affinity_fields(),
    )


def _node_affinity_fields() -> dict[str, Field]:
    return {
        _REQUIRED: Field(
            FieldType.LIST,
            description=(
                "If the affinity requirements specified by this field are not met at "
                "scheduling time, the pod will not be scheduled onto the node. If the "
                "affinity requirements specified by this field cease to be met at some "
                "point during pod execution (e.g. due to a node label update), the system "
                "may or may not try to eventually evict the pod from its node."
            ),
            optional=True,
            max_items=1,
            elem=_node_selector_fields(),
        ),
        _PREFERRED: Field(
            FieldType.LIST,
            description=(
                "The scheduler will prefer to schedule pods to nodes that satisfy the "
                "affinity expressions specified by this field, but it may choose a node "
                "that violates one or more of the expressions. The node that is most "
                "preferred is the one with the greatest sum of weights."
            ),
            optional=True,
            elem=_preferred_scheduling_term_fields(),
        ),
    }


def _node_selector_fields() -> dict[str, Field]:
    return {
        "node_selector_term": Field(
            FieldType.LIST,
            description="List of node selector terms. The terms are ORed.",
            optional=True,
            elem=_node_selector_requirements_fields(),
        ),
    }


def _preferred_scheduling_term_fields() -> dict[str, Field]:
    return {
        "weight": Field(
            FieldType.INT,
            description="weight is in the range 1-100",
            required=True,
        ),
        "preference": Field(
            FieldType.LIST,
            description="A node selector term, associated with the corresponding weight.",
            required=True,
            max_items=1,
            elem=_node_selector_requirements_fields(),
        ),
    }


def _node_selector_requirements_fields() -> dict[str, Field]:
    return {
        "match_expressions": Field(
            FieldType.LIST,
            description="List of node selector requirements. The requirements are ANDed.",
            optional=True,
            elem={
                "key": Field(
                    FieldType.STRING,
                    description="The label key that the selector applies to.",
                    optional=True,
                ),
                "operator": Field(
                    FieldType.STRING,
                    description=(
                        "Operator represents a key's relationship to a set of values. "
                        "Valid operators are In, NotIn, Exists, DoesNotExist. Gt, and Lt."
                    ),
                    optional=True,
                    validate_func=string_in_slice(
                        ["In", "NotIn", "Exists", "DoesNotExist", "Gt", "Lt"], False
                    ),
                ),
                "values": Field(
                    FieldType.SET,
                    description=(
                        "Values is an array of string values. If the operator is In or "
                        "NotIn, the values array must be non-empty. If the operator is "
                        "Exists or DoesNotExist, the values array must be empty. If the "
                        "operator is Gt or Lt, the values array must have a single "
                        "element, which will be interpreted as an integer."
                    ),
                    optional=True,
                    elem=Field(FieldType.STRING),
                ),
            },
        ),
    }


def _pod_affinity_fields() -> dict[str, Field]:
    return {
        _REQUIRED: Field(
            FieldType.LIST,
            description=(
                "If the affinity requirements specified by this field are not met at "
                "scheduling time, the pod will not be scheduled onto the node. When "
                "there are multiple elements, the lists of nodes corresponding to each "
                "PodAffinityTerm are intersected, i.e. all terms must be satisfied."
            ),
            optional=True,
            elem=_pod_affinity_term_fields(),
        ),
        _PREFERRED: Field(
            FieldType.LIST,
            description=(
                "The scheduler will prefer to schedule pods to nodes that satisfy the "
                "anti-affinity expressions specified by this field, but it may choose a "
                "node that violates one or more of the expressions."
            ),
            optional=True,
            elem=_weighted_pod_affinity_term_fields(),
        ),
    }


def _pod_affinity_term_fields() -> dict[str, Field]:
    return {
        "label_selector": Field(
            FieldType.LIST,
            description="A label query over a set of resources, in this case pods.",
            optional=True,
            elem=label_selector_fields(True),
        ),
        "namespaces": Field(
            FieldType.SET,
            description=(
                "namespaces specifies which namespaces the labelSelector applies to "
                "(matches against); null or empty list means 'this pod's namespace'"
            ),
            optional=True,
            elem=Field(FieldType.STRING),
        ),
        "topology_key": Field(
            FieldType.STRING,
            description="empty topology key is interpreted by the scheduler as 'all topologies'",
            optional=True,
            validate_func=string_match(r"^.+$", "value cannot be empty"),
        ),
    }


def _weighted_pod_affinity_term_fields() -> dict[str, Field]:
    return {
        "weight": Field(
            FieldType.INT,
            description=(
                "weight associated with matching the corresponding podAffinityTerm, "
                "in the range 1-100"
            ),
            required=True,
        ),
        "pod_affinity_term": Field(
            FieldType.LIST,
            description="A pod affinity term, associated with the corresponding weight",
            required=True,
            max_items=1,
            elem=_pod_affinity_term_fields(),
        ),
    }


# Flatteners


def flatten_affinity(affinity):
    """Turn an affinity object into a configuration block list."""
    if affinity is None:
        return []
    block: dict = {}
    if affinity.get("nodeAffinity") is not None:
        block["node_affinity"] = _flatten_node_affinity(affinity["nodeAffinity"])
    if affinity.get("podAffinity") is not None:
        block["pod_affinity"] = _flatten_pod_affinity(affinity["podAffinity"])
    if affinity.get("podAntiAffinity") is not None:
        block["pod_anti_affinity"] = _flatten_pod_affinity(affinity["podAntiAffinity"])
    return [block] if block else []


def _flatten_node_affinity(node_affinity: Mapping) -> list:
    block: dict = {}
    required = node_affinity.get(_API_REQUIRED)
    if required is not None:
        block[_REQUIRED] = _flatten_node_selector(required)
    preferred = node_affinity.get(_API_PREFERRED)
    if preferred is not None:
        block[_PREFERRED] = [
            {
                "weight": int(term.get("weight", 0)),
                "preference": _flatten_node_selector_term(term.get("preference") or {}),
            }
            for term in preferred
        ]
    return [block] if block else []


def _flatten_pod_affinity(pod_affinity: Mapping) -> list:
    block: dict = {}
    required = pod_affinity.get(_API_REQUIRED)
    if required:
        block[_REQUIRED] = _flatten_pod_affinity_terms(required)
    preferred = pod_affinity.get(_API_PREFERRED)
    if preferred:
        block[_PREFERRED] = [
            {
                "weight": int(term.get("weight", 0)),
                "pod_affinity_term": _flatten_pod_affinity_terms(
                    [term.get("podAffinityTerm") or {}]
                ),
            }
            for term in preferred
        ]
    return [block] if block else []


def _flatten_node_selector(selector: Mapping) -> list:
    terms = selector.get("nodeSelectorTerms")
    if not terms:
        return []
    return [
        {"node_selector_term": [_flatten_node_selector_term(term)[0] for term in terms]}
    ]


def _flatten_pod_affinity_terms(terms) -> list:
    blocks = []
    for term in terms:
        block = {
            "namespaces": frozenset(term.get("namespaces") or ()),
            "topology_key": term.get("topologyKey", ""),
        }
        if term.get("labelSelector") is not None:
            block["label_selector"] = flatten_label_selector(term["labelSelector"])
        blocks.append(block)
    return blocks


def _flatten_node_selector_term(term: Mapping) -> list:
    block: dict = {}
    if term.get("matchExpressions"):
        block["match_expressions"] = _flatten_requirements(term["matchExpressions"])
    if term.get("matchFields"):
        block["match_fields"] = _flatten_requirements(term["matchFields"])
    return [block]


def _flatten_requirements(requirements) -> list:
    return [
        {
            "key": requirement.get("key", ""),
            "values": frozenset(requirement.get("values") or ()),
            "operator": str(requirement.get("operator", "")),
        }
        for requirement in requirements
    ]


# Expanders


def _first_block(items) -> Mapping | None:
    if not items or items[0] is None:
        return None
    return items[0]


def _nonempty_list(block: Mapping, key: str):
    value = block.get(key)
    if isinstance(value, (list, tuple)) and value:
        return value
    return None


def expand_affinity(items):
    """Turn an affinity configuration block into an affinity object."""
    block = _first_block(items)
    if block is None:
        return {}
    affinity: dict = {}
    node = _nonempty_list(block, "node_affinity")
    if node is not None:
        affinity["nodeAffinity"] = _expand_node_affinity(node)
    pod = _nonempty_list(block, "pod_affinity")
    if pod is not None:
        affinity["podAffinity"] = _expand_pod_affinity(pod)
    anti = _nonempty_list(block, "pod_anti_affinity")
    if anti is not None:
        affinity["podAntiAffinity"] = _expand_pod_affinity(anti)
    return affinity


def _expand_node_affinity(items) -> dict:
    block = _first_block(items)
    if block is None:
        return {}
    result: dict = {}
    required = _nonempty_list(block, _REQUIRED)
    if required is not None:
        result[_API_REQUIRED] = _expand_node_selector(required)
    preferred = _nonempty_list(block, _PREFERRED)
    if preferred is not None:
        result[_API_PREFERRED] = _expand_preferred_scheduling_terms(preferred)
    return result


def _expand_pod_affinity(items) -> dict:
    block = _first_block(items)
    if block is None:
        return {}
    result: dict = {}
    required = _nonempty_list(block, _REQUIRED)
    if required is not None:
        result[_API_REQUIRED] = _expand_pod_affinity_terms(required)
    preferred = _nonempty_list(block, _PREFERRED)
    if preferred is not None:
        result[_API_PREFERRED] = _expand_weighted_pod_affinity_terms(preferred)
    return result


def _expand_node_selector(items) -> dict:
    block = _first_block(items)
    if block is None:
        return {}
    selector: dict = {}
    terms = _nonempty_list(block, "node_selector_term")
    if terms is not None:
        selector["nodeSelectorTerms"] = _expand_node_selector_terms(terms)
    return selector


def _weight(block: Mapping) -> int:
    value = block.get("weight")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _expand_preferred_scheduling_terms(items) -> list:
    if not items or items[0] is None:
        return []
    terms = []
    for block in items:
        preference = _nonempty_list(block, "preference")
        terms.append(
            {
                "weight": _weight(block),
                "preference": _expand_node_selector_term(preference) if preference else {},
            }
        )
    return terms


def _expand_pod_affinity_terms(items) -> list:
    if not items or items[0] is None:
        return []
    terms = []
    for block in items:
        term: dict = {}
        selector = _nonempty_list(block, "label_selector")
        if selector is not None:
            term["labelSelector"] = expand_label_selector(selector)
        namespaces = block.get("namespaces")
        if namespaces:
            term["namespaces"] = sorted(str(ns) for ns in namespaces)
        topology_key = block.get("topology_key")
        term["topologyKey"] = topology_key if isinstance(topology_key, str) else ""
        terms.append(term)
    return terms


def _expand_weighted_pod_affinity_terms(items) -> list:
    if not items or items[0] is None:
        return []
    terms = []
    for block in items:
        pod_term = _nonempty_list(block, "pod_affinity_term")
        terms.append(
            {
                "weight": _weight(block),
                "podAffinityTerm": (
                    _expand_pod_affinity_terms(pod_term)[0] if pod_term else {"topologyKey": ""}
                ),
            }
        )
    return terms


def _expand_node_selector_terms(items) -> list:
    if not items or items[0] is None:
        return []
    return [_expand_node_selector_term([block]) for block in items]


def _expand_node_selector_term(items) -> dict:
    block = _first_block(items)
    if block is None:
        return {}
    term: dict = {}
    expressions = _nonempty_list(block, "match_expressions")
    if expressions is not None:
        term["matchExpressions"] = _expand_requirements(expressions)
    fields = _nonempty_list(block, "match_fields")
    if fields is not None:
        term["matchFields"] = _expand_requirements(fields)
    return term


def _expand_requirements(items) -> list:
    requirements = []
    for block in items:
        requirement = {
            "key": block.get("key", ""),
            "operator": block.get("operator", ""),
        }
        values = sorted(str(v) for v in (block.get("values") or ()))
        if values:
            requirement["values"] = values
        requirements.append(requirement)
    return requirements