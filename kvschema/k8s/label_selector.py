"""Label selector blocks."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.schema import Field, FieldType


def label_selector_fields(updatable):
    """Fields of a label selector block; non-updatable ones force a new resource."""
    force_new = not updatable
    return {
        "match_expressions": Field(
            FieldType.LIST,
            description="A list of label selector requirements. The requirements are ANDed.",
            optional=True,
            force_new=force_new,
            elem={
                "key": Field(
                    FieldType.STRING,
                    description="The label key that the selector applies to.",
                    optional=True,
                    force_new=force_new,
                ),
                "operator": Field(
                    FieldType.STRING,
                    description=(
                        "A key's relationship to a set of values. Valid operators ard "
                        "`In`, `NotIn`, `Exists` and `DoesNotExist`."
                    ),
                    optional=True,
                    force_new=force_new,
                ),
                "values": Field(
                    FieldType.SET,
                    description=(
                        "An array of string values. If the operator is `In` or `NotIn`, "
                        "the values array must be non-empty. If the operator is `Exists` "
                        "or `DoesNotExist`, the values array must be empty. This array is "
                        "replaced during a strategic merge patch."
                    ),
                    optional=True,
                    force_new=force_new,
                    elem=Field(FieldType.STRING),
                ),
            },
        ),
        "match_labels": Field(
            FieldType.MAP,
            description=(
                "A map of {key,value} pairs. A single {key,value} in the matchLabels map "
                "is equivalent to an element of `match_expressions`, whose key field is "
                '"key", the operator is "In", and the values array contains only "value". '
                "The requirements are ANDed."
            ),
            optional=True,
            force_new=force_new,
        ),
    }


def _expand_requirements(blocks) -> list[dict]:
    if not blocks or blocks[0] is None:
        return []
    requirements = []
    for block in blocks:
        requirement = {
            "key": block.get("key", ""),
            "operator": block.get("operator", ""),
        }
        values = sorted(str(v) for v in (block.get("values") or ()))
        if values:
            requirement["values"] = values
        requirements.append(requirement)
    return requirements


def expand_label_selector(items):
    """Turn a configuration block into a label selector."""
    if not items or items[0] is None:
        return {}
    block = items[0]
    selector: dict = {}
    labels = block.get("match_labels")
    if isinstance(labels, Mapping) and labels:
        selector["matchLabels"] = {str(k): str(v) for k, v in labels.items()}
    expressions = block.get("match_expressions")
    if isinstance(expressions, (list, tuple)) and expressions:
        selector["matchExpressions"] = _expand_requirements(expressions)
    return selector


def flatten_label_selector(selector):
    """Turn a label selector into a configuration block list."""
    block: dict = {}
    labels = selector.get("matchLabels")
    if labels:
        block["match_labels"] = dict(labels)
    expressions = selector.get("matchExpressions")
    if expressions:
        block["match_expressions"] = [
            {
                "key": requirement.get("key", ""),
                "operator": requirement.get("operator", ""),
                "values": frozenset(requirement.get("values") or ()),
            }
            for requirement in expressions
        ]
    return [block]