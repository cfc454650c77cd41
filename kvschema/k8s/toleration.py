"""Pod toleration blocks."""

from __future__ import annotations

import logging
import re

from kvschema.schema import ExpandError, Field, FieldType, string_in_slice

log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _toleration_fields() -> dict[str, Field]:
    return {
        "effect": Field(
            FieldType.STRING,
            description=(
                "Effect indicates the taint effect to match. Empty means match all taint "
                "effects. When specified, allowed values are NoSchedule, PreferNoSchedule "
                "and NoExecute."
            ),
            optional=True,
            validate_func=string_in_slice(["NoSchedule", "PreferNoSchedule", "NoExecute"], False),
        ),
        "key": Field(
            FieldType.STRING,
            description=(
                "Key is the taint key that the toleration applies to. Empty means match "
                "all taint keys. If the key is empty, operator must be Exists; this "
                "combination means to match all values and all keys."
            ),
            optional=True,
        ),
        "operator": Field(
            FieldType.STRING,
            description=(
                "Operator represents a key's relationship to the value. Valid operators "
                "are Exists and Equal. Defaults to Equal. Exists is equivalent to wildcard "
                "for value, so that a pod can tolerate all taints of a particular category."
            ),
            default="Equal",
            optional=True,
            validate_func=string_in_slice(["Exists", "Equal"], False),
        ),
        # A string, so that "unset" can be told apart from zero.
        "toleration_seconds": Field(
            FieldType.STRING,
            description=(
                "TolerationSeconds represents the period of time the toleration (which "
                "must be of effect NoExecute, otherwise this field is ignored) tolerates "
                "the taint. By default, it is not set, which means tolerate the taint "
                "forever (do not evict). Zero and negative values will be treated as 0 "
                "(evict immediately) by the system."
            ),
            optional=True,
        ),
        "value": Field(
            FieldType.STRING,
            description=(
                "Value is the taint value the toleration matches to. If the operator is "
                "Exists, the value should be empty, otherwise just a regular string."
            ),
            optional=True,
        ),
    }


def toleration_schema():
    """Schema of the list of pod tolerations."""
    return Field(
        FieldType.LIST,
        description="If specified, the pod's toleration. Optional: Defaults to empty",
        optional=True,
        elem=_toleration_fields(),
    )


def _parse_seconds(text: str) -> int:
    if _INTEGER.fullmatch(text):
        seconds = int(text)
        if _INT64_MIN <= seconds <= _INT64_MAX:
            return seconds
    raise ExpandError(f'invalid toleration_seconds must be int or "", got "{text}"')


def expand_tolerations(items):
    """Turn toleration configuration blocks into tolerations."""
    tolerations = []
    for block in items or ():
        toleration: dict = {}
        for key in ("effect", "key", "operator"):
            value = block.get(key)
            if isinstance(value, str) and value:
                toleration[key] = value
        seconds = block.get("toleration_seconds")
        if isinstance(seconds, str) and seconds:
            toleration["tolerationSeconds"] = _parse_seconds(seconds)
        value = block.get("value")
        if isinstance(value, str) and value:
            toleration["value"] = value
        tolerations.append(toleration)
    return tolerations


def flatten_tolerations(tolerations):
    """Turn tolerations into configuration blocks, skipping server-added ones."""
    blocks = []
    for toleration in tolerations:
        key = toleration.get("key", "")
        if "node.kubernetes.io/" in key:
            log.info("ignoring toleration with key: %s", key)
            continue
        block: dict = {}
        for name in ("effect", "key", "operator", "value"):
            if toleration.get(name):
                block[name] = toleration[name]
        if toleration.get("tolerationSeconds") is not None:
            block["toleration_seconds"] = str(toleration["tolerationSeconds"])
        blocks.append(block)
    return blocks