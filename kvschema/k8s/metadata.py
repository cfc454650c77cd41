"""Object metadata blocks."""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit

from kvschema.schema import Field, FieldType

_GENERATE_NAME_DESCRIPTION = (
    "Prefix, used by the server, to generate a unique name ONLY IF the `name` field "
    "has not been provided. This value will also be combined with a unique suffix."
)


def _metadata_fields(object_name: str) -> dict[str, Field]:
    return {
        "annotations": Field(
            FieldType.MAP,
            description=(
                f"An unstructured key value map stored with the {object_name} that may be "
                "used to store arbitrary metadata."
            ),
            optional=True,
            computed=True,
            elem=Field(FieldType.STRING),
        ),
        "generation": Field(
            FieldType.INT,
            description="A sequence number representing a specific generation of the desired state.",
            computed=True,
        ),
        "labels": Field(
            FieldType.MAP,
            description=(
                "Map of string keys and values that can be used to organize and "
                f"categorize (scope and select) the {object_name}. May match selectors "
                "of replication controllers and services."
            ),
            optional=True,
            elem=Field(FieldType.STRING),
        ),
        "name": Field(
            FieldType.STRING,
            description=f"Name of the {object_name}, must be unique. Cannot be updated.",
            optional=True,
            force_new=True,
            computed=True,
        ),
        "resource_version": Field(
            FieldType.STRING,
            description=(
                "An opaque value that represents the internal version of this "
                f"{object_name} that can be used by clients to determine when "
                f"{object_name} has changed."
            ),
            computed=True,
        ),
        "self_link": Field(
            FieldType.STRING,
            description=f"A URL representing this {object_name}.",
            computed=True,
        ),
        "uid": Field(
            FieldType.STRING,
            description=f"The unique in time and space value for this {object_name}.",
            computed=True,
        ),
    }


def _with_generate_name(fields: dict[str, Field], name_path: str, generate_path: str) -> None:
    fields["generate_name"] = Field(
        FieldType.STRING,
        description=_GENERATE_NAME_DESCRIPTION,
        optional=True,
        force_new=True,
        conflicts_with=(name_path,),
    )
    fields["name"].conflicts_with = (generate_path,)


def _metadata_block(object_name: str, fields: dict[str, Field]) -> Field:
    return Field(
        FieldType.LIST,
        description=f"Standard {object_name}'s metadata.",
        required=True,
        max_items=1,
        elem=fields,
    )


def metadata_schema(object_name, generatable_name):
    """Schema of a metadata block for a cluster-scoped object."""
    fields = _metadata_fields(object_name)
    if generatable_name:
        _with_generate_name(fields, "metadata.0.name", "metadata.0.generate_name")
    return _metadata_block(object_name, fields)


def _namespaced_metadata_schema(object_name: str, generatable_name: bool, is_template: bool) -> Field:
    fields = _metadata_fields(object_name)
    fields["namespace"] = Field(
        FieldType.STRING,
        description=f"Namespace defines the space within which name of the {object_name} must be unique.",
        optional=True,
        force_new=True,
        default=None if is_template else "default",
    )
    if generatable_name:
        _with_generate_name(fields, "metadata.name", "metadata.generate_name")
    return _metadata_block(object_name, fields)


def namespaced_metadata_schema(object_name, generatable_name):
    """Schema of a metadata block for a namespaced object."""
    return _namespaced_metadata_schema(object_name, generatable_name, False)


def build_id(meta):
    """Identifier of an object: ``namespace/name``."""
    return f"{meta.get('namespace', '')}/{meta.get('name', '')}"


def _string_map(mapping: Mapping) -> dict[str, str]:
    return {str(k): str(v) for k, v in mapping.items()}


def expand_metadata(items):
    """Turn a metadata configuration block into object metadata."""
    meta: dict = {}
    if not items or items[0] is None:
        return meta
    block = items[0]
    for key in ("annotations", "labels"):
        value = block.get(key)
        if isinstance(value, Mapping) and value:
            meta[key] = _string_map(value)
    for key, api_key in (
        ("generate_name", "generateName"),
        ("name", "name"),
        ("namespace", "namespace"),
    ):
        value = block.get(key)
        if isinstance(value, str) and value:
            meta[api_key] = value
    return meta


def flatten_metadata(meta):
    """Turn object metadata into a configuration block list."""
    block = {
        "annotations": dict(meta.get("annotations") or {}),
        "labels": dict(meta.get("labels") or {}),
        "name": meta.get("name", ""),
        "resource_version": meta.get("resourceVersion", ""),
        "self_link": meta.get("selfLink", ""),
        "uid": str(meta.get("uid", "")),
        "generation": meta.get("generation", 0),
    }
    if meta.get("generateName"):
        block["generate_name"] = meta["generateName"]
    if meta.get("namespace"):
        block["namespace"] = meta["namespace"]
    return [block]


def is_internal_key(key):
    """Whether an annotation or label key is managed by the cluster itself."""
    try:
        hostname = urlsplit("//" + key).hostname
    except ValueError:
        hostname = None
    if hostname and hostname.endswith("kubernetes.io"):
        return True
    return "deprecated.daemonset.template.generation" in key


def remove_internal_keys(mapping, declared):
    """Drop internal keys from *mapping* unless they appear in *declared*."""
    declared = declared or {}
    return {
        key: value
        for key, value in mapping.items()
        if not (is_internal_key(key) and key not in declared)
    }