"""Specification blocks of a virtual machine instance."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.k8s.affinity import affinity_schema, expand_affinity, flatten_affinity
from kvschema.k8s.pod_dns_config import (
    expand_pod_dns_config,
    flatten_pod_dns_config,
    pod_dns_config_schema,
)
from kvschema.k8s.toleration import (
    expand_tolerations,
    flatten_tolerations,
    toleration_schema,
)
from kvschema.schema import Field, FieldType, string_in_slice
from kvschema.virtualmachineinstance.domain_spec import (
    domain_spec_schema,
    expand_domain_spec,
    flatten_domain_spec,
)
from kvschema.virtualmachineinstance.networks import (
    expand_networks,
    flatten_networks,
    networks_schema,
)
from kvschema.virtualmachineinstance.probe import expand_probe, flatten_probe, probe_schema
from kvschema.virtualmachineinstance.volumes import (
    expand_volumes,
    flatten_volumes,
    volumes_schema,
)

_STRINGS = (
    ("priority_class_name", "priorityClassName"),
    ("scheduler_name", "schedulerName"),
    ("eviction_strategy", "evictionStrategy"),
    ("hostname", "hostname"),
    ("subdomain", "subdomain"),
    ("dns_policy", "dnsPolicy"),
)


def _virtual_machine_instance_spec_fields() -> dict[str, Field]:
    return {
        "priority_class_name": Field(
            FieldType.STRING,
            description=(
                "If specified, indicates the pod's priority. If not specified, the pod "
                "priority will be default or zero if there is no default."
            ),
            optional=True,
        ),
        "domain": domain_spec_schema(),
        "node_selector": Field(
            FieldType.MAP,
            description=(
                "NodeSelector is a selector which must be true for the vmi to fit on a "
                "node. Selector which must match a node's labels for the vmi to be "
                "scheduled on that node."
            ),
            optional=True,
            elem=Field(FieldType.STRING),
        ),
        "affinity": affinity_schema(),
        "scheduler_name": Field(
            FieldType.STRING,
            description=(
                "If specified, the VMI will be dispatched by specified scheduler. If not "
                "specified, the VMI will be dispatched by default scheduler."
            ),
            optional=True,
        ),
        "tolerations": toleration_schema(),
        "eviction_strategy": Field(
            FieldType.STRING,
            description=(
                'EvictionStrategy can be set to "LiveMigrate" if the '
                "VirtualMachineInstance should be migrated instead of shut-off in case "
                "of a node drain."
            ),
            optional=True,
            validate_func=string_in_slice(["LiveMigrate"], False),
        ),
        "termination_grace_period_seconds": Field(
            FieldType.INT,
            description=(
                "Grace period observed after signalling a VirtualMachineInstance to stop "
                "after which the VirtualMachineInstance is force terminated."
            ),
            optional=True,
        ),
        "volume": volumes_schema(),
        "liveness_probe": probe_schema(),
        "readiness_probe": probe_schema(),
        "hostname": Field(
            FieldType.STRING,
            description="Specifies the hostname of the vmi.",
            optional=True,
        ),
        "subdomain": Field(
            FieldType.STRING,
            description=(
                'If specified, the fully qualified vmi hostname will be '
                '"<hostname>.<subdomain>.<pod namespace>.svc.<cluster domain>".'
            ),
            optional=True,
        ),
        "network": networks_schema(),
        "dns_policy": Field(
            FieldType.STRING,
            description="DNSPolicy defines how a pod's DNS will be configured.",
            optional=True,
            validate_func=string_in_slice(
                ["ClusterFirstWithHostNet", "ClusterFirst", "Default", "None"], False
            ),
        ),
        "pod_dns_config": pod_dns_config_schema(),
    }


def virtual_machine_instance_spec_schema():
    """Schema of the virtual machine instance specification block."""
    return Field(
        FieldType.LIST,
        description="Template is the direct specification of VirtualMachineInstance.",
        optional=True,
        max_items=1,
        elem=_virtual_machine_instance_spec_fields(),
    )


def _list(block: Mapping, key: str):
    value = block.get(key)
    return value if isinstance(value, (list, tuple)) else None


def expand_virtual_machine_instance_spec(items):
    """Turn a specification block into a virtual machine instance specification.

    Raises ValueError (usually :class:`ExpandError`) when a nested value is invalid.
    """
    if not items or items[0] is None:
        return {}
    block: Mapping = items[0]
    spec: dict = {}

    for key, api_key in _STRINGS:
        value = block.get(key)
        if isinstance(value, str) and value:
            spec[api_key] = value

    domain = _list(block, "domain")
    if domain is not None:
        spec["domain"] = expand_domain_spec(domain)

    node_selector = block.get("node_selector")
    if isinstance(node_selector, Mapping) and node_selector:
        spec["nodeSelector"] = {str(k): str(v) for k, v in node_selector.items()}

    affinity = _list(block, "affinity")
    if affinity is not None:
        spec["affinity"] = expand_affinity(affinity)

    tolerations = _list(block, "tolerations")
    if tolerations is not None:
        expanded = expand_tolerations(tolerations)
        if expanded:
            spec["tolerations"] = expanded

    seconds = block.get("termination_grace_period_seconds")
    if isinstance(seconds, int) and not isinstance(seconds, bool):
        spec["terminationGracePeriodSeconds"] = seconds

    volumes = _list(block, "volume")
    if volumes is not None:
        expanded = expand_volumes(volumes)
        if expanded:
            spec["volumes"] = expanded

    for key, api_key in (("liveness_probe", "livenessProbe"), ("readiness_probe", "readinessProbe")):
        probe = _list(block, key)
        if probe is not None:
            expanded = expand_probe(probe)
            if expanded is not None:
                spec[api_key] = expanded

    networks = _list(block, "network")
    if networks is not None:
        expanded = expand_networks(networks)
        if expanded:
            spec["networks"] = expanded

    dns_config = _list(block, "pod_dns_config")
    if dns_config is not None:
        spec["dnsConfig"] = expand_pod_dns_config(dns_config)

    return spec


def flatten_virtual_machine_instance_spec(spec):
    """Turn a virtual machine instance specification into a configuration block list."""
    block: dict = {
        "priority_class_name": spec.get("priorityClassName", ""),
        "domain": flatten_domain_spec(spec.get("domain") or {}),
        "node_selector": dict(spec.get("nodeSelector") or {}),
        "affinity": flatten_affinity(spec.get("affinity")),
        "scheduler_name": spec.get("schedulerName", ""),
        "tolerations": flatten_tolerations(spec.get("tolerations") or []),
    }
    if spec.get("evictionStrategy") is not None:
        block["eviction_strategy"] = spec["evictionStrategy"]
    if spec.get("terminationGracePeriodSeconds") is not None:
        block["termination_grace_period_seconds"] = spec["terminationGracePeriodSeconds"]
    block["volume"] = flatten_volumes(spec.get("volumes") or [])
    if spec.get("livenessProbe") is not None:
        block["liveness_probe"] = flatten_probe(spec["livenessProbe"])
    if spec.get("readinessProbe") is not None:
        block["readiness_probe"] = flatten_probe(spec["readinessProbe"])
    block["hostname"] = spec.get("hostname", "")
    block["subdomain"] = spec.get("subdomain", "")
    block["network"] = flatten_networks(spec.get("networks") or [])
    block["dns_policy"] = spec.get("dnsPolicy", "")
    if spec.get("dnsConfig") is not None:
        block["pod_dns_config"] = flatten_pod_dns_config(spec["dnsConfig"])
    return [block]