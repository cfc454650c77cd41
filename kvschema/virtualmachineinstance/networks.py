"""Network blocks of a virtual machine instance."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.schema import Field, FieldType


def _network_fields() -> dict[str, Field]:
    return {
        "name": Field(
            FieldType.STRING,
            description="Network name.",
            required=True,
        ),
        "network_source": Field(
            FieldType.LIST,
            description=(
                "NetworkSource represents the network type and the source interface that "
                "should be connected to the virtual machine."
            ),
            max_items=1,
            optional=True,
            elem={
                "pod": Field(
                    FieldType.LIST,
                    description="Pod network.",
                    max_items=1,
                    optional=True,
                    elem={
                        "vm_network_cidr": Field(
                            FieldType.STRING,
                            description="CIDR for vm network.",
                            optional=True,
                        ),
                    },
                ),
                "multus": Field(
                    FieldType.LIST,
                    description="Multus network.",
                    max_items=1,
                    optional=True,
                    elem={
                        "network_name": Field(
                            FieldType.STRING,
                            description=(
                                "References to a NetworkAttachmentDefinition CRD object. "
                                "Format: <networkName>, <namespace>/<networkName>. If "
                                "namespace is not specified, VMI namespace is assumed."
                            ),
                            required=True,
                        ),
                        "default": Field(
                            FieldType.BOOL,
                            description=(
                                "Select the default network and add it to the "
                                "multus-cni.io/default-network annotation."
                            ),
                            optional=True,
                        ),
                    },
                ),
            },
        ),
    }


def networks_schema():
    """Schema of the networks that can be attached to a virtual interface."""
    return Field(
        FieldType.LIST,
        description="List of networks that can be attached to a vm's virtual interface.",
        optional=True,
        max_items=1,
        elem=_network_fields(),
    )


# Expanders


def _first(items) -> Mapping | None:
    if not items or items[0] is None:
        return None
    return items[0]


def _list(block: Mapping, key: str):
    value = block.get(key)
    return value if isinstance(value, (list, tuple)) else None


def expand_networks(items):
    """Turn network configuration blocks into networks."""
    items = list(items or ())
    if not items or items[0] is None:
        return [{} for _ in items]
    networks = []
    for block in items:
        network: dict = {}
        name = block.get("name")
        if isinstance(name, str) and name:
            network["name"] = name
        source = _list(block, "network_source")
        if source is not None:
            network["networkSource"] = _expand_network_source(source)
        networks.append(network)
    return networks


def _expand_network_source(items) -> dict:
    block = _first(items)
    if block is None:
        return {}
    source: dict = {}
    pod = _list(block, "pod")
    if pod is not None:
        source["pod"] = _expand_pod_network(pod)
    multus = _list(block, "multus")
    if multus is not None:
        expanded = _expand_multus_network(multus)
        if expanded is not None:
            source["multus"] = expanded
    return source


def _expand_pod_network(items) -> dict:
    block = _first(items)
    if block is None:
        return {}
    pod: dict = {}
    cidr = block.get("vm_network_cidr")
    if isinstance(cidr, str) and cidr:
        pod["vmNetworkCIDR"] = cidr
    return pod


def _expand_multus_network(items) -> dict | None:
    block = _first(items)
    if block is None:
        return None
    multus: dict = {}
    name = block.get("network_name")
    if isinstance(name, str) and name:
        multus["networkName"] = name
    if block.get("default") is True:
        multus["default"] = True
    return multus


# Flatteners


def flatten_networks(networks):
    """Turn networks into configuration blocks."""
    return [
        {
            "name": network.get("name", ""),
            "network_source": _flatten_network_source(network.get("networkSource") or {}),
        }
        for network in networks or ()
    ]


def _flatten_network_source(source: Mapping) -> list:
    block: dict = {}
    pod = source.get("pod")
    if pod is not None:
        block["pod"] = [{"vm_network_cidr": pod.get("vmNetworkCIDR", "")}]
    multus = source.get("multus")
    if multus is not None:
        block["multus"] = [
            {
                "network_name": multus.get("networkName", ""),
                "default": bool(multus.get("default", False)),
            }
        ]
    return [block]