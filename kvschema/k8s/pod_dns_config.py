"""Pod DNS configuration blocks."""

from __future__ import annotations

import re
from collections.abc import Mapping

from kvschema.schema import Field, FieldType, is_ip_address

_DNS_LABEL = r"[a-z0-9]([-a-z0-9]*[a-z0-9])?"
_DNS_SUBDOMAIN = re.compile(rf"^{_DNS_LABEL}(\.{_DNS_LABEL})*$")
_DNS_SUBDOMAIN_MAX_LENGTH = 253


def _validate_name(value):
    if not isinstance(value, str):
        raise ValueError(f"expected type to be string, got {type(value).__name__}")
    if len(value) > _DNS_SUBDOMAIN_MAX_LENGTH:
        raise ValueError(
            f"must be no more than {_DNS_SUBDOMAIN_MAX_LENGTH} characters, got {value!r}"
        )
    if _DNS_SUBDOMAIN.match(value) is None:
        raise ValueError(
            "a lowercase RFC 1123 subdomain must consist of lower case alphanumeric "
            "characters, '-' or '.', and must start and end with an alphanumeric "
            f"character, got {value!r}"
        )
    return value


def _pod_dns_config_fields() -> dict[str, Field]:
    return {
        "nameservers": Field(
            FieldType.LIST,
            description=(
                "A list of DNS name server IP addresses. This will be appended to the "
                "base nameservers generated from DNSPolicy. Duplicated nameservers will "
                "be removed."
            ),
            optional=True,
            elem=Field(FieldType.STRING, validate_func=is_ip_address),
        ),
        "option": Field(
            FieldType.LIST,
            description=(
                "A list of DNS resolver options. This will be merged with the base "
                "options generated from DNSPolicy. Duplicated entries will be removed. "
                "Resolution options given in Options will override those that appear in "
                "the base DNSPolicy."
            ),
            optional=True,
            elem={
                "name": Field(
                    FieldType.STRING,
                    description="Name of the option.",
                    required=True,
                ),
                "value": Field(
                    FieldType.STRING,
                    description="Value of the option. Optional: Defaults to empty.",
                    optional=True,
                ),
            },
        ),
        "searches": Field(
            FieldType.LIST,
            description=(
                "A list of DNS search domains for host-name lookup. This will be "
                "appended to the base search paths generated from DNSPolicy. Duplicated "
                "search paths will be removed."
            ),
            optional=True,
            elem=Field(FieldType.STRING, validate_func=_validate_name),
        ),
    }


def pod_dns_config_schema():
    """Schema of the optional pod DNS configuration block."""
    return Field(
        FieldType.LIST,
        description=(
            "Specifies the DNS parameters of a pod. Parameters specified here will be "
            "merged to the generated DNS configuration based on DNSPolicy. Optional: "
            "Defaults to empty"
        ),
        optional=True,
        max_items=1,
        elem=_pod_dns_config_fields(),
    )


def _expand_options(blocks) -> list[dict]:
    options = []
    for block in blocks:
        option: dict = {}
        name = block.get("name")
        if isinstance(name, str) and name:
            option["name"] = name
        value = block.get("value")
        if isinstance(value, str):
            option["value"] = value
        options.append(option)
    return options


def expand_pod_dns_config(items):
    """Turn a DNS configuration block into a pod DNS configuration."""
    if not items or items[0] is None:
        return {}
    block: Mapping = items[0]
    config: dict = {}
    nameservers = block.get("nameservers")
    if isinstance(nameservers, (list, tuple)) and nameservers:
        config["nameservers"] = [str(n) for n in nameservers]
    searches = block.get("searches")
    if isinstance(searches, (list, tuple)) and searches:
        config["searches"] = [str(s) for s in searches]
    options = block.get("option")
    if isinstance(options, (list, tuple)) and options:
        config["options"] = _expand_options(options)
    return config


def flatten_pod_dns_config(config):
    """Turn a pod DNS configuration into a configuration block list."""
    if not config:
        return []
    block: dict = {}
    if config.get("nameservers"):
        block["nameservers"] = list(config["nameservers"])
    if config.get("searches"):
        block["searches"] = list(config["searches"])
    if config.get("options"):
        flattened = []
        for option in config["options"]:
            item: dict = {}
            if option.get("name"):
                item["name"] = option["name"]
            if option.get("value") is not None:
                item["value"] = option["value"]
            flattened.append(item)
        block["option"] = flattened
    return [block] if block else []