"""Volume blocks of a virtual machine instance."""

from __future__ import annotations

from collections.abc import Mapping

from kvschema.k8s.local_object_reference import (
    expand_local_object_references,
    flatten_local_object_references,
    local_object_reference_schema,
)
from kvschema.schema import Field, FieldType

_CLOUD_INIT_STRINGS = (
    ("user_data_base64", "userDataBase64"),
    ("user_data", "userData"),
    ("network_data_base64", "networkDataBase64"),
    ("network_data", "networkData"),
)
_CLOUD_INIT_REFS = (
    ("user_data_secret_ref", "userDataSecretRef"),
    ("network_data_secret_ref", "networkDataSecretRef"),
)


def _cloud_init_fields() -> dict[str, Field]:
    return {
        "user_data_secret_ref": local_object_reference_schema(
            "UserDataSecretRef references a k8s secret that contains config drive userdata."
        ),
        "user_data_base64": Field(
            FieldType.STRING,
            description=(
                "UserDataBase64 contains config drive cloud-init userdata as a base64 "
                "encoded string."
            ),
            optional=True,
        ),
        "user_data": Field(
            FieldType.STRING,
            description="UserData contains config drive inline cloud-init userdata.",
            optional=True,
        ),
        "network_data_secret_ref": local_object_reference_schema(
            "NetworkDataSecretRef references a k8s secret that contains config drive "
            "networkdata."
        ),
        "network_data_base64": Field(
            FieldType.STRING,
            description=(
                "NetworkDataBase64 contains config drive cloud-init networkdata as a "
                "base64 encoded string."
            ),
            optional=True,
        ),
        "network_data": Field(
            FieldType.STRING,
            description="NetworkData contains config drive inline cloud-init networkdata.",
            optional=True,
        ),
    }


def _volumes_fields() -> dict[str, Field]:
    return {
        "name": Field(
            FieldType.STRING,
            description="Volume's name.",
            required=True,
        ),
        "volume_source": Field(
            FieldType.LIST,
            description=(
                "VolumeSource represents the location and type of the mounted volume. "
                "Defaults to Disk, if no type is specified."
            ),
            max_items=1,
            required=True,
            elem={
                "data_volume": Field(
                    FieldType.LIST,
                    description=(
                        "DataVolume represents the dynamic creation a PVC for this volume "
                        "as well as the process of populating that PVC with a disk image."
                    ),
                    max_items=1,
                    optional=True,
                    elem={
                        "name": Field(
                            FieldType.STRING,
                            description=(
                                "Name represents the name of the DataVolume in the same "
                                "namespace."
                            ),
                            required=True,
                        ),
                    },
                ),
                "cloud_init_config_drive": Field(
                    FieldType.LIST,
                    description=(
                        "CloudInitConfigDrive represents a cloud-init Config Drive "
                        "user-data source."
                    ),
                    max_items=1,
                    optional=True,
                    elem=_cloud_init_fields(),
                ),
                "service_account": Field(
                    FieldType.LIST,
                    description=(
                        "ServiceAccountVolumeSource represents a reference to a service "
                        "account."
                    ),
                    max_items=1,
                    optional=True,
                    elem={
                        "service_account_name": Field(
                            FieldType.STRING,
                            description=(
                                "Name of the service account in the pod's namespace to use."
                            ),
                            required=True,
                        ),
                    },
                ),
            },
        ),
    }


def volumes_schema():
    """Schema of the list of volumes."""
    return Field(
        FieldType.LIST,
        description=(
            "Specification of the desired behavior of the VirtualMachineInstance on the host."
        ),
        optional=True,
        elem=_volumes_fields(),
    )


# Expanders


def _first(items) -> Mapping | None:
    if not items or items[0] is None:
        return None
    return items[0]


def _list(block: Mapping, key: str):
    value = block.get(key)
    return value if isinstance(value, (list, tuple)) else None


def _string(block: Mapping, key: str) -> str | None:
    value = block.get(key)
    return value if isinstance(value, str) and value else None


def expand_volumes(items):
    """Turn volume configuration blocks into volumes."""
    items = list(items or ())
    if not items or items[0] is None:
        return [{} for _ in items]
    volumes = []
    for block in items:
        volume: dict = {}
        name = _string(block, "name")
        if name is not None:
            volume["name"] = name
        source = _list(block, "volume_source")
        if source is not None:
            volume.update(_expand_volume_source(source))
        volumes.append(volume)
    return volumes


def _expand_volume_source(items) -> dict:
    block = _first(items)
    if block is None:
        return {}
    source: dict = {}
    for key, api_key, expand in (
        ("data_volume", "dataVolume", _expand_data_volume),
        ("cloud_init_config_drive", "cloudInitConfigDrive", _expand_cloud_init_config_drive),
        ("service_account", "serviceAccount", _expand_service_account),
    ):
        value = _list(block, key)
        if value is not None:
            expanded = expand(value)
            if expanded is not None:
                source[api_key] = expanded
    return source


def _expand_data_volume(items) -> dict | None:
    block = _first(items)
    if block is None:
        return None
    data_volume: dict = {}
    name = _string(block, "name")
    if name is not None:
        data_volume["name"] = name
    return data_volume


def _expand_cloud_init_config_drive(items) -> dict | None:
    block = _first(items)
    if block is None:
        return None
    drive: dict = {}
    for key, api_key in _CLOUD_INIT_REFS:
        value = _list(block, key)
        if value is not None:
            reference = expand_local_object_references(value)
            if reference is not None:
                drive[api_key] = reference
    for key, api_key in _CLOUD_INIT_STRINGS:
        value = _string(block, key)
        if value is not None:
            drive[api_key] = value
    return drive


def _expand_service_account(items) -> dict | None:
    block = _first(items)
    if block is None:
        return None
    account: dict = {}
    name = _string(block, "service_account_name")
    if name is not None:
        account["serviceAccountName"] = name
    return account


# Flatteners

_SOURCE_KEYS = ("dataVolume", "cloudInitConfigDrive", "serviceAccount")


def flatten_volumes(volumes):
    """Turn volumes into configuration blocks."""
    return [
        {
            "name": volume.get("name", ""),
            "volume_source": _flatten_volume_source(volume),
        }
        for volume in volumes or ()
    ]


def _flatten_volume_source(volume: Mapping) -> list:
    block: dict = {}
    data_volume = volume.get("dataVolume")
    if data_volume is not None:
        block["data_volume"] = [{"name": data_volume.get("name", "")}]
    drive = volume.get("cloudInitConfigDrive")
    if drive is not None:
        block["cloud_init_config_drive"] = _flatten_cloud_init_config_drive(drive)
    account = volume.get("serviceAccount")
    if account is not None:
        block["service_account"] = [
            {"service_account_name": account.get("serviceAccountName", "")}
        ]
    return [block]


def _flatten_cloud_init_config_drive(drive: Mapping) -> list:
    block: dict = {}
    for key, api_key in _CLOUD_INIT_REFS:
        reference = drive.get(api_key)
        if reference is not None:
            block[key] = flatten_local_object_references(reference)
    for key, api_key in _CLOUD_INIT_STRINGS:
        block[key] = drive.get(api_key, "")
    return [block]