# kvschema

`kvschema` describes the configuration shape of KubeVirt virtual machines. It
also converts between that shape and the API object model.

Configuration data is made of nested lists and dicts. A single block is
written as a one-element list. API objects are plain dicts with the camelCase
keys of the Kubernetes and KubeVirt APIs, for example
`{"metadata": {...}, "spec": {"runStrategy": "Always"}}`.

- **expand** functions turn configuration blocks into API objects.
- **flatten** functions turn API objects back into configuration blocks.
- **schema** functions return `Field` descriptions. A `Field` holds a type, a
  description, whether it is required or optional, item limits and a
  validator. `Field.validate(value)` checks a value against the description
  and returns it unchanged. It raises `ValueError` when the value does not
  conform.

The package depends only on the standard library.

## Installation

```
pip install kvschema
```

To run the tests, install the `test` extra and run pytest:

```
pip install "kvschema[test]"
pytest
```

## Layout

| Module | Contents |
| --- | --- |
| `kvschema.schema` | `Field`, `FieldType`, `ExpandError`, and the validators `string_in_slice`, `string_match` and `is_ip_address` |
| `kvschema.quantity` | `parse_quantity`, `expand_resource_list`, `flatten_resource_list` |
| `kvschema.k8s.metadata` | `metadata_schema`, `namespaced_metadata_schema`, `expand_metadata`, `flatten_metadata`, `build_id`, `is_internal_key`, `remove_internal_keys` |
| `kvschema.k8s.affinity` | `affinity_schema`, `expand_affinity`, `flatten_affinity` |
| `kvschema.k8s.toleration` | `toleration_schema`, `expand_tolerations`, `flatten_tolerations` |
| `kvschema.k8s.pod_dns_config` | `pod_dns_config_schema`, `expand_pod_dns_config`, `flatten_pod_dns_config` |
| `kvschema.k8s.label_selector` | `label_selector_fields`, `expand_label_selector`, `flatten_label_selector` |
| `kvschema.k8s.local_object_reference` | `local_object_reference_schema`, `expand_local_object_references`, `flatten_local_object_references` |
| `kvschema.virtualmachineinstance.domain_spec` | resources, disks, interfaces, features (SMM) and firmware (EFI) |
| `kvschema.virtualmachineinstance.networks` | pod and multus networks |
| `kvschema.virtualmachineinstance.volumes` | data volume, cloud-init config drive and service account volumes |
| `kvschema.virtualmachineinstance.probe` | probe blocks |
| `kvschema.virtualmachineinstance.spec` | the instance specification |
| `kvschema.virtualmachineinstance.template_spec` | the instance template |
| `kvschema.virtualmachine.conditions` | status conditions |
| `kvschema.virtualmachine.state_change_requests` | state change requests |
| `kvschema.virtualmachine.status` | the status block |
| `kvschema.virtualmachine.spec` | run strategy and template |
| `kvschema.virtualmachine.virtual_machine` | `virtual_machine_fields`, `expand_virtual_machine`, `flatten_virtual_machine` |

## Example

```python
from kvschema.virtualmachine.virtual_machine import (
    expand_virtual_machine,
    flatten_virtual_machine,
)

config = [{
    "metadata": [{"name": "test-vm", "namespace": "default"}],
    "spec": [{"run_strategy": "Always"}],
}]

vm = expand_virtual_machine(config)
# {"metadata": {"name": "test-vm", "namespace": "default"},
#  "spec": {"runStrategy": "Always"}}

data = flatten_virtual_machine(vm)
```

## Sets and ordering

When a block is flattened, set-valued attributes become `frozenset`s. These
include label selector and node selector values and affinity namespaces. When
a block is expanded, the same values become sorted lists.

## Errors

The expand functions raise `kvschema.schema.ExpandError`, a subclass of
`ValueError`, when the input cannot be converted. For example:

- a resource quantity that does not parse:
  `quantities must match the regular expression '^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$'`
- a `toleration_seconds` that is not an integer:
  `invalid toleration_seconds must be int or "", got "a5"`

## Fields added by the cluster

`flatten_tolerations` drops tolerations whose key contains
`node.kubernetes.io/`.

`is_internal_key` reports whether an annotation or label key belongs to the
cluster, such as keys under a `kubernetes.io` host. `remove_internal_keys`
drops those keys from a mapping unless they were declared. `flatten_metadata`
does not apply these filters itself.

## What it does not do

- It does not talk to a cluster. It does not create, read, update or patch
  resources.
- The virtual machine spec covers `run_strategy` and `template` only. Data
  volume templates are not supported.
- Probe blocks carry no settings. An expanded probe is an empty dict.