# sriovnet

A pure-Python model of SR-IOV network resources. It describes which NICs a node
policy selects, how a policy carves a physical function's virtual functions into
groups, how overlapping policies are merged into a node's desired state, and
which values a network definition hands to a CNI configuration template.

## Install

```
pip install .
pip install ".[test]"   # with pytest, to run the test suite
```

## Applying a node policy

```python
from sriovnet.group import ObjectMeta
from sriovnet.nodestate import (
    InterfaceExt,
    SriovNetworkNodeState,
    SriovNetworkNodeStateStatus,
)
from sriovnet.policy import (
    SriovNetworkNicSelector,
    SriovNetworkNodePolicy,
    SriovNetworkNodePolicySpec,
    sort_by_priority,
)

state = SriovNetworkNodeState(
    status=SriovNetworkNodeStateStatus(
        interfaces=[
            InterfaceExt(name="ens803f1", pci_address="0000:86:00.1",
                         vendor="8086", device_id="158b"),
        ]
    )
)

policy = SriovNetworkNodePolicy(
    metadata=ObjectMeta(name="p1"),
    spec=SriovNetworkNodePolicySpec(
        resource_name="p1res",
        num_vfs=2,
        device_type="netdevice",
        nic_selector=SriovNetworkNicSelector(pf_names=["ens803f1#0-1"]),
    ),
)

for p in sort_by_priority([policy]):
    p.apply(state, equal_priority=False)

print(state.to_dict()["spec"]["interfaces"])
```

`sort_by_priority` orders policies by descending priority, then by name.
`SriovNetworkNicSelector.selects` checks vendor, device id, root devices
(PCI addresses), PF names and a network filter; a selector with nothing set
(`is_empty()`) makes `apply` do nothing. `SriovNetworkNodePolicy.selects_node`
checks a node's labels against the policy's node selector.

A PF name written as `name#start-end` limits a policy to that VF range; without
it the group covers `0` to `num_vfs - 1`. When an interface is already in the
desired state, `Interface.merge_configs` keeps the earlier VF groups that share
neither the resource name nor any VF index with the new group. When priorities
are equal, or an earlier group was kept, the larger MTU and VF count win. A
malformed range such as `ens803f0#a-c` raises
`sriovnet.ranges.InvalidRangeError`.

`SriovNetworkNodeState` converts to and from its serialized dictionary with
`to_dict()` and `SriovNetworkNodeState.from_dict(data)`; empty optional fields
are left out. `interface_state_by_pci_address` and `driver_by_pci_address` look
up observed interfaces.

## Helpers

- `sriovnet.ranges`: `parse_range`, `index_in_range`, `parse_pf_name`,
  `net_filter_match` (compares the first `key:value` pair, as in
  `openstack/NetworkID:<uuid>`), `remove_string`, `unique_append`, and the
  `NetFilterType` enum.
- `sriovnet.nicids`: `NicIdRegistry` holds `"vendor pf-device vf-device"`
  entries, loaded from the constructor or from a mapping with `load(data)`. It
  answers `is_supported_vendor`, `is_supported_device`, `is_supported_model`,
  `is_vf_supported_model`, `supported_vf_ids()` (distinct `0x`-prefixed VF ids
  in numeric order) and `vf_device_id(device_id)` (or `None`).
  `is_valid_pci_string` checks the format of one entry, and
  `is_enabled_unsupported_vendor` looks a vendor up in a mapping of such entries.
- `sriovnet.group`: `GROUP_VERSION` for `sriovnetwork.openshift.io/v1`,
  `resource()` and `kind()` returning group-qualified `GroupResource` and
  `GroupKind`, and the `ObjectMeta` metadata class.

## CNI render data

`SriovNetwork.render_data(resource_prefix)` and
`SriovIBNetwork.render_data(resource_prefix)` return the dictionary a CNI
configuration template is filled from: the CNI type, network name and target
namespace, the resource name prefixed by `resource_prefix` (or by the
`RESOURCE_PREFIX` environment variable when none is given), and the VLAN,
VLAN QoS, spoof check, trust, link state, rate limit, capabilities, IPAM and
meta-plugin settings, each with a flag that says whether it is configured.
`target_namespace()` gives the network namespace, falling back to the object's
own namespace.

`sriovnet.networks` also holds the `SriovNetworkPoolConfig` and
`SriovOperatorConfig` resource classes.

## What it does not do

The package is a data model only. It does not talk to a cluster, does not
render templates into network attachment definitions, does not create or
delete them, and has no daemon, webhook or command-line program.