"""Node policies that select NICs and configure their virtual functions."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from .group import ObjectMeta
from .nodestate import Interface, InterfaceExt, SriovNetworkNodeState, VfGroup
from .ranges import INVALID_VF_INDEX, InvalidRangeError, net_filter_match, parse_pf_name

log = logging.getLogger("sriovnetwork")


@dataclass
class SriovNetworkNicSelector:
    """Criteria that pick the physical functions a policy configures."""

    vendor: str = ""
    device_id: str = ""
    root_devices: list[str] = field(default_factory=list)
    pf_names: list[str] = field(default_factory=list)
    net_filter: str = ""

    def is_empty(self) -> bool:
        """An empty selector matches no interface at all."""
        return not (
            self.vendor or self.device_id or self.root_devices or self.pf_names or self.net_filter
        )

    def selects(self, iface: InterfaceExt) -> bool:
        """Tell whether every criterion that is set matches ``iface``."""
        if self.vendor and self.vendor != iface.vendor:
            return False
        if self.device_id and self.device_id != iface.device_id:
            return False
        if self.root_devices and iface.pci_address not in self.root_devices:
            return False
        if self.pf_names:
            names = [name.split("#")[0] for name in self.pf_names]
            if iface.name not in names:
                return False
        if self.net_filter and not net_filter_match(self.net_filter, iface.net_filter):
            return False
        return True


@dataclass
class SriovNetworkNodePolicySpec:
    """What a policy configures and on which nodes."""

    resource_name: str = ""
    node_selector: dict[str, str] = field(default_factory=dict)
    priority: int = 0
    mtu: int = 0
    num_vfs: int = 0
    nic_selector: SriovNetworkNicSelector = field(default_factory=SriovNetworkNicSelector)
    device_type: str = ""
    is_rdma: bool = False
    need_vhost_net: bool = False
    link_type: str = ""
    eswitch_mode: str = ""


@dataclass
class SriovNetworkNodePolicy:
    """A policy applied to the node states of the nodes it selects."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SriovNetworkNodePolicySpec = field(default_factory=SriovNetworkNodePolicySpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    def selects_node(self, labels: Mapping[str, str]) -> bool:
        """Tell whether a node with ``labels`` satisfies the node selector."""
        if all(labels.get(key) == value for key, value in self.spec.node_selector.items()):
            log.info("Selected(): policy %s", self.name)
            return True
        return False

    def generate_vf_group(self, iface: InterfaceExt) -> VfGroup:
        """Build the VF group this policy asks for on ``iface``.

        Raises InvalidRangeError when a PF name carries a malformed range.
        """
        start, end = 0, self.spec.num_vfs - 1
        for selector in self.spec.nic_selector.pf_names:
            try:
                pf_name, rng_start, rng_end = parse_pf_name(selector)
            except InvalidRangeError:
                log.error("Unable to parse PF Name: %s", selector)
                raise
            if pf_name == iface.name:
                if not (rng_start == INVALID_VF_INDEX and rng_end == INVALID_VF_INDEX):
                    start, end = rng_start, rng_end
                break
        return VfGroup(
            resource_name=self.spec.resource_name,
            device_type=self.spec.device_type,
            vf_range=f"{start}-{end}",
            policy_name=self.name,
            mtu=self.spec.mtu,
            is_rdma=self.spec.is_rdma,
        )

    def apply(self, state: SriovNetworkNodeState, equal_priority: bool) -> None:
        """Write this policy's configuration into ``state.spec``.

        An interface already configured is replaced by the merge of its old
        settings into the new ones.
        """
        selector = self.spec.nic_selector
        if selector.is_empty():
            return
        for iface in state.status.interfaces:
            if not selector.selects(iface):
                continue
            log.info("Update interface name: %s", iface.name)
            result = Interface(
                pci_address=iface.pci_address,
                mtu=self.spec.mtu,
                name=iface.name,
                link_type=self.spec.link_type,
                eswitch_mode=self.spec.eswitch_mode,
                num_vfs=self.spec.num_vfs,
            )
            if self.spec.num_vfs <= 0:
                continue
            result.vf_groups = [self.generate_vf_group(iface)]
            interfaces = state.spec.interfaces
            for position, existing in enumerate(interfaces):
                if existing.pci_address == result.pci_address:
                    existing.merge_configs(result, equal_priority)
                    interfaces[position] = result
                    break
            else:
                interfaces.append(result)


def sort_by_priority(policies: Iterable[SriovNetworkNodePolicy]) -> list[SriovNetworkNodePolicy]:
    """Order policies by descending priority, then by name."""
    return sorted(policies, key=lambda p: (-p.spec.priority, p.name))