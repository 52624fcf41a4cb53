"""Desired and observed SR-IOV configuration of a single node."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any

from .group import GROUP_VERSION, ObjectMeta
from .ranges import InvalidRangeError, index_in_range, parse_range

KIND = "SriovNetworkNodeState"


def _attr(json_key, *, default=None, factory=None, keep=False, item=None, nested=None):
    """Declare a field together with its serialized key.

    ``keep`` marks fields written even when empty; ``item`` and ``nested``
    name the dataclass of list elements or of a nested object.
    """
    meta = {"json": json_key, "keep": keep or nested is not None, "item": item, "nested": nested}
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _encode(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if is_dataclass(value):
            value = _encode(value)
        elif isinstance(value, list):
            value = [_encode(v) if is_dataclass(v) else v for v in value]
        if not f.metadata["keep"] and not value:
            continue
        out[f.metadata["json"]] = value
    return out


def _decode(cls: type, data: dict[str, Any]) -> Any:
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        key = f.metadata["json"]
        if key not in data:
            continue
        value = data[key]
        if f.metadata["nested"] is not None:
            value = _decode(f.metadata["nested"], value or {})
        elif f.metadata["item"] is not None:
            value = [_decode(f.metadata["item"], v) for v in value or []]
        elif isinstance(value, list):
            value = list(value)
        kwargs[f.name] = value
    return cls(**kwargs)


_META_KEYS = (
    ("name", "name"),
    ("namespace", "namespace"),
    ("generate_name", "generateName"),
    ("labels", "labels"),
    ("annotations", "annotations"),
    ("finalizers", "finalizers"),
)


def _encode_meta(meta: ObjectMeta) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for attr, key in _META_KEYS:
        value = getattr(meta, attr)
        if value:
            out[key] = value.copy() if isinstance(value, (dict, list)) else value
    return out


def _decode_meta(data: dict[str, Any]) -> ObjectMeta:
    kwargs = {}
    for attr, key in _META_KEYS:
        if key in data:
            value = data[key]
            kwargs[attr] = value.copy() if isinstance(value, (dict, list)) else value
    return ObjectMeta(**kwargs)


@dataclass
class VfGroup:
    """A range of VFs on a PF handed to one device plugin resource."""

    resource_name: str = _attr("resourceName", default="")
    device_type: str = _attr("deviceType", default="")
    vf_range: str = _attr("vfRange", default="")
    policy_name: str = _attr("policyName", default="")
    mtu: int = _attr("mtu", default=0)
    is_rdma: bool = _attr("isRdma", default=False)

    def is_vf_range_overlapping(self, other: VfGroup) -> bool:
        """Tell whether the VF ranges of both groups share an index.

        A range that cannot be parsed never overlaps.
        """
        try:
            start, end = parse_range(self.vf_range)
            other_start, other_end = parse_range(other.vf_range)
        except InvalidRangeError:
            return False
        if start < other_start:
            return index_in_range(other_start, self.vf_range) or index_in_range(
                other_end, self.vf_range
            )
        return index_in_range(start, other.vf_range) or index_in_range(end, other.vf_range)


@dataclass
class Interface:
    """Desired configuration of one physical function."""

    pci_address: str = _attr("pciAddress", default="", keep=True)
    num_vfs: int = _attr("numVfs", default=0)
    mtu: int = _attr("mtu", default=0)
    name: str = _attr("name", default="")
    link_type: str = _attr("linkType", default="")
    eswitch_mode: str = _attr("eSwitchMode", default="")
    vf_groups: list[VfGroup] = _attr("vfGroups", factory=list, item=VfGroup)

    def merge_configs(self, incoming: Interface, equal_priority: bool) -> None:
        """Merge this interface's settings into ``incoming``, which wins.

        Groups of this interface are kept when they share neither the
        resource name nor any VF with the first group of ``incoming``. MTU
        and VF count take the larger value when priorities are equal or a
        group was kept.
        """
        if self.vf_groups and not incoming.vf_groups:
            raise ValueError("incoming interface has no VF group to merge against")
        merged = False
        for group in self.vf_groups:
            head = incoming.vf_groups[0]
            if group.resource_name == head.resource_name or group.is_vf_range_overlapping(head):
                continue
            merged = True
            incoming.vf_groups.append(dataclasses.replace(group))

        if not equal_priority and not merged:
            return
        incoming.mtu = max(incoming.mtu, self.mtu)
        incoming.num_vfs = max(incoming.num_vfs, self.num_vfs)

    def to_dict(self) -> dict[str, Any]:
        """Return the serialized form, leaving out empty optional fields."""
        return _encode(self)


@dataclass
class VirtualFunction:
    """Observed state of one virtual function."""

    name: str = _attr("name", default="")
    mac: str = _attr("mac", default="")
    assigned: str = _attr("assigned", default="")
    driver: str = _attr("driver", default="")
    pci_address: str = _attr("pciAddress", default="", keep=True)
    vendor: str = _attr("vendor", default="")
    device_id: str = _attr("deviceID", default="")
    vlan: int = _attr("Vlan", default=0)
    mtu: int = _attr("mtu", default=0)
    vf_id: int = _attr("vfID", default=0, keep=True)


@dataclass
class InterfaceExt:
    """Observed state of one physical function."""

    name: str = _attr("name", default="")
    mac: str = _attr("mac", default="")
    driver: str = _attr("driver", default="")
    pci_address: str = _attr("pciAddress", default="", keep=True)
    vendor: str = _attr("vendor", default="")
    device_id: str = _attr("deviceID", default="")
    net_filter: str = _attr("netFilter", default="")
    mtu: int = _attr("mtu", default=0)
    num_vfs: int = _attr("numVfs", default=0)
    link_speed: str = _attr("linkSpeed", default="")
    link_type: str = _attr("linkType", default="")
    eswitch_mode: str = _attr("eSwitchMode", default="")
    total_vfs: int = _attr("totalvfs", default=0)
    vfs: list[VirtualFunction] = _attr("Vfs", factory=list, item=VirtualFunction)


@dataclass
class SriovNetworkNodeStateSpec:
    """The configuration wanted on a node."""

    dp_config_version: str = _attr("dpConfigVersion", default="")
    interfaces: list[Interface] = _attr("interfaces", factory=list, item=Interface)


@dataclass
class SriovNetworkNodeStateStatus:
    """What was last observed on a node."""

    interfaces: list[InterfaceExt] = _attr("interfaces", factory=list, item=InterfaceExt)
    sync_status: str = _attr("syncStatus", default="")
    last_sync_error: str = _attr("lastSyncError", default="")


@dataclass
class SriovNetworkNodeState:
    """Desired and observed SR-IOV state of a node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SriovNetworkNodeStateSpec = field(default_factory=SriovNetworkNodeStateSpec)
    status: SriovNetworkNodeStateStatus = field(default_factory=SriovNetworkNodeStateStatus)

    def interface_state_by_pci_address(self, address: str) -> InterfaceExt | None:
        """Return the observed interface at ``address``, if any."""
        return next((i for i in self.status.interfaces if i.pci_address == address), None)

    def driver_by_pci_address(self, address: str) -> str:
        """Return the driver of the interface at ``address``, or ``""``."""
        iface = self.interface_state_by_pci_address(address)
        return iface.driver if iface is not None else ""

    def to_dict(self) -> dict[str, Any]:
        """Return the serialized resource."""
        return {
            "apiVersion": GROUP_VERSION.api_version,
            "kind": KIND,
            "metadata": _encode_meta(self.metadata),
            "spec": _encode(self.spec),
            "status": _encode(self.status),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SriovNetworkNodeState:
        """Build a node state from its serialized form."""
        return cls(
            metadata=_decode_meta(data.get("metadata") or {}),
            spec=_decode(SriovNetworkNodeStateSpec, data.get("spec") or {}),
            status=_decode(SriovNetworkNodeStateStatus, data.get("status") or {}),
        )