"""Registry of supported NIC vendor, PF and VF device identifiers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

log = logging.getLogger("sriovnetwork")

SUPPORTED_NIC_ID_CONFIGMAP = "supported-nic-ids"


def _is_hex(text: str) -> bool:
    try:
        int(text, 16)
    except ValueError:
        return False
    return True


def is_valid_pci_string(nic_id: str) -> bool:
    """Check that ``nic_id`` is three space-separated four-character ids.

    Ids that are not hexadecimal are only logged, not rejected.
    """
    ids = nic_id.split(" ")
    if len(ids) != 3:
        log.info("IsValidPciString(): %s", nic_id)
        return False
    for label, value in zip(("vendor PciId", "PciId of PF", "PciId of VF"), ids):
        if len(value) != 4:
            log.info("IsValidPciString(): Invalid %s %s", label, value)
            return False
        if not _is_hex(value):
            log.info("IsValidPciString(): Invalid %s %s", label, value)
    return True


def is_enabled_unsupported_vendor(
    vendor_id: str, unsupported_nic_ids: Mapping[str, str]
) -> bool:
    """Tell whether a vendor is enabled by a valid entry of ``unsupported_nic_ids``."""
    return any(
        is_valid_pci_string(entry) and entry.split(" ")[0] == vendor_id
        for entry in unsupported_nic_ids.values()
    )


def _vf_sort_key(vf_id: str) -> int:
    try:
        return int(vf_id, 0)
    except ValueError:
        return 0


class NicIdRegistry:
    """The supported NIC models, each as ``(vendor, pf device, vf device)``."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: list[tuple[str, ...]] = []
        for entry in entries:
            self._add(entry)

    def _add(self, entry: str) -> None:
        ids = tuple(entry.split(" "))
        if len(ids) < 3:
            raise ValueError(f"NIC id entry {entry!r} needs vendor, PF and VF ids")
        self._entries.append(ids)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (" ".join(ids) for ids in self._entries)

    def load(self, data: Mapping[str, str]) -> None:
        """Add every value of a config map's data to the registry."""
        for entry in data.values():
            self._add(entry)

    def is_supported_vendor(self, vendor_id: str) -> bool:
        return any(ids[0] == vendor_id for ids in self._entries)

    def is_supported_device(self, device_id: str) -> bool:
        return any(ids[1] == device_id for ids in self._entries)

    def is_supported_model(self, vendor_id: str, device_id: str) -> bool:
        if any(ids[0] == vendor_id and ids[1] == device_id for ids in self._entries):
            return True
        log.info(
            "IsSupportedModel(): Unsupported model: vendorId: %s deviceId: %s",
            vendor_id,
            device_id,
        )
        return False

    def is_vf_supported_model(self, vendor_id: str, device_id: str) -> bool:
        if any(ids[0] == vendor_id and ids[2] == device_id for ids in self._entries):
            return True
        log.info(
            "IsVfSupportedModel(): Unsupported VF model: vendorId: %s deviceId: %s",
            vendor_id,
            device_id,
        )
        return False

    def supported_vf_ids(self) -> list[str]:
        """Return the distinct VF ids as ``0x``-prefixed strings in numeric order."""
        unique = list(dict.fromkeys("0x" + ids[2] for ids in self._entries))
        return sorted(unique, key=_vf_sort_key)

    def vf_device_id(self, device_id: str) -> str | None:
        """Return the VF device id belonging to a PF device id, if known."""
        return next((ids[2] for ids in self._entries if ids[1] == device_id), None)