"""Parsing of VF index ranges, PF name partitions and network filters."""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable

log = logging.getLogger("sriovnetwork")

INVALID_VF_INDEX = -1

_NUMBER = re.compile(r"\+?[0-9]+")
_NET_FILTER = re.compile(r"^\s*([^\s]+)\s*:\s*([^\s]+)", re.MULTILINE)


class InvalidRangeError(ValueError):
    """Raised when a VF range such as ``"0-3"`` cannot be parsed."""


class NetFilterType(enum.IntEnum):
    """Tags that a network filter may carry."""

    OPENSTACK_NETWORK_ID = 0

    def __str__(self) -> str:
        if self is NetFilterType.OPENSTACK_NETWORK_ID:
            return "openstack/NetworkID"
        return str(int(self))


def _parse_int(text: str, whole: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise InvalidRangeError(f"invalid number {text!r} in range {whole!r}")
    return int(text)


def parse_range(text: str) -> tuple[int, int]:
    """Parse ``"start-end"`` into a pair of integers."""
    parts = text.split("-")
    if len(parts) < 2:
        _parse_int(parts[0], text)
        raise InvalidRangeError(f"range {text!r} has no end")
    return _parse_int(parts[0], text), _parse_int(parts[1], text)


def index_in_range(index: int, text: str) -> bool:
    """Tell whether ``index`` lies within the inclusive range ``text``."""
    try:
        start, end = parse_range(text)
    except InvalidRangeError:
        return False
    return start <= index <= end


def parse_pf_name(name: str) -> tuple[str, int, int]:
    """Split ``"ifname#start-end"`` into its name and VF range.

    Without a ``#`` the range is reported as ``INVALID_VF_INDEX`` on both ends.
    """
    if "#" not in name:
        return name, INVALID_VF_INDEX, INVALID_VF_INDEX
    fields = name.split("#")
    start, end = parse_range(fields[1])
    return fields[0], start, end


def net_filter_match(net_filter: str, net_value: str) -> bool:
    """Tell whether the first ``key:value`` pair of both strings agree."""
    wanted = _NET_FILTER.search(net_filter)
    if wanted is None:
        log.info("Invalid NetFilter spec... netFilter=%s", net_filter)
        return False
    actual = _NET_FILTER.search(net_value)
    if actual is None:
        log.info("Invalid netValue... netValue=%s", net_value)
        return False
    return wanted.groups() == actual.groups()


def remove_string(value: str, items: Iterable[str]) -> tuple[list[str], bool]:
    """Return ``items`` without ``value`` and whether it was present."""
    result = [item for item in items if item != value]
    items_list = list(items) if not isinstance(items, list) else items
    return result, len(result) != len(items_list)


def unique_append(items: Iterable[str], *args: str) -> list[str]:
    """Return ``items`` extended by those of ``args`` not yet present."""
    result = list(items)
    for value in args:
        if value not in result:
            result.append(value)
    return result