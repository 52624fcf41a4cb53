"""Network, pool and operator configuration resources."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

from .group import ObjectMeta

log = logging.getLogger("sriovnetwork")

LAST_NETWORK_NAMESPACE = "operator.sriovnetwork.openshift.io/last-network-namespace"
NETATTDEF_FINALIZER_NAME = "netattdef.finalizers.sriovnetwork.openshift.io"
POOLCONFIG_FINALIZER_NAME = "poolconfig.finalizers.sriovnetwork.openshift.io"
ESWITCH_MODE_LEGACY = "legacy"
ESWITCH_MODE_SWITCHDEV = "switchdev"

SRIOV_CNI_STATE_ENABLE = "enable"
SRIOV_CNI_STATE_DISABLE = "disable"
SRIOV_CNI_STATE_AUTO = "auto"
SRIOV_CNI_STATE_OFF = "off"
SRIOV_CNI_STATE_ON = "on"
SRIOV_CNI_IPAM_EMPTY = '"ipam":{}'

_LINK_STATES = frozenset(
    {SRIOV_CNI_STATE_ENABLE, SRIOV_CNI_STATE_DISABLE, SRIOV_CNI_STATE_AUTO}
)
_ON_OFF = frozenset({SRIOV_CNI_STATE_ON, SRIOV_CNI_STATE_OFF})


def _prefix(resource_prefix: str | None) -> str:
    if resource_prefix is None:
        return os.environ.get("RESOURCE_PREFIX", "")
    return resource_prefix


def _ipam(ipam: str) -> str:
    if not ipam:
        return SRIOV_CNI_IPAM_EMPTY
    return '"ipam":' + "".join(ipam.split())


def _switch(data: dict[str, Any], flag: str, key: str, value: str, allowed: frozenset) -> None:
    if value in allowed:
        data[flag] = True
        data[key] = value
    else:
        data[flag] = False


def _common(
    data: dict[str, Any],
    capabilities: str,
    ipam: str,
    meta_plugins: str,
) -> None:
    if capabilities:
        data["CapabilitiesConfigured"] = True
        data["SriovCniCapabilities"] = capabilities
    else:
        data["CapabilitiesConfigured"] = False
    data["SriovCniIpam"] = _ipam(ipam)
    data["MetaPluginsConfigured"] = bool(meta_plugins)
    if meta_plugins:
        data["MetaPlugins"] = meta_plugins


@dataclass
class SriovNetworkSpec:
    """Desired state of an SR-IOV network attachment."""

    resource_name: str = ""
    network_namespace: str = ""
    capabilities: str = ""
    ipam: str = ""
    vlan: int = 0
    vlan_qos: int = 0
    spoof_chk: str = ""
    trust: str = ""
    link_state: str = ""
    min_tx_rate: int | None = None
    max_tx_rate: int | None = None
    meta_plugins_config: str = ""


@dataclass
class SriovNetwork:
    """An SR-IOV network from which a network attachment definition is rendered."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SriovNetworkSpec = field(default_factory=SriovNetworkSpec)

    def target_namespace(self) -> str:
        """Namespace of the generated attachment definition."""
        return self.spec.network_namespace or self.metadata.namespace

    def render_data(self, resource_prefix: str | None = None) -> dict[str, Any]:
        """Return the values the sriov CNI config template is rendered with.

        Without ``resource_prefix`` the RESOURCE_PREFIX environment variable is used.
        """
        log.info("Start to render SRIOV CNI NetworkAttachementDefinition")
        spec = self.spec
        data: dict[str, Any] = {
            "CniType": "sriov",
            "SriovNetworkName": self.metadata.name,
            "SriovNetworkNamespace": self.target_namespace(),
            "SriovCniResourceName": f"{_prefix(resource_prefix)}/{spec.resource_name}",
            "SriovCniVlan": spec.vlan,
        }
        if 0 <= spec.vlan_qos <= 7:
            data["VlanQoSConfigured"] = True
            data["SriovCniVlanQoS"] = spec.vlan_qos
        else:
            data["VlanQoSConfigured"] = False

        if spec.capabilities:
            data["CapabilitiesConfigured"] = True
            data["SriovCniCapabilities"] = spec.capabilities
        else:
            data["CapabilitiesConfigured"] = False

        _switch(data, "SpoofChkConfigured", "SriovCniSpoofChk", spec.spoof_chk, _ON_OFF)
        _switch(data, "TrustConfigured", "SriovCniTrust", spec.trust, _ON_OFF)
        _switch(data, "StateConfigured", "SriovCniState", spec.link_state, _LINK_STATES)

        for flag, key, rate in (
            ("MinTxRateConfigured", "SriovCniMinTxRate", spec.min_tx_rate),
            ("MaxTxRateConfigured", "SriovCniMaxTxRate", spec.max_tx_rate),
        ):
            data[flag] = rate is not None and rate >= 0
            if data[flag]:
                data[key] = rate

        data["SriovCniIpam"] = _ipam(spec.ipam)
        data["MetaPluginsConfigured"] = bool(spec.meta_plugins_config)
        if spec.meta_plugins_config:
            data["MetaPlugins"] = spec.meta_plugins_config
        return data


@dataclass
class SriovIBNetworkSpec:
    """Desired state of an InfiniBand SR-IOV network attachment."""

    resource_name: str = ""
    network_namespace: str = ""
    capabilities: str = ""
    ipam: str = ""
    link_state: str = ""
    meta_plugins_config: str = ""


@dataclass
class SriovIBNetwork:
    """An InfiniBand SR-IOV network rendered for the ib-sriov CNI."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SriovIBNetworkSpec = field(default_factory=SriovIBNetworkSpec)

    def target_namespace(self) -> str:
        """Namespace of the generated attachment definition."""
        return self.spec.network_namespace or self.metadata.namespace

    def render_data(self, resource_prefix: str | None = None) -> dict[str, Any]:
        """Return the values the ib-sriov CNI config template is rendered with.

        Without ``resource_prefix`` the RESOURCE_PREFIX environment variable is used.
        """
        log.info("Start to render IB SRIOV CNI NetworkAttachementDefinition")
        spec = self.spec
        data: dict[str, Any] = {
            "CniType": "ib-sriov",
            "SriovNetworkName": self.metadata.name,
            "SriovNetworkNamespace": self.target_namespace(),
            "SriovCniResourceName": f"{_prefix(resource_prefix)}/{spec.resource_name}",
        }
        _switch(data, "StateConfigured", "SriovCniState", spec.link_state, _LINK_STATES)
        _common(data, spec.capabilities, spec.ipam, spec.meta_plugins_config)
        return data


@dataclass
class OvsHardwareOffloadConfig:
    """Names the node pool to enable OVS hardware offload on."""

    name: str = ""


@dataclass
class SriovNetworkPoolConfig:
    """Configuration shared by a pool of nodes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    ovs_hardware_offload_config: OvsHardwareOffloadConfig = field(
        default_factory=OvsHardwareOffloadConfig
    )


@dataclass
class SriovOperatorConfigSpec:
    """Operator-wide settings."""

    config_daemon_node_selector: dict[str, str] = field(default_factory=dict)
    enable_injector: bool | None = None
    enable_operator_webhook: bool | None = None
    log_level: int = 0
    disable_drain: bool = False
    enable_ovs_offload: bool = False


@dataclass
class SriovOperatorConfigStatus:
    """Runtime status of the operator's webhooks."""

    injector: str = ""
    operator_webhook: str = ""


@dataclass
class SriovOperatorConfig:
    """The operator's configuration resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: SriovOperatorConfigSpec = field(default_factory=SriovOperatorConfigSpec)
    status: SriovOperatorConfigStatus = field(default_factory=SriovOperatorConfigStatus)