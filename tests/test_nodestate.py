import pytest

from sriovnet.group import ObjectMeta
from sriovnet.nodestate import (
    Interface,
    InterfaceExt,
    SriovNetworkNodeState,
    SriovNetworkNodeStateSpec,
    SriovNetworkNodeStateStatus,
    VfGroup,
    VirtualFunction,
)


def make_state():
    return SriovNetworkNodeState(
        metadata=ObjectMeta(name="worker-0", namespace="sriov"),
        spec=SriovNetworkNodeStateSpec(
            interfaces=[
                Interface(
                    pci_address="0000:86:00.1",
                    num_vfs=2,
                    name="ens803f1",
                    vf_groups=[
                        VfGroup(
                            resource_name="p1res",
                            device_type="netdevice",
                            vf_range="0-1",
                            policy_name="p1",
                        )
                    ],
                )
            ]
        ),
        status=SriovNetworkNodeStateStatus(
            interfaces=[
                InterfaceExt(
                    name="ens803f0",
                    driver="i40e",
                    pci_address="0000:86:00.0",
                    vendor="8086",
                    device_id="158b",
                    mtu=1500,
                    num_vfs=4,
                    total_vfs=64,
                    vfs=[VirtualFunction()],
                ),
                InterfaceExt(
                    name="ens803f1",
                    driver="i40e",
                    pci_address="0000:86:00.1",
                    vendor="8086",
                    device_id="158b",
                ),
            ],
            sync_status="Succeeded",
        ),
    )


@pytest.mark.parametrize(
    "first, second, overlapping",
    [
        ("0-1", "2-4", False),
        ("2-3", "0-1", False),
        ("0-0", "0-1", True),
        ("1-1", "0-1", True),
        ("0-4", "2-3", True),
        ("2-3", "0-4", True),
    ],
)
def test_overlap_is_symmetric(first, second, overlapping):
    a = VfGroup(vf_range=first)
    b = VfGroup(vf_range=second)
    assert a.is_vf_range_overlapping(b) is overlapping
    assert b.is_vf_range_overlapping(a) is overlapping


@pytest.mark.parametrize("bad", ["", "a-c", "3"])
def test_unparsable_range_never_overlaps(bad):
    assert VfGroup(vf_range=bad).is_vf_range_overlapping(VfGroup(vf_range="0-9")) is False
    assert VfGroup(vf_range="0-9").is_vf_range_overlapping(VfGroup(vf_range=bad)) is False


def test_merge_keeps_disjoint_groups_and_takes_maximum():
    existing = Interface(
        pci_address="0000:86:00.1",
        num_vfs=5,
        mtu=2000,
        vf_groups=[VfGroup(resource_name="vfiores", vf_range="2-4")],
    )
    incoming = Interface(
        pci_address="0000:86:00.1",
        num_vfs=2,
        vf_groups=[VfGroup(resource_name="p1res", vf_range="0-1")],
    )
    existing.merge_configs(incoming, False)
    assert [g.resource_name for g in incoming.vf_groups] == ["p1res", "vfiores"]
    assert incoming.num_vfs == existing.num_vfs
    assert incoming.mtu == existing.mtu


def test_merge_drops_overlapping_group_without_equal_priority():
    existing = Interface(
        num_vfs=3,
        mtu=2000,
        vf_groups=[VfGroup(resource_name="vfiores", vf_range="0-1")],
    )
    incoming = Interface(num_vfs=2, vf_groups=[VfGroup(resource_name="p1res", vf_range="0-1")])
    existing.merge_configs(incoming, False)
    assert incoming == Interface(
        num_vfs=2, vf_groups=[VfGroup(resource_name="p1res", vf_range="0-1")]
    )


def test_merge_with_equal_priority_takes_maximum_even_when_overlapping():
    existing = Interface(num_vfs=3, mtu=2000, vf_groups=[VfGroup(resource_name="x", vf_range="0-1")])
    incoming = Interface(num_vfs=2, vf_groups=[VfGroup(resource_name="p1res", vf_range="0-1")])
    existing.merge_configs(incoming, True)
    assert len(incoming.vf_groups) == 1
    assert (incoming.num_vfs, incoming.mtu) == (existing.num_vfs, existing.mtu)


def test_merge_does_not_touch_existing():
    existing = Interface(num_vfs=5, vf_groups=[VfGroup(resource_name="a", vf_range="2-4")])
    incoming = Interface(num_vfs=2, vf_groups=[VfGroup(resource_name="b", vf_range="0-1")])
    existing.merge_configs(incoming, True)
    assert existing == Interface(num_vfs=5, vf_groups=[VfGroup(resource_name="a", vf_range="2-4")])


def test_merge_without_incoming_group_is_rejected():
    existing = Interface(vf_groups=[VfGroup(resource_name="a", vf_range="0-1")])
    with pytest.raises(ValueError):
        existing.merge_configs(Interface(), True)


def test_interface_to_dict_omits_empty_fields():
    assert Interface(pci_address="0000:86:00.1").to_dict() == {"pciAddress": "0000:86:00.1"}
    assert Interface().to_dict() == {"pciAddress": ""}


def test_interface_to_dict_uses_wire_names():
    iface = Interface(
        pci_address="0000:86:00.1",
        num_vfs=2,
        name="ens803f1",
        eswitch_mode="switchdev",
        vf_groups=[VfGroup(resource_name="p1res", vf_range="0-1", is_rdma=True)],
    )
    assert iface.to_dict() == {
        "pciAddress": "0000:86:00.1",
        "numVfs": 2,
        "name": "ens803f1",
        "eSwitchMode": "switchdev",
        "vfGroups": [{"resourceName": "p1res", "vfRange": "0-1", "isRdma": True}],
    }


def test_state_to_dict_header_and_required_vf_fields():
    data = make_state().to_dict()
    assert data["apiVersion"] == "sriovnetwork.openshift.io/v1"
    assert data["kind"] == "SriovNetworkNodeState"
    assert data["metadata"] == {"name": "worker-0", "namespace": "sriov"}
    first = data["status"]["interfaces"][0]
    assert first["Vfs"] == [{"pciAddress": "", "vfID": 0}]
    assert first["totalvfs"] == 64
    assert first["deviceID"] == "158b"


def test_state_round_trip():
    state = make_state()
    assert SriovNetworkNodeState.from_dict(state.to_dict()) == state


def test_empty_state_round_trip():
    state = SriovNetworkNodeState()
    assert SriovNetworkNodeState.from_dict(state.to_dict()) == state


def test_interface_state_by_pci_address():
    state = make_state()
    found = state.interface_state_by_pci_address("0000:86:00.1")
    assert found is not None and found.name == "ens803f1"
    assert state.interface_state_by_pci_address("0000:00:00.0") is None


def test_driver_by_pci_address():
    state = make_state()
    assert state.driver_by_pci_address("0000:86:00.0") == "i40e"
    assert state.driver_by_pci_address("0000:00:00.0") == ""