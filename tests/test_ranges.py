import pytest

from sriovnet.ranges import (
    INVALID_VF_INDEX,
    InvalidRangeError,
    NetFilterType,
    index_in_range,
    net_filter_match,
    parse_pf_name,
    parse_range,
    remove_string,
    unique_append,
)


@pytest.mark.parametrize("start,end", [(0, 1), (2, 4), (0, 0), (10, 63)])
def test_parse_range_round_trip(start, end):
    assert parse_range(f"{start}-{end}") == (start, end)


@pytest.mark.parametrize("text", ["a-c", "1-b", "", "5", "1-", "-3"])
def test_parse_range_rejects_bad_input(text):
    with pytest.raises(InvalidRangeError):
        parse_range(text)


def test_invalid_range_error_is_value_error():
    with pytest.raises(ValueError):
        parse_range("x-y")


@pytest.mark.parametrize("index", [2, 3, 4])
def test_index_in_range_inside(index):
    assert index_in_range(index, "2-4") is True


@pytest.mark.parametrize("index", [1, 5])
def test_index_in_range_outside(index):
    assert index_in_range(index, "2-4") is False


def test_index_in_range_bad_range_is_false():
    assert index_in_range(0, "a-c") is False


def test_parse_pf_name_without_partition():
    assert parse_pf_name("ens803f1") == ("ens803f1", INVALID_VF_INDEX, INVALID_VF_INDEX)
    assert INVALID_VF_INDEX == -1


def test_parse_pf_name_with_partition():
    assert parse_pf_name("ens803f1#2-4") == ("ens803f1", 2, 4)


def test_parse_pf_name_bad_partition():
    with pytest.raises(InvalidRangeError):
        parse_pf_name("ens803f0#a-c")


def test_net_filter_type_string():
    member = NetFilterType(0)
    assert member is NetFilterType.OPENSTACK_NETWORK_ID
    assert str(member) == "openstack/NetworkID"


def test_net_filter_match_same_value():
    value = "openstack/NetworkID:ada9ec67-2c97-467c-b674-c47200e2f5da"
    assert net_filter_match(value, value) is True


def test_net_filter_match_tolerates_spaces():
    assert net_filter_match("openstack/NetworkID : abc", "  openstack/NetworkID:abc") is True


def test_net_filter_match_different_value():
    assert net_filter_match("openstack/NetworkID:abc", "openstack/NetworkID:abd") is False


def test_net_filter_match_different_key():
    assert net_filter_match("openstack/NetworkID:abc", "other/NetworkID:abc") is False


@pytest.mark.parametrize("net_filter,net_value", [("nocolon", "a:b"), ("a:b", ""), ("", "")])
def test_net_filter_match_invalid(net_filter, net_value):
    assert net_filter_match(net_filter, net_value) is False


def test_remove_string_present():
    result, found = remove_string("b", ["a", "b", "c", "b"])
    assert result == ["a", "c"]
    assert found is True


def test_remove_string_absent():
    result, found = remove_string("z", ["a", "b"])
    assert result == ["a", "b"]
    assert found is False


def test_remove_string_empty():
    assert remove_string("a", []) == ([], False)


def test_unique_append_skips_existing():
    assert unique_append(["a", "b"], "b", "c", "c") == ["a", "b", "c"]


def test_unique_append_does_not_mutate_input():
    original = ["a"]
    result = unique_append(original, "b")
    assert original == ["a"]
    assert result == ["a", "b"]