import pytest

from kollaplan.common.ip_utils import (
    CIDR_FORMAT_ERROR,
    IP_FORMAT_ERROR,
    NOT_IN_SUBNET,
    check_ip_in_subnet,
    get_base_ip_from_cidr,
    is_valid_cidr,
    is_valid_ip_address,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("172.16.100.0/24", True),
        ("10.0.0.0/8", True),
        ("192.168.1.7/32", True),
        ("172.16.100.0/33", False),
        ("172.16.100.0", False),
        ("not-a-cidr", False),
        ("", False),
        (None, False),
        (24, False),
    ],
)
def test_is_valid_cidr(value, expected):
    assert is_valid_cidr(value) is expected


@pytest.mark.parametrize("octets", [(0, 0, 0, 0), (255, 255, 255, 255), (10, 1, 99, 200), (172, 16, 100, 11)])
def test_formatted_octets_are_valid_ip(octets):
    assert is_valid_ip_address(".".join(str(o) for o in octets))


@pytest.mark.parametrize("value", ["256.1.1.1", "1.2.3", "1.2.3.4.5", "a.b.c.d", " 10.0.0.1", "", None, 10])
def test_invalid_ip_address(value):
    assert is_valid_ip_address(value) is False


def test_check_ip_in_subnet_returns_numeric_value():
    value, ok = check_ip_in_subnet("172.16.100.11", "172.16.100.0/24")

    assert ok is True
    assert value == 2886755339


def test_check_ip_in_subnet_error_codes():
    assert check_ip_in_subnet("10.0.0.1", "172.16.100.0/24") == (NOT_IN_SUBNET, False)
    assert check_ip_in_subnet("10.0.0.300", "10.0.0.0/24") == (IP_FORMAT_ERROR, False)
    assert check_ip_in_subnet("10.0.0.1", "10.0.0.0/abc") == (CIDR_FORMAT_ERROR, False)
    assert check_ip_in_subnet("10.0.0.1", None) == (CIDR_FORMAT_ERROR, False)


def test_check_ip_in_subnet_respects_prefix_length():
    assert check_ip_in_subnet("172.16.39.11", "172.16.0.0/16")[1] is True
    assert check_ip_in_subnet("10.200.0.1", "10.0.0.0/8")[1] is True
    assert check_ip_in_subnet("10.0.0.5", "10.0.0.4/31")[1] is True
    assert check_ip_in_subnet("10.0.0.6", "10.0.0.4/31")[1] is False


def test_get_base_ip_from_cidr():
    assert get_base_ip_from_cidr("172.16.100.0/24") == "172.16.100"
    assert get_base_ip_from_cidr("172.16.0.0/16") == "172.16"
    assert get_base_ip_from_cidr("10.0.0.0/8") == "10.0.0"
    assert get_base_ip_from_cidr(None) == ""


@pytest.mark.parametrize("cidr", ["10.0.0.0/²", "10.0.0.0/٢٤", "١٧٢.16.100.0/24"])
def test_non_ascii_digits_are_rejected(cidr):
    assert is_valid_cidr(cidr) is False
    assert check_ip_in_subnet("10.0.0.1", cidr) == (CIDR_FORMAT_ERROR, False)


def test_non_ascii_digits_in_ip_are_rejected():
    assert is_valid_ip_address("١٠.0.0.1") is False
    assert check_ip_in_subnet("١٠.0.0.1", "10.0.0.0/24") == (IP_FORMAT_ERROR, False)
