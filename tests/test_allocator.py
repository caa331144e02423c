from kollaplan.core.allocation.allocator import (
    create_new_node,
    generate_default_node,
    generate_next_available_hostname,
    generate_next_available_ip,
    generate_next_node_id,
)
from kollaplan.models import NetworkConfig, NetworkInterface, Node, NodeType, Role


def _node(node_id, hostname, node_type, mgmt_ip, tunnel_ip=None):
    return Node(
        id=node_id,
        hostname=hostname,
        type=node_type,
        management_nic=NetworkInterface(id=f"mn{node_id}", name="ens3", ip=mgmt_ip),
        tunnel_nic=NetworkInterface(id=f"tn{node_id}", name="ens4", ip=tunnel_ip) if tunnel_ip else None,
    )


def test_ip_allocation_skips_used_address(network_config):
    nodes = [_node("1", "controller01", "controller", "172.16.100.11")]

    assert generate_next_available_ip("controller", "management", network_config, nodes) == "172.16.100.12"


def test_ip_allocation_only_considers_same_type(network_config):
    nodes = [_node("1", "network01", "network", "172.16.100.11")]

    assert generate_next_available_ip("controller", "management", network_config, nodes) == "172.16.100.11"


def test_ip_allocation_falls_back_to_first_slot_when_exhausted(network_config):
    nodes = [_node(str(i), f"controller{i:02d}", "controller", f"172.16.100.{10 + i}") for i in range(1, 10)]

    assert generate_next_available_ip("controller", "management", network_config, nodes) == "172.16.100.11"


def test_tunnel_ip_allocation(network_config, reference_nodes):
    assert generate_next_available_ip("compute", "tunnel", network_config, reference_nodes) == "192.168.100.32"
    assert generate_next_available_ip("hybrid", "tunnel", network_config, []) == "192.168.100.51"


def test_slash16_management_network_uses_third_octet():
    cfg = NetworkConfig(management_cidr="172.16.0.0/16")
    nodes = [_node("1", "controller01", "controller", "172.16.39.11")]

    assert generate_next_available_ip("controller", "management", cfg, []) == "172.16.39.11"
    assert generate_next_available_ip("controller", "management", cfg, nodes) == "172.16.39.12"
    assert generate_next_available_ip("compute", "management", cfg, []) == "172.16.41.31"


def test_hostname_allocation_is_gapless():
    nodes = [
        _node("1", "compute01", "compute", "172.16.100.31"),
        _node("2", "compute03", "compute", "172.16.100.33"),
    ]

    assert generate_next_available_hostname("compute", nodes) == "compute02"
    assert generate_next_available_hostname(NodeType.storage, nodes) == "storage01"


def test_hostname_allocation_falls_back_when_exhausted():
    nodes = [_node(str(i), f"controller{i:02d}", "controller", f"172.16.100.{10 + i}") for i in range(1, 10)]

    assert generate_next_available_hostname("controller", nodes) == "controller01"


def test_next_node_id_ignores_non_numeric_ids():
    nodes = [
        _node("1", "controller01", "controller", "172.16.100.11"),
        _node("7", "compute01", "compute", "172.16.100.31"),
        _node("abc", "compute02", "compute", "172.16.100.32"),
    ]

    assert generate_next_node_id(nodes) == "8"
    assert generate_next_node_id([]) == "1"


def test_default_node_is_hybrid_compute(network_config, reference_nodes):
    node = generate_default_node("5", reference_nodes, network_config)

    assert node.type == NodeType.hybrid
    assert node.hostname == "hybrid01"
    assert node.hybrid_roles.enabled() == [Role.compute]
    assert node.management_nic.ip == "172.16.100.51"
    assert node.tunnel_nic.ip == "192.168.100.51"
    assert node.storage_disks == []


def test_create_controller_node_has_no_optional_slots(network_config, reference_nodes):
    node = create_new_node("controller", network_config, reference_nodes)

    assert node.id == "5"
    assert node.hostname == "controller02"
    assert node.management_nic.ip == "172.16.100.12"
    assert node.tunnel_nic is None
    assert node.storage_disks is None


def test_create_storage_node_gets_tunnel_and_disk(network_config, reference_nodes):
    node = create_new_node("storage", network_config, reference_nodes, node_id="9")

    assert node.hostname == "storage02"
    assert node.tunnel_nic.ip == "192.168.100.42"
    assert [disk.name for disk in node.storage_disks] == ["/dev/sdb"]
    assert node.storage_disks[0].id == "sd9"


def test_create_hybrid_node_defaults_to_controller_role(network_config):
    node = create_new_node("hybrid", network_config, [])

    assert node.hybrid_roles.enabled() == [Role.controller]
    assert node.tunnel_nic is None


def test_next_node_id_ignores_non_ascii_digit_ids():
    nodes = [
        _node("2", "controller01", "controller", "172.16.100.11"),
        _node("²", "compute01", "compute", "172.16.100.31"),
        _node("٣", "compute02", "compute", "172.16.100.32"),
    ]

    assert generate_next_node_id(nodes) == "3"


def test_hostname_allocation_counts_other_types_with_same_prefix():
    nodes = [_node("1", "controller01", "hybrid", "172.16.100.51")]

    assert generate_next_available_hostname("controller", nodes) == "controller02"
