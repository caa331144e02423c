import pytest

from kollaplan.core.planning.node_editor import (
    add_nic,
    add_storage_disk,
    change_node_type,
    conform_to_constraints,
    remove_nic,
    remove_storage_disk,
    resolve_slot,
    set_hybrid_role,
    update_nic_field,
    update_storage_disk,
)
from kollaplan.models import HybridRoles, InterfaceSlot, NetworkInterface, Node, NodeType, Role


def _hybrid_controller():
    return Node(
        id="5",
        hostname="hybrid01",
        type="hybrid",
        hybrid_roles=HybridRoles(controller=True),
        management_nic=NetworkInterface(id="mn5", name="ens3", ip="172.16.100.51"),
    )


def test_resolve_slot_accepts_aliases():
    assert resolve_slot("tunnelNic") == InterfaceSlot.tunnel
    assert resolve_slot("vip_external") == InterfaceSlot.vip_external
    assert resolve_slot("external_nic") == InterfaceSlot.external
    with pytest.raises(ValueError):
        resolve_slot("bond0")


def test_change_controller_to_compute(reference_nodes, network_config):
    controller = reference_nodes[0]

    updated = change_node_type(controller, "compute", network_config, reference_nodes)

    assert updated.type == NodeType.compute
    assert updated.hostname == "compute02"
    assert updated.management_nic.ip == "172.16.100.32"
    assert updated.tunnel_nic.ip == "192.168.100.32"
    assert updated.vip_external_nic is None
    assert updated.storage_disks is None
    # 入参保持不变
    assert controller.type == NodeType.controller
    assert controller.vip_external_nic is not None


def test_change_to_hybrid_defaults_to_controller_role(reference_nodes, network_config):
    updated = change_node_type(reference_nodes[2], NodeType.hybrid, network_config, reference_nodes)

    assert updated.hybrid_roles.enabled() == [Role.controller]
    assert updated.hostname == "hybrid01"
    assert updated.tunnel_nic is None


def test_change_to_storage_adds_default_disk(reference_nodes, network_config):
    updated = change_node_type(reference_nodes[2], "storage", network_config, reference_nodes)

    assert [disk.name for disk in updated.storage_disks] == ["/dev/sdb"]
    assert updated.tunnel_nic is not None


def test_change_network_to_compute_drops_external(reference_nodes, network_config):
    updated = change_node_type(reference_nodes[1], "compute", network_config, reference_nodes)

    assert updated.external_nic is None


def test_enabling_network_role_allocates_tunnel(network_config):
    updated = set_hybrid_role(_hybrid_controller(), Role.network, True, network_config, [])

    assert updated.hybrid_roles.network is True
    assert updated.tunnel_nic.name == "ens4"
    assert updated.tunnel_nic.ip == "192.168.100.51"


def test_disabling_network_role_removes_external(network_config):
    node = _hybrid_controller().model_copy(
        update={
            "hybrid_roles": HybridRoles(controller=True, network=True),
            "tunnel_nic": NetworkInterface(id="tn5", name="ens4", ip="192.168.100.51"),
            "external_nic": NetworkInterface(id="en5", name="ens5"),
        }
    )

    updated = set_hybrid_role(node, "network", False, network_config, [node])

    assert updated.external_nic is None
    assert updated.tunnel_nic is None


def test_enabling_storage_role_adds_disk(network_config):
    updated = set_hybrid_role(_hybrid_controller(), "storage", True, network_config, [])

    assert updated.storage_disks[0].id == "sd5"


def test_set_hybrid_role_ignores_single_role_nodes(reference_nodes, network_config):
    compute = reference_nodes[2]

    assert set_hybrid_role(compute, "network", True, network_config, reference_nodes) == compute


def test_update_nic_field(reference_nodes):
    updated = update_nic_field(reference_nodes[1], "externalNic", "name", "eth9")

    assert updated.external_nic.name == "eth9"
    assert reference_nodes[1].external_nic.name == "ens5"
    with pytest.raises(ValueError):
        update_nic_field(reference_nodes[1], "tunnel", "mtu", "9000")


def test_add_and_remove_nic(reference_nodes, network_config):
    compute = reference_nodes[2].model_copy(update={"tunnel_nic": None})

    with_tunnel = add_nic(compute, "tunnel", network_config, reference_nodes)
    with_external = add_nic(compute, InterfaceSlot.external, network_config, reference_nodes)

    assert with_tunnel.tunnel_nic.ip == "192.168.100.32"
    assert with_external.external_nic.id == "en3"
    assert with_external.external_nic.name == ""
    assert remove_nic(with_tunnel, "tunnel").tunnel_nic is None
    with pytest.raises(ValueError):
        remove_nic(compute, "management")


def test_storage_disk_editing(reference_nodes):
    storage = reference_nodes[3]

    updated = add_storage_disk(add_storage_disk(storage))

    assert [disk.name for disk in updated.storage_disks] == ["/dev/sdb", "/dev/sdc", "/dev/sdd"]
    assert [disk.id for disk in updated.storage_disks] == ["sd1", "sd4-2", "sd4-3"]

    renamed = update_storage_disk(updated, "sd4-2", "volumeGroup", "fast-volumes")
    assert renamed.storage_disks[1].volume_group == "fast-volumes"

    trimmed = remove_storage_disk(renamed, "sd1")
    assert [disk.id for disk in trimmed.storage_disks] == ["sd4-2", "sd4-3"]

    with pytest.raises(ValueError):
        update_storage_disk(updated, "sd1", "size", "1T")


def test_conform_removes_disallowed_slots(reference_nodes, network_config):
    controller = reference_nodes[0].model_copy(
        update={"tunnel_nic": NetworkInterface(id="tn1", name="ens4", ip="192.168.100.11")}
    )

    assert conform_to_constraints(controller, network_config, reference_nodes).tunnel_nic is None
