# SPDX-License-Identifier: GPL-3.0-or-later
# This file is part of KollaPlan.
#
# KollaPlan is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# KollaPlan is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with KollaPlan.  If not, see <https://www.gnu.org/licenses/>.

"""节点编辑操作。

每个操作接收节点快照并返回新节点，不修改入参。类型或角色变化后通过
conform_to_constraints 按约束模型清理/补齐可选槽位。
"""
from __future__ import annotations

import logging
from typing import Sequence

from kollaplan.common.system_constants import DEFAULT_TUNNEL_NIC, DEFAULT_VOLUME_GROUP
from kollaplan.core.allocation.allocator import (
    default_storage_disk,
    generate_next_available_hostname,
    generate_next_available_ip,
)
from kollaplan.core.validation.constraints import slot_rules
from kollaplan.models import (
    HybridRoles,
    InterfaceSlot,
    NetworkConfig,
    NetworkInterface,
    Node,
    NodeType,
    Role,
    StorageDisk,
)

logger = logging.getLogger(__name__)

_SLOT_ALIASES = {
    "management": InterfaceSlot.management,
    "managementNic": InterfaceSlot.management,
    "tunnel": InterfaceSlot.tunnel,
    "tunnelNic": InterfaceSlot.tunnel,
    "external": InterfaceSlot.external,
    "externalNic": InterfaceSlot.external,
    "vip_external": InterfaceSlot.vip_external,
    "vipExternal": InterfaceSlot.vip_external,
    "vipExternalNic": InterfaceSlot.vip_external,
}

_SLOT_ID_PREFIX = {
    InterfaceSlot.management: "mn",
    InterfaceSlot.tunnel: "tn",
    InterfaceSlot.external: "en",
    InterfaceSlot.vip_external: "vip",
}

_DISK_FIELDS = {"name": "name", "volume_group": "volume_group", "volumeGroup": "volume_group"}


def resolve_slot(slot: InterfaceSlot | str) -> InterfaceSlot:
    if isinstance(slot, InterfaceSlot):
        return slot
    if slot in _SLOT_ALIASES:
        return _SLOT_ALIASES[slot]
    try:
        return InterfaceSlot(slot)
    except ValueError as exc:
        raise ValueError(f"未知网卡槽位: {slot}") from exc


def _optional_slot(slot: InterfaceSlot | str) -> InterfaceSlot:
    resolved = resolve_slot(slot)
    if resolved == InterfaceSlot.management:
        raise ValueError("管理网卡为必需槽位，不能新增或删除")
    return resolved


def _tunnel_nic(node: Node, network_config: NetworkConfig, existing_nodes: Sequence[Node]) -> NetworkInterface:
    ip = generate_next_available_ip(node.type, "tunnel", network_config, existing_nodes)
    return NetworkInterface(id=f"tn{node.id}", name=DEFAULT_TUNNEL_NIC, ip=ip)


def conform_to_constraints(node: Node, network_config: NetworkConfig, existing_nodes: Sequence[Node]) -> Node:
    """移除当前角色组合不允许的槽位，并补齐必需的隧道网卡与缺省磁盘。"""

    rules = slot_rules(node)
    updated = node.model_copy(deep=True)

    if not rules.tunnel_allowed:
        updated.tunnel_nic = None
    elif rules.tunnel_required and updated.tunnel_nic is None:
        updated.tunnel_nic = _tunnel_nic(updated, network_config, existing_nodes)

    if not rules.external_allowed:
        updated.external_nic = None
    if not rules.vip_external_allowed:
        updated.vip_external_nic = None

    if not rules.storage_disks_allowed:
        updated.storage_disks = None
    elif updated.storage_disks is None:
        updated.storage_disks = [default_storage_disk(updated.id)]

    return updated


def change_node_type(
    node: Node,
    new_type: NodeType | str,
    network_config: NetworkConfig,
    existing_nodes: Sequence[Node],
) -> Node:
    """切换节点类型：重新分配主机名与地址，并清理不兼容的槽位。"""

    new_type = NodeType(new_type)
    updated = node.model_copy(deep=True)
    updated.type = new_type
    updated.hostname = generate_next_available_hostname(new_type, existing_nodes)
    updated.management_nic.ip = generate_next_available_ip(new_type, "management", network_config, existing_nodes)

    if new_type != NodeType.controller:
        tunnel_ip = generate_next_available_ip(new_type, "tunnel", network_config, existing_nodes)
        if updated.tunnel_nic is None:
            updated.tunnel_nic = NetworkInterface(id=f"tn{node.id}", name=DEFAULT_TUNNEL_NIC, ip=tunnel_ip)
        else:
            updated.tunnel_nic.ip = tunnel_ip

    if new_type == NodeType.hybrid:
        if updated.hybrid_roles is None:
            updated.hybrid_roles = HybridRoles(controller=True)
    else:
        updated.hybrid_roles = None

    logger.debug("节点 %s 类型 %s -> %s", node.id, node.type.value, new_type.value)
    return conform_to_constraints(updated, network_config, existing_nodes)


def set_hybrid_role(
    node: Node,
    role: Role | str,
    enabled: bool,
    network_config: NetworkConfig,
    existing_nodes: Sequence[Node],
) -> Node:
    """勾选/取消 hybrid 节点的某个角色；非 hybrid 节点原样返回副本。"""

    if node.type != NodeType.hybrid:
        return node.model_copy(deep=True)

    role = Role(role)
    roles = node.hybrid_roles or HybridRoles()
    updated = node.model_copy(deep=True)
    updated.hybrid_roles = roles.model_copy(update={role.value: enabled})
    return conform_to_constraints(updated, network_config, existing_nodes)


def update_nic_field(node: Node, slot: InterfaceSlot | str, field: str, value: str) -> Node:
    if field not in ("name", "ip"):
        raise ValueError(f"未知网卡字段: {field}")
    resolved = resolve_slot(slot)
    updated = node.model_copy(deep=True)
    nic = updated.interface(resolved)
    if nic is None:
        nic = NetworkInterface(id=f"{_SLOT_ID_PREFIX[resolved]}{node.id}")
    setattr(updated, resolved.value, nic.model_copy(update={field: value}))
    return updated


def add_nic(
    node: Node,
    slot: InterfaceSlot | str,
    network_config: NetworkConfig,
    existing_nodes: Sequence[Node],
) -> Node:
    """新增可选网卡；隧道网卡自动分配地址，其它网卡名称与地址留空。"""

    resolved = _optional_slot(slot)
    updated = node.model_copy(deep=True)
    if resolved == InterfaceSlot.tunnel:
        nic = _tunnel_nic(updated, network_config, existing_nodes)
    else:
        nic = NetworkInterface(id=f"{_SLOT_ID_PREFIX[resolved]}{node.id}")
    setattr(updated, resolved.value, nic)
    return updated


def remove_nic(node: Node, slot: InterfaceSlot | str) -> Node:
    resolved = _optional_slot(slot)
    updated = node.model_copy(deep=True)
    setattr(updated, resolved.value, None)
    return updated


def _next_disk_id(node: Node) -> str:
    existing = {disk.id for disk in node.storage_disks or []}
    index = len(existing) + 1
    while f"sd{node.id}-{index}" in existing:
        index += 1
    return f"sd{node.id}-{index}"


def add_storage_disk(node: Node) -> Node:
    """追加一块磁盘，设备名按 /dev/sdb、/dev/sdc ... 顺延。"""

    updated = node.model_copy(deep=True)
    disks = list(updated.storage_disks or [])
    device = f"/dev/sd{chr(ord('b') + len(disks))}"
    disks.append(StorageDisk(id=_next_disk_id(updated), name=device, volume_group=DEFAULT_VOLUME_GROUP))
    updated.storage_disks = disks
    return updated


def remove_storage_disk(node: Node, disk_id: str) -> Node:
    updated = node.model_copy(deep=True)
    if updated.storage_disks is not None:
        updated.storage_disks = [disk for disk in updated.storage_disks if disk.id != disk_id]
    return updated


def update_storage_disk(node: Node, disk_id: str, field: str, value: str) -> Node:
    if field not in _DISK_FIELDS:
        raise ValueError(f"未知磁盘字段: {field}")
    attr = _DISK_FIELDS[field]
    updated = node.model_copy(deep=True)
    if updated.storage_disks is not None:
        updated.storage_disks = [
            disk.model_copy(update={attr: value}) if disk.id == disk_id else disk
            for disk in updated.storage_disks
        ]
    return updated
