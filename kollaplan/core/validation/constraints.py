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

"""节点约束模型：按角色组合推导各可选槽位是否允许/必需。

表单（是否展示控件）与校验器（是否判定非法）共用本模块，保证两侧一致。

| 角色组合                 | 隧道网卡 | 外部网卡      | VIP 外部网卡 | 存储磁盘      |
|--------------------------|----------|---------------|--------------|---------------|
| controller               | 禁止     | 禁止          | 允许         | 禁止          |
| network                  | 必需     | 允许          | 禁止         | 禁止          |
| compute                  | 必需     | 禁止          | 禁止         | 禁止          |
| storage                  | 必需     | 禁止          | 禁止         | 允许          |
| hybrid 仅 controller     | 禁止     | 禁止          | 允许         | 禁止          |
| hybrid controller+其它   | 必需     | 含 network 时 | 允许         | 含 storage 时 |
| hybrid 不含 controller   | 必需     | 含 network 时 | 禁止         | 含 storage 时 |
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

from kollaplan.models import InterfaceSlot, NetworkInterface, Node, NodeType, Role

# 需要隧道网络承载业务/存储流量的角色
TUNNEL_ROLES = frozenset({Role.network, Role.compute, Role.storage})


@dataclass(frozen=True)
class SlotRules:
    tunnel_allowed: bool
    tunnel_required: bool
    external_allowed: bool
    vip_external_allowed: bool
    storage_disks_allowed: bool

    def to_dict(self) -> dict:
        return {
            "tunnelAllowed": self.tunnel_allowed,
            "tunnelRequired": self.tunnel_required,
            "externalAllowed": self.external_allowed,
            "vipExternalAllowed": self.vip_external_allowed,
            "storageDisksAllowed": self.storage_disks_allowed,
        }


def effective_roles(node: Node) -> FrozenSet[Role]:
    """节点实际承担的角色集合。

    单角色节点即其 type；hybrid 节点取已勾选的 hybrid_roles，未勾选任何角色时为空集。
    """
    if node.type == NodeType.hybrid:
        if node.hybrid_roles is None:
            return frozenset()
        return frozenset(node.hybrid_roles.enabled())
    return frozenset({Role(node.type.value)})


def has_role(node: Node, role: Role) -> bool:
    return role in effective_roles(node)


def rules_for_roles(roles: FrozenSet[Role]) -> SlotRules:
    needs_tunnel = bool(roles & TUNNEL_ROLES)
    return SlotRules(
        tunnel_allowed=needs_tunnel,
        tunnel_required=needs_tunnel,
        external_allowed=Role.network in roles,
        vip_external_allowed=Role.controller in roles,
        storage_disks_allowed=Role.storage in roles,
    )


def slot_rules(node: Node) -> SlotRules:
    return rules_for_roles(effective_roles(node))


def can_have_tunnel_interface(node: Node) -> bool:
    return slot_rules(node).tunnel_allowed


def requires_tunnel_interface(node: Node) -> bool:
    return slot_rules(node).tunnel_required


def can_have_external_interface(node: Node) -> bool:
    """外部网卡仅允许 network 节点或启用 network 角色的 hybrid 节点。"""

    return slot_rules(node).external_allowed


def can_have_vip_external_interface(node: Node) -> bool:
    return slot_rules(node).vip_external_allowed


def can_have_storage_disks(node: Node) -> bool:
    return slot_rules(node).storage_disks_allowed


def populated_interfaces(node: Node) -> List[Tuple[InterfaceSlot, NetworkInterface]]:
    """按 management/tunnel/external/vip_external 顺序返回已存在的网卡。"""

    result: List[Tuple[InterfaceSlot, NetworkInterface]] = []
    for slot in InterfaceSlot:
        nic = node.interface(slot)
        if nic is not None:
            result.append((slot, nic))
    return result


def is_interface_name_duplicate(node: Node, slot: InterfaceSlot, interface_name: str) -> bool:
    """interface_name 是否已被同一节点的其它槽位使用（空名不算重复）。"""

    if not interface_name or not interface_name.strip():
        return False
    return any(
        nic.name == interface_name
        for other_slot, nic in populated_interfaces(node)
        if other_slot != slot
    )


def duplicate_interface_names(node: Node) -> List[str]:
    """返回节点内重复出现的网卡名（按首次出现顺序，各名只出现一次）。"""

    seen = set()
    duplicates: List[str] = []
    for _, nic in populated_interfaces(node):
        name = nic.name
        if not name:
            continue
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates
