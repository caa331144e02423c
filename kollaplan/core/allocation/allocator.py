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

"""主机名 / IP 自动分配。

分配规则是确定性的：每种节点类型占用固定的 10 个地址段中的 1..9 号，
主机名为 ``<type>01`` ~ ``<type>09``。9 个位置全部占用时回退到第一个，
由校验器的重复检测兜底，而不是在此处报错。
"""
from __future__ import annotations

import logging
from typing import Dict, List, Literal, Sequence

from kollaplan.common.ip_utils import cidr_prefix, get_base_ip_from_cidr
from kollaplan.common.system_constants import (
    ALLOCATION_SLOTS,
    DEFAULT_MANAGEMENT_NIC,
    DEFAULT_STORAGE_DISK,
    DEFAULT_TUNNEL_NIC,
    DEFAULT_VOLUME_GROUP,
    NODE_TYPE_RANGES,
    SLASH16_THIRD_OCTET_BASE,
)
from kollaplan.core.validation.constraints import rules_for_roles
from kollaplan.models import (
    HybridRoles,
    NetworkConfig,
    NetworkInterface,
    Node,
    NodeType,
    Role,
    StorageDisk,
)

logger = logging.getLogger(__name__)

NetworkKind = Literal["management", "tunnel"]


def get_node_type_ranges() -> Dict[str, int]:
    return dict(NODE_TYPE_RANGES)


def _type_value(node_type: NodeType | str) -> str:
    return NodeType(node_type).value


def generate_next_available_hostname(node_type: NodeType | str, existing_nodes: Sequence[Node]) -> str:
    type_name = _type_value(node_type)
    # 占用按主机名前缀判断，不区分节点类型
    existing = {node.hostname for node in existing_nodes if node.hostname.startswith(type_name)}

    for i in range(1, ALLOCATION_SLOTS + 1):
        candidate = f"{type_name}{i:02d}"
        if candidate not in existing:
            return candidate

    # 01~09 全部占用：沿用第一个，由校验器发现冲突
    logger.debug("主机名序号已用尽，回退到 %s01", type_name)
    return f"{type_name}01"


def generate_next_available_ip(
    node_type: NodeType | str,
    network_kind: NetworkKind,
    network_config: NetworkConfig,
    existing_nodes: Sequence[Node],
) -> str:
    """为指定类型节点分配管理网或隧道网的下一个空闲地址。

    仅同类型节点、同一网络上、以相同前缀开头的地址视为已占用。
    """
    type_name = _type_value(node_type)
    cidr = network_config.management_cidr if network_kind == "management" else network_config.tunnel_cidr
    base_ip = get_base_ip_from_cidr(cidr)
    start_range = NODE_TYPE_RANGES[type_name]

    used = set()
    for node in existing_nodes:
        if node.type.value != type_name:
            continue
        if network_kind == "management":
            ip = node.management_nic.ip
        else:
            ip = node.tunnel_nic.ip if node.tunnel_nic else ""
        if ip and ip.startswith(base_ip):
            used.add(ip)

    if network_kind == "management" and cidr_prefix(cidr) == "16":
        # /16 管理网：第三段区分节点类型
        third_octet = start_range // 10 + SLASH16_THIRD_OCTET_BASE
        candidates = [f"{base_ip}.{third_octet}.{start_range + i}" for i in range(1, ALLOCATION_SLOTS + 1)]
    else:
        candidates = [f"{base_ip}.{start_range + i}" for i in range(1, ALLOCATION_SLOTS + 1)]

    for candidate in candidates:
        if candidate not in used:
            return candidate

    logger.debug("%s 网络中 %s 类型地址已用尽，回退到 %s", network_kind, type_name, candidates[0])
    return candidates[0]


def generate_next_node_id(existing_nodes: Sequence[Node]) -> str:
    numeric_ids = [int(node.id) for node in existing_nodes if node.id.isascii() and node.id.isdigit()]
    return str(max(numeric_ids, default=0) + 1)


def default_storage_disk(node_id: str) -> StorageDisk:
    return StorageDisk(id=f"sd{node_id}", name=DEFAULT_STORAGE_DISK, volume_group=DEFAULT_VOLUME_GROUP)


def generate_default_node(node_id: str, existing_nodes: Sequence[Node], network_config: NetworkConfig) -> Node:
    """新增节点的缺省形态：hybrid 类型，仅启用 compute 角色。"""

    node_type = NodeType.hybrid
    hostname = generate_next_available_hostname(node_type, existing_nodes)
    management_ip = generate_next_available_ip(node_type, "management", network_config, existing_nodes)
    tunnel_ip = generate_next_available_ip(node_type, "tunnel", network_config, existing_nodes)

    return Node(
        id=node_id,
        hostname=hostname,
        type=node_type,
        management_nic=NetworkInterface(id=f"mn{node_id}", name=DEFAULT_MANAGEMENT_NIC, ip=management_ip),
        tunnel_nic=NetworkInterface(id=f"tn{node_id}", name=DEFAULT_TUNNEL_NIC, ip=tunnel_ip),
        storage_disks=[],
        hybrid_roles=HybridRoles(compute=True),
    )


def create_new_node(
    node_type: NodeType | str,
    network_config: NetworkConfig,
    existing_nodes: Sequence[Node],
    node_id: str | None = None,
) -> Node:
    """按角色构建完整节点：分配主机名与地址，并按约束模型决定可选槽位。

    hybrid 节点缺省只启用 controller 角色。
    """
    type_name = _type_value(node_type)
    node_id = node_id or generate_next_node_id(existing_nodes)

    hybrid_roles = HybridRoles(controller=True) if type_name == NodeType.hybrid.value else None
    roles = frozenset(hybrid_roles.enabled()) if hybrid_roles else frozenset({Role(type_name)})
    rules = rules_for_roles(roles)

    hostname = generate_next_available_hostname(type_name, existing_nodes)
    management_ip = generate_next_available_ip(type_name, "management", network_config, existing_nodes)

    tunnel_nic = None
    if rules.tunnel_allowed:
        tunnel_ip = generate_next_available_ip(type_name, "tunnel", network_config, existing_nodes)
        tunnel_nic = NetworkInterface(id=f"tn{node_id}", name=DEFAULT_TUNNEL_NIC, ip=tunnel_ip)

    storage_disks: List[StorageDisk] | None = None
    if rules.storage_disks_allowed:
        storage_disks = [default_storage_disk(node_id)]

    node = Node(
        id=node_id,
        hostname=hostname,
        type=type_name,
        management_nic=NetworkInterface(id=f"mn{node_id}", name=DEFAULT_MANAGEMENT_NIC, ip=management_ip),
        tunnel_nic=tunnel_nic,
        storage_disks=storage_disks,
        hybrid_roles=hybrid_roles,
    )
    logger.debug("创建节点 %s (%s)，管理地址 %s", hostname, type_name, management_ip)
    return node


# 对外暴露的简短别名
allocate_hostname = generate_next_available_hostname
allocate_ip = generate_next_available_ip
