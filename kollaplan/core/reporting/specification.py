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

"""硬件规格与网络需求汇总。"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from kollaplan.core.validation.constraints import effective_roles, has_role
from kollaplan.models import HybridRoles, NetworkConfig, Node, NodeType, Role


@dataclass
class NodeSpecification:
    name: str
    cpu_cores: int
    ram: str
    storage: List[str]
    network_interfaces: int
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cpuCores": self.cpu_cores,
            "ram": self.ram,
            "storage": list(self.storage),
            "networkInterfaces": self.network_interfaces,
            "description": self.description,
        }


@dataclass
class SystemSpecification:
    nodes: List[NodeSpecification] = field(default_factory=list)
    total_cpu_cores: int = 0
    total_ram: int = 0
    total_storage: int = 0
    network_requirements: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "totalCpuCores": self.total_cpu_cores,
            "totalRam": self.total_ram,
            "totalStorage": self.total_storage,
            "networkRequirements": list(self.network_requirements),
            "recommendations": list(self.recommendations),
        }


# 节点类型 -> (CPU 核数, 内存, 磁盘, 网卡数, 说明)
_BASE_SPECS: Dict[NodeType, tuple] = {
    NodeType.controller: (6, "16GB", ["80GB (OS)"], 2, "Controller node for OpenStack management services"),
    NodeType.network: (4, "10GB", ["80GB (OS)"], 3, "Network node for Neutron networking services"),
    NodeType.compute: (6, "16GB", ["100GB (OS)", "80GB (Cinder storage)"], 2, "Compute node for hosting virtual machines"),
    NodeType.storage: (4, "8GB", ["80GB (OS)", "200GB+ (Block storage)"], 2, "Dedicated storage node for Cinder volumes"),
    NodeType.hybrid: (8, "24GB", ["120GB (OS)", "100GB (Storage)"], 3, "Multi-role node combining multiple services"),
}

# hybrid 节点按角色累加：基础值 + 各角色增量
_HYBRID_CPU = {"base": 2, Role.controller: 4, Role.network: 2, Role.compute: 4, Role.storage: 2}
_HYBRID_RAM_GB = {"base": 4, Role.controller: 12, Role.network: 6, Role.compute: 12, Role.storage: 4}

_DIGITS = re.compile(r"[0-9]+")


def _base_spec(node_type: NodeType) -> NodeSpecification:
    cpu, ram, storage, nics, description = _BASE_SPECS[node_type]
    return NodeSpecification(
        name="",
        cpu_cores=cpu,
        ram=ram,
        storage=list(storage),
        network_interfaces=nics,
        description=description,
    )


def _hybrid_cpu_cores(roles: HybridRoles) -> int:
    return _HYBRID_CPU["base"] + sum(_HYBRID_CPU[role] for role in roles.enabled())


def _hybrid_ram(roles: HybridRoles) -> str:
    return f"{_HYBRID_RAM_GB['base'] + sum(_HYBRID_RAM_GB[role] for role in roles.enabled())}GB"


def _hybrid_storage(roles: HybridRoles) -> List[str]:
    storage = ["100GB (OS)"]
    if roles.compute or roles.storage:
        storage.append("80GB (Cinder storage)")
    return storage


def _leading_number(text: str) -> int:
    match = _DIGITS.search(text.replace(",", ""))
    return int(match.group()) if match else 0


def node_specification(node: Node) -> NodeSpecification:
    spec = _base_spec(node.type)

    if node.type == NodeType.hybrid and node.hybrid_roles is not None:
        roles = node.hybrid_roles
        spec.cpu_cores = _hybrid_cpu_cores(roles)
        spec.ram = _hybrid_ram(roles)
        spec.storage = _hybrid_storage(roles)
        spec.description = "Hybrid node: " + ", ".join(role.value for role in roles.enabled())

    if node.storage_disks:
        disks = [f"80GB ({disk.volume_group})" for disk in node.storage_disks]
        # 实际配置的磁盘替换缺省数据盘，保留系统盘
        spec.storage = [spec.storage[0], *disks]

    nic_count = 1
    if node.tunnel_nic is not None:
        nic_count += 1
    if node.external_nic is not None:
        nic_count += 1
    spec.network_interfaces = nic_count
    spec.name = node.hostname
    return spec


def network_requirements(nodes: Sequence[Node], config: NetworkConfig) -> List[str]:
    requirements = [
        f"Management Network: {config.management_cidr}",
        f"Internal VIP Address: {config.kolla_int_vip_addr}",
    ]
    if config.tunnel_cidr:
        requirements.append(f"Tunnel Network: {config.tunnel_cidr}")
    if config.external_cidr:
        requirements.append(f"External Network: {config.external_cidr}")
        requirements.append(f"External IP Range: {config.ext_start_ip} - {config.ext_end_ip}")
        requirements.append(f"External Gateway: {config.ext_gateway_ip}")
    if config.vip_external_ip:
        requirements.append(f"External VIP: {config.vip_external_ip}")

    has_network_node = any(has_role(node, Role.network) for node in nodes)
    requirements.append(f"Required NICs per node: {'2-3' if has_network_node else '2'}")
    return requirements


def recommendations(nodes: Sequence[Node], config: NetworkConfig) -> List[str]:
    result = [
        "Use Debian 12 (Bookworm) with latest kernel for Kolla-Ansible 2025.1 compatibility",
        "Ensure all hosts have synchronized time (chrony/NTP service)",
        "Configure SSH key-based authentication between all nodes",
        "Use dedicated physical networks for management and tunnel traffic when possible",
        "Allocate at least 20% extra disk space beyond minimum requirements",
        "Enable container runtime (Docker) on all nodes before deployment",
    ]

    controllers = [n for n in nodes if has_role(n, Role.controller)]
    computes = [n for n in nodes if has_role(n, Role.compute)]
    networks = [n for n in nodes if has_role(n, Role.network)]

    if len(controllers) == 1:
        result.append("Single controller setup: Consider HA setup for production environments")
    if len(computes) > 5:
        result.append("Large deployment: Consider using dedicated network nodes for better performance")
    if not networks:
        result.append("No dedicated network node: Network services will run on controller/hybrid nodes")

    if any(effective_roles(n) & {Role.storage, Role.compute} for n in nodes):
        result.append("Storage: Use SSD for OS disks and HDD/SSD for Cinder volumes")
        result.append("LVM: Ensure storage disks are not partitioned before creating LVM volumes")

    if not config.tunnel_cidr:
        result.append("Network: Consider configuring a dedicated tunnel network for better isolation")
    if not config.external_cidr:
        result.append("External Network: Configure external network for floating IP access")

    # 以节点类型基础规格估算总核数
    if sum(_BASE_SPECS[n.type][0] for n in nodes) < 16:
        result.append("Performance: Consider increasing CPU cores for better performance")

    return result


def build_system_specification(nodes: Sequence[Node], config: NetworkConfig) -> SystemSpecification:
    """根据节点配置生成硬件规格、总量、网络需求与部署建议。"""

    specs = [node_specification(node) for node in nodes]
    return SystemSpecification(
        nodes=specs,
        total_cpu_cores=sum(s.cpu_cores for s in specs),
        total_ram=sum(_leading_number(s.ram) for s in specs),
        # 总容量只统计系统盘
        total_storage=sum(_leading_number(s.storage[0]) for s in specs if s.storage),
        network_requirements=network_requirements(nodes, config),
        recommendations=recommendations(nodes, config),
    )
