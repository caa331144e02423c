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

"""生成 Kolla-Ansible multinode inventory 与 globals.yml 片段。"""
from __future__ import annotations

from typing import List, Sequence

from kollaplan.common.system_constants import DEFAULT_TUNNEL_NIC, DEFAULT_VOLUME_GROUP
from kollaplan.core.validation.constraints import has_role
from kollaplan.models import NetworkConfig, Node, NodeType, Role


def _nodes_with_role(nodes: Sequence[Node], role: Role) -> List[Node]:
    return [node for node in nodes if has_role(node, role)]


def _tunnel_name(node: Node) -> str:
    return node.tunnel_nic.name if node.tunnel_nic and node.tunnel_nic.name else DEFAULT_TUNNEL_NIC


def render_multinode_inventory(nodes: Sequence[Node]) -> List[str]:
    """按角色分组输出 inventory 行，hybrid 节点按其启用的角色出现在多个分组。"""

    controllers = _nodes_with_role(nodes, Role.controller)
    lines: List[str] = ["[control]"]
    for node in controllers:
        # 专用控制节点即部署机，使用本地连接
        connection = "ansible_connection=local " if node.type == NodeType.controller else ""
        lines.append(f"{node.hostname} {connection}network_interface={node.management_nic.name}")

    lines += ["", "[network]"]
    for node in _nodes_with_role(nodes, Role.network):
        line = f"{node.hostname} network_interface={node.management_nic.name} tunnel_interface={_tunnel_name(node)}"
        if node.external_nic is not None:
            line += f" neutron_external_interface={node.external_nic.name}"
        lines.append(line)

    lines += ["", "[compute]"]
    for node in _nodes_with_role(nodes, Role.compute):
        lines.append(
            f"{node.hostname} network_interface={node.management_nic.name} tunnel_interface={_tunnel_name(node)}"
        )

    lines += ["", "[monitoring]"]
    if controllers:
        first = controllers[0]
        lines.append(f"{first.hostname} ansible_connection=local network_interface={first.management_nic.name}")

    lines += ["", "[storage]"]
    for node in _nodes_with_role(nodes, Role.storage):
        lines.append(f"{node.hostname} network_interface={node.management_nic.name}")

    return lines


def render_globals(config: NetworkConfig) -> List[str]:
    lines = [
        "workaround_ansible_issue_8743: yes",
        'config_strategy: "COPY_ALWAYS"',
        'kolla_base_distro: "debian"',
        'openstack_release: "2025.1"',
        f'kolla_internal_vip_address: "{config.kolla_int_vip_addr}"',
        "kolla_container_engine: docker",
        'network_address_family: "ipv4"',
        'neutron_plugin_agent: "openvswitch"',
        'enable_openstack_core: "yes"',
        'enable_haproxy: "yes"',
        'enable_keepalived: "{{ enable_haproxy | bool }}"',
        'enable_mariadb: "yes"',
        'enable_memcached: "yes"',
        'enable_cinder: "yes"',
        'enable_cinder_backend_lvm: "yes"',
        'enable_etcd: "yes"',
        'glance_backend_file: "yes"',
        f'cinder_volume_group: "{DEFAULT_VOLUME_GROUP}"',
    ]
    if config.vip_external_ip:
        lines.append(f'kolla_external_vip_address: "{config.vip_external_ip}"')
    return lines


def render_lvm_commands(nodes: Sequence[Node]) -> List[str]:
    """为配置了磁盘的存储节点生成 pvcreate / vgcreate 命令（仅输出文本）。"""

    lines: List[str] = []
    for node in nodes:
        if not node.storage_disks or not (has_role(node, Role.storage) or has_role(node, Role.compute)):
            continue
        lines.append(f"# {node.hostname}")
        for disk in node.storage_disks:
            lines.append(f"sudo pvcreate {disk.name}")
            lines.append(f"sudo vgcreate {disk.volume_group} {disk.name}")
    return lines
