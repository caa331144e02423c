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

"""规划状态对象与更新函数。

状态显式传递：reduce(state, action) 返回新的 AppState，核心分配器/校验器
只接收其中的节点列表与网络配置，不感知状态容器。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Sequence, Tuple, Union

from kollaplan.core.allocation.allocator import generate_default_node, generate_next_node_id
from kollaplan.core.validation.validator import validate
from kollaplan.models import (
    NetworkConfig,
    NetworkInterface,
    Node,
    NodeType,
    StorageDisk,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class ActiveTab(str, Enum):
    nodes = "nodes"
    network = "network"
    specifications = "specifications"
    visualization = "visualization"
    tutorial = "tutorial"
    help = "help"


@dataclass(frozen=True)
class AppState:
    nodes: Tuple[Node, ...]
    network_config: NetworkConfig
    validation: ValidationResult = field(default_factory=ValidationResult)
    active_tab: ActiveTab = ActiveTab.nodes

    def find_node(self, node_id: str) -> Node | None:
        return next((node for node in self.nodes if node.id == node_id), None)


@dataclass(frozen=True)
class SetNodes:
    nodes: Sequence[Node]


@dataclass(frozen=True)
class AddNode:
    node: Node


@dataclass(frozen=True)
class UpdateNode:
    node_id: str
    node: Node


@dataclass(frozen=True)
class RemoveNode:
    node_id: str


@dataclass(frozen=True)
class SetNetworkConfig:
    network_config: NetworkConfig


@dataclass(frozen=True)
class SetValidation:
    validation: ValidationResult


@dataclass(frozen=True)
class SetActiveTab:
    active_tab: ActiveTab


Action = Union[SetNodes, AddNode, UpdateNode, RemoveNode, SetNetworkConfig, SetValidation, SetActiveTab]


def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, SetNodes):
        return replace(state, nodes=tuple(action.nodes))
    if isinstance(action, AddNode):
        return replace(state, nodes=state.nodes + (action.node,))
    if isinstance(action, UpdateNode):
        return replace(
            state,
            nodes=tuple(action.node if node.id == action.node_id else node for node in state.nodes),
        )
    if isinstance(action, RemoveNode):
        return replace(state, nodes=tuple(node for node in state.nodes if node.id != action.node_id))
    if isinstance(action, SetNetworkConfig):
        return replace(state, network_config=action.network_config)
    if isinstance(action, SetValidation):
        return replace(state, validation=action.validation)
    if isinstance(action, SetActiveTab):
        return replace(state, active_tab=ActiveTab(action.active_tab))
    raise TypeError(f"未知操作类型: {type(action).__name__}")


def add_default_node(state: AppState) -> AppState:
    """按缺省形态（hybrid + compute）追加一个节点。"""

    node_id = generate_next_node_id(state.nodes)
    node = generate_default_node(node_id, state.nodes, state.network_config)
    logger.info("新增节点 %s (%s)", node.hostname, node.management_nic.ip)
    return reduce(state, AddNode(node))


def run_validation(state: AppState) -> AppState:
    return reduce(state, SetValidation(validate(state.nodes, state.network_config)))


def initial_state() -> AppState:
    """参考部署：controller / network / compute / storage 各一台。"""

    nodes = (
        Node(
            id="1",
            hostname="controller01",
            type=NodeType.controller,
            management_nic=NetworkInterface(id="mn1", name="ens3", ip="172.16.100.11"),
            vip_external_nic=NetworkInterface(id="vip1", name="ens5", ip=""),
        ),
        Node(
            id="2",
            hostname="network01",
            type=NodeType.network,
            external_nic=NetworkInterface(id="en1", name="ens5", ip=""),
            management_nic=NetworkInterface(id="mn2", name="ens3", ip="172.16.100.21"),
            tunnel_nic=NetworkInterface(id="tn2", name="ens4", ip="192.168.100.21"),
        ),
        Node(
            id="3",
            hostname="compute01",
            type=NodeType.compute,
            management_nic=NetworkInterface(id="mn3", name="ens3", ip="172.16.100.31"),
            tunnel_nic=NetworkInterface(id="tn3", name="ens4", ip="192.168.100.31"),
        ),
        Node(
            id="4",
            hostname="storage01",
            type=NodeType.storage,
            management_nic=NetworkInterface(id="mn4", name="ens3", ip="172.16.100.41"),
            tunnel_nic=NetworkInterface(id="tn4", name="ens4", ip="192.168.100.41"),
            storage_disks=[StorageDisk(id="sd1", name="/dev/sdb", volume_group="cinder-volumes")],
        ),
    )
    return AppState(nodes=nodes, network_config=NetworkConfig())
