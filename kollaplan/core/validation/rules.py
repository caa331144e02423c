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

"""详细验证规则：逐节点的地址/槽位检查与部署级完整性检查。

所有规则只向 DiagnosticCollector 追加明细，不抛异常，也不在首个错误处中断。
明细文案可能被外部使用方按原文匹配，修改措辞前需确认兼容性。
"""
from __future__ import annotations

from typing import List, Sequence, Set

from kollaplan.common.ip_utils import check_ip_in_subnet, is_valid_cidr
from kollaplan.common.system_constants import REQUIRED_ROLES
from kollaplan.models import Diagnostic, NetworkConfig, Node, NodeType, Role, Severity

from .constraints import (
    can_have_storage_disks,
    duplicate_interface_names,
    effective_roles,
    has_role,
    slot_rules,
)


class DiagnosticCollector:
    """按顺序收集明细，任一 fail 即令整体结果失败。"""

    def __init__(self) -> None:
        self.diagnostics: List[Diagnostic] = []
        self.is_valid = True

    def passed(self, rule: str, message: str, node: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(severity=Severity.passed, rule=rule, message=message, node=node))

    def fail(self, rule: str, message: str, node: str | None = None) -> None:
        self.is_valid = False
        self.diagnostics.append(Diagnostic(severity=Severity.fail, rule=rule, message=message, node=node))

    def info(self, rule: str, message: str, node: str | None = None) -> None:
        self.diagnostics.append(Diagnostic(severity=Severity.info, rule=rule, message=message, node=node))


def _type_label(node: Node) -> str:
    return node.type.value.capitalize()


# ---------------------------------------------------------------------------
# 网络配置
# ---------------------------------------------------------------------------

def check_cidrs(config: NetworkConfig, report: DiagnosticCollector) -> None:
    for label, cidr in (
        ("management", config.management_cidr),
        ("tunnel", config.tunnel_cidr),
        ("external", config.external_cidr),
    ):
        if is_valid_cidr(cidr):
            report.passed(f"cidr.{label}", f"{cidr} is a valid {label} CIDR subnet address.")
        else:
            report.fail(f"cidr.{label}", f"{cidr} is an invalid {label} CIDR subnet address.")


def check_external_range(config: NetworkConfig, report: DiagnosticCollector) -> None:
    _, gateway_ok = check_ip_in_subnet(config.ext_gateway_ip, config.external_cidr)
    start_num, start_ok = check_ip_in_subnet(config.ext_start_ip, config.external_cidr)
    end_num, end_ok = check_ip_in_subnet(config.ext_end_ip, config.external_cidr)

    for rule, label, ip, ok in (
        ("external.gateway", "gateway", config.ext_gateway_ip, gateway_ok),
        ("external.start", "start", config.ext_start_ip, start_ok),
        ("external.end", "end", config.ext_end_ip, end_ok),
    ):
        if ok:
            report.passed(rule, f"{ip} is a valid external {label} IP.")
        else:
            report.fail(rule, f"{ip} is an invalid external {label} IP.")

    if start_ok and end_ok and start_num > end_num:
        report.fail("external.range", "Start IP must be less than or equal to End IP.")


# ---------------------------------------------------------------------------
# 单节点
# ---------------------------------------------------------------------------

def check_required_fields(node: Node, report: DiagnosticCollector) -> bool:
    if not node.hostname or not node.management_nic.name:
        report.fail(
            "node.required_fields",
            f"Node {node.display_name} has missing required fields.",
            node=node.hostname or None,
        )
        return False
    return True


def check_interface_names(node: Node, report: DiagnosticCollector) -> None:
    for name in duplicate_interface_names(node):
        report.fail(
            "node.interface_names",
            f"Interface name {name} must be unique within node {node.hostname}.",
            node=node.hostname,
        )


def check_management_ip(
    node: Node, config: NetworkConfig, used_ips: Set[int], report: DiagnosticCollector
) -> None:
    ip = node.management_nic.ip
    ip_num, ok = check_ip_in_subnet(ip, config.management_cidr)
    if not ok:
        report.fail("node.management_ip", f"{ip} is an invalid management IP for {node.hostname}.", node=node.hostname)
    elif ip_num in used_ips:
        report.fail("node.management_ip.duplicate", f"Duplicate management IP: {ip}", node=node.hostname)
    else:
        used_ips.add(ip_num)
        report.passed("node.management_ip", f"{ip} is a valid management IP for {node.hostname}.", node=node.hostname)


def check_tunnel_ip(node: Node, config: NetworkConfig, used_ips: Set[int], report: DiagnosticCollector) -> None:
    if node.tunnel_nic is None or not node.tunnel_nic.ip:
        return
    ip = node.tunnel_nic.ip
    ip_num, ok = check_ip_in_subnet(ip, config.tunnel_cidr)
    if not ok:
        report.fail("node.tunnel_ip", f"{ip} is an invalid tunnel IP for {node.hostname}.", node=node.hostname)
    elif ip_num in used_ips:
        report.fail("node.tunnel_ip.duplicate", f"Duplicate tunnel IP: {ip}", node=node.hostname)
    else:
        used_ips.add(ip_num)
        report.passed("node.tunnel_ip", f"{ip} is a valid tunnel IP for {node.hostname}.", node=node.hostname)


def _tunnel_forbidden_message(node: Node) -> str:
    if node.type != NodeType.hybrid:
        return f"{_type_label(node)} node {node.hostname} must not have a tunnel interface."
    if effective_roles(node) == frozenset({Role.controller}):
        return f"Hybrid node {node.hostname} with only the controller role must not have a tunnel interface."
    return (
        f"Hybrid node {node.hostname} without network, compute or storage role "
        "must not have a tunnel interface."
    )


def check_slot_constraints(node: Node, report: DiagnosticCollector) -> None:
    """按约束模型检查隧道/外部/VIP 外部网卡与存储磁盘是否合法。"""

    rules = slot_rules(node)
    host = node.hostname
    label = _type_label(node)

    if node.tunnel_nic is not None and not rules.tunnel_allowed:
        report.fail("node.tunnel.forbidden", _tunnel_forbidden_message(node), node=host)

    if rules.tunnel_required and (node.tunnel_nic is None or not node.tunnel_nic.ip):
        report.fail("node.tunnel.required", f"{label} node {host} requires a tunnel IP address.", node=host)

    if node.external_nic is not None and not rules.external_allowed:
        report.fail(
            "node.external.forbidden",
            f"{label} node {host} must not have an external interface "
            "(only network nodes or hybrid nodes with the network role may have one).",
            node=host,
        )

    if node.vip_external_nic is not None and not rules.vip_external_allowed:
        report.fail(
            "node.vip_external.forbidden",
            f"{label} node {host} must not have a VIP external interface (controller role required).",
            node=host,
        )

    if node.storage_disks and not rules.storage_disks_allowed:
        report.fail(
            "node.storage_disks.forbidden",
            f"{label} node {host} must not have storage disks (storage role required).",
            node=host,
        )

    if can_have_storage_disks(node) and not node.storage_disks:
        # 仅提示，不影响校验结果
        report.info(
            "node.storage_disks.missing",
            f"{label} node {host} has no storage disks configured; no Cinder LVM volume will be created.",
            node=host,
        )


def check_vip_external(node: Node, report: DiagnosticCollector) -> None:
    vip = node.vip_external_nic
    if vip is None:
        return
    host = node.hostname
    if node.external_nic is not None and vip.name == node.external_nic.name:
        report.fail(
            "node.vip_external.name",
            f"VIP external interface name on {host} must differ from the external interface name ({vip.name}).",
            node=host,
        )
    if vip.ip:
        report.fail(
            "node.vip_external.ip",
            f"VIP external interface {vip.name} on {host} must not have a static IP address.",
            node=host,
        )


def check_node(
    node: Node,
    config: NetworkConfig,
    management_ips: Set[int],
    tunnel_ips: Set[int],
    report: DiagnosticCollector,
) -> None:
    # 缺少主机名/管理网卡名时，其余逐节点检查没有意义
    if not check_required_fields(node, report):
        return
    check_interface_names(node, report)
    check_management_ip(node, config, management_ips, report)
    check_tunnel_ip(node, config, tunnel_ips, report)
    check_slot_constraints(node, report)
    check_vip_external(node, report)


# ---------------------------------------------------------------------------
# 部署级
# ---------------------------------------------------------------------------

def get_all_roles(nodes: Sequence[Node]) -> Set[str]:
    roles: Set[str] = set()
    for node in nodes:
        roles.update(role.value for role in effective_roles(node))
    return roles


def check_role_coverage(nodes: Sequence[Node], report: DiagnosticCollector) -> None:
    present = get_all_roles(nodes)

    if Role.controller.value not in present:
        report.fail(
            "deployment.controller",
            "At least one controller node (or hybrid node with controller role) is required.",
        )

    missing = [role for role in REQUIRED_ROLES if role not in present]
    if missing:
        report.fail("deployment.roles", f"Missing required roles in deployment: {', '.join(missing)}")
    else:
        report.passed(
            "deployment.roles",
            "All required roles (controller, network, compute, storage) are present in the deployment.",
        )


def check_hybrid_roles(nodes: Sequence[Node], report: DiagnosticCollector) -> None:
    for node in nodes:
        if node.type == NodeType.hybrid and not effective_roles(node):
            report.fail(
                "hybrid.roles",
                f"Hybrid node {node.hostname} must have at least one role selected.",
                node=node.hostname,
            )


def check_floating_ip_path(nodes: Sequence[Node], report: DiagnosticCollector) -> None:
    exposed = [
        node.hostname
        for node in nodes
        if has_role(node, Role.network) and node.external_nic is not None
    ]
    if not exposed:
        report.fail(
            "deployment.floating_ip",
            "At least one network node (or hybrid node with network role) must have an external interface "
            "for floating IP access.",
        )
    else:
        report.passed("deployment.floating_ip", f"Network nodes with external interface: {', '.join(exposed)}.")
