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

"""REST API router for planning operations.

所有接口无状态：请求体携带完整的节点列表与网络配置。
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from kollaplan.core.allocation.allocator import (
    generate_default_node,
    generate_next_available_hostname,
    generate_next_available_ip,
    generate_next_node_id,
)
from kollaplan.core.reporting.inventory import render_globals, render_lvm_commands, render_multinode_inventory
from kollaplan.core.reporting.specification import build_system_specification
from kollaplan.core.validation.constraints import effective_roles, slot_rules
from kollaplan.core.validation.validator import validate
from kollaplan.models import Node, ValidationResult

from ..api_models import (
    AllocationResponseModel,
    ConstraintRequestModel,
    ConstraintResponseModel,
    DefaultsModel,
    HostnameRequestModel,
    InventoryResponseModel,
    IPRequestModel,
    PlanRequestModel,
)

router = APIRouter(prefix="", tags=["planning"])
logger = logging.getLogger(__name__)


@router.get("/health")
def health() -> dict[str, str]:
    logger.debug("健康检查")
    return {"status": "ok"}


@router.get("/defaults", response_model=DefaultsModel)
def defaults() -> DefaultsModel:
    return DefaultsModel.load()


@router.post("/validate", response_model=ValidationResult)
def validate_plan(request: PlanRequestModel) -> ValidationResult:
    result = validate(request.nodes, request.network_config)
    logger.info("校验 %d 个节点，结果=%s，失败 %d 项", len(request.nodes), result.is_valid, len(result.failures))
    return result


@router.post("/allocate/hostname", response_model=AllocationResponseModel)
def allocate_hostname(request: HostnameRequestModel) -> AllocationResponseModel:
    hostname = generate_next_available_hostname(request.node_type, request.nodes)
    logger.debug("分配主机名 %s -> %s", request.node_type.value, hostname)
    return AllocationResponseModel(value=hostname)


@router.post("/allocate/ip", response_model=AllocationResponseModel)
def allocate_ip(request: IPRequestModel) -> AllocationResponseModel:
    ip = generate_next_available_ip(request.node_type, request.network_kind, request.network_config, request.nodes)
    logger.debug("分配 %s 地址 %s -> %s", request.network_kind, request.node_type.value, ip)
    return AllocationResponseModel(value=ip)


@router.post("/nodes/default", response_model=Node)
def default_node(request: PlanRequestModel) -> Node:
    node_id = generate_next_node_id(request.nodes)
    node = generate_default_node(node_id, request.nodes, request.network_config)
    logger.info("生成缺省节点 %s (%s)", node.hostname, node.management_nic.ip)
    return node


@router.post("/constraints", response_model=ConstraintResponseModel)
def constraints(request: ConstraintRequestModel) -> ConstraintResponseModel:
    roles = sorted(role.value for role in effective_roles(request.node))
    return ConstraintResponseModel.from_rules(slot_rules(request.node), roles)


@router.post("/specification")
def specification(request: PlanRequestModel) -> dict:
    return build_system_specification(request.nodes, request.network_config).to_dict()


@router.post("/inventory", response_model=InventoryResponseModel)
def inventory(request: PlanRequestModel) -> InventoryResponseModel:
    return InventoryResponseModel(
        inventory=render_multinode_inventory(request.nodes),
        globals=render_globals(request.network_config),
        lvm=render_lvm_commands(request.nodes),
    )
