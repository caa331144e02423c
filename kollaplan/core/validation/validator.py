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

"""配置校验入口。"""
from __future__ import annotations

import logging
from typing import Sequence, Set

from kollaplan.common.logging_config import log_debug
from kollaplan.common.system_constants import VALIDATION_FAILED, VALIDATION_PASSED
from kollaplan.models import NetworkConfig, Node, ValidationResult

from .rules import (
    DiagnosticCollector,
    check_cidrs,
    check_external_range,
    check_floating_ip_path,
    check_hybrid_roles,
    check_node,
    check_role_coverage,
)

logger = logging.getLogger(__name__)


def validate(nodes: Sequence[Node], config: NetworkConfig) -> ValidationResult:
    """综合验证：网络配置 + 逐节点规则 + 部署级完整性。

    单次无状态遍历，所有检查都会执行，结果中包含全部通过/失败明细。
    """
    report = DiagnosticCollector()

    check_cidrs(config, report)

    management_ips: Set[int] = set()
    tunnel_ips: Set[int] = set()
    for node in nodes:
        check_node(node, config, management_ips, tunnel_ips, report)

    check_external_range(config, report)
    check_role_coverage(nodes, report)
    check_hybrid_roles(nodes, report)
    check_floating_ip_path(nodes, report)

    result = ValidationResult(
        is_valid=report.is_valid,
        message=VALIDATION_PASSED if report.is_valid else VALIDATION_FAILED,
        details=[d.message for d in report.diagnostics],
        diagnostics=report.diagnostics,
    )

    logger.info("配置校验完成: 节点 %d 个，结果 %s", len(nodes), "通过" if result.is_valid else "失败")
    log_debug(
        logger,
        "配置校验明细",
        {"failures": [d.model_dump(mode="json") for d in result.failures]},
    )
    return result

