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

"""Pydantic schemas used by the web API."""
from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field

from kollaplan.application_version import __version__
from kollaplan.common.system_constants import (
    DEFAULT_MANAGEMENT_NIC,
    DEFAULT_STORAGE_DISK,
    DEFAULT_TUNNEL_NIC,
    DEFAULT_VOLUME_GROUP,
)
from kollaplan.core.allocation.allocator import get_node_type_ranges
from kollaplan.core.validation.constraints import SlotRules
from kollaplan.models import NetworkConfig, Node, NodeType


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PlanRequestModel(_CamelModel):
    nodes: List[Node] = Field(default_factory=list)
    network_config: NetworkConfig = Field(default_factory=NetworkConfig, alias="networkConfig")


class HostnameRequestModel(_CamelModel):
    node_type: NodeType = Field(..., alias="nodeType")
    nodes: List[Node] = Field(default_factory=list)


class IPRequestModel(_CamelModel):
    node_type: NodeType = Field(..., alias="nodeType")
    network_kind: Literal["management", "tunnel"] = Field(..., alias="networkKind")
    network_config: NetworkConfig = Field(default_factory=NetworkConfig, alias="networkConfig")
    nodes: List[Node] = Field(default_factory=list)


class AllocationResponseModel(BaseModel):
    value: str


class ConstraintRequestModel(BaseModel):
    node: Node


class ConstraintResponseModel(_CamelModel):
    tunnel_allowed: bool = Field(..., alias="tunnelAllowed")
    tunnel_required: bool = Field(..., alias="tunnelRequired")
    external_allowed: bool = Field(..., alias="externalAllowed")
    vip_external_allowed: bool = Field(..., alias="vipExternalAllowed")
    storage_disks_allowed: bool = Field(..., alias="storageDisksAllowed")
    roles: List[str] = Field(default_factory=list)

    @classmethod
    def from_rules(cls, rules: SlotRules, roles: List[str]) -> "ConstraintResponseModel":
        return cls(**rules.to_dict(), roles=roles)


class InventoryResponseModel(BaseModel):
    inventory: List[str]
    globals: List[str] = Field(default_factory=list)
    lvm: List[str] = Field(default_factory=list)


class DefaultsModel(_CamelModel):
    version: str
    network_config: NetworkConfig = Field(..., alias="networkConfig")
    node_type_ranges: Dict[str, int] = Field(..., alias="nodeTypeRanges")
    management_nic: str = Field(..., alias="managementNic")
    tunnel_nic: str = Field(..., alias="tunnelNic")
    storage_disk: str = Field(..., alias="storageDisk")
    volume_group: str = Field(..., alias="volumeGroup")

    @classmethod
    def load(cls) -> "DefaultsModel":
        return cls(
            version=__version__,
            network_config=NetworkConfig(),
            node_type_ranges=get_node_type_ranges(),
            management_nic=DEFAULT_MANAGEMENT_NIC,
            tunnel_nic=DEFAULT_TUNNEL_NIC,
            storage_disk=DEFAULT_STORAGE_DISK,
            volume_group=DEFAULT_VOLUME_GROUP,
        )
