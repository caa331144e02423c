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

"""节点拓扑相关数据模型。

IP 字段一律保存为字符串而非 IPvAnyAddress：格式错误的地址需要原样进入
校验器，由校验器给出明细说明。
"""
from __future__ import annotations
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    controller = "controller"
    network = "network"
    compute = "compute"
    storage = "storage"
    hybrid = "hybrid"


class Role(str, Enum):
    controller = "controller"
    network = "network"
    compute = "compute"
    storage = "storage"


class InterfaceSlot(str, Enum):
    """节点上的四个网卡槽位，值为模型属性名。"""

    management = "management_nic"
    tunnel = "tunnel_nic"
    external = "external_nic"
    vip_external = "vip_external_nic"


class NetworkInterface(BaseModel):
    id: str = ""
    name: str = Field("", description="网卡设备名，例如 ens3")
    ip: str = Field("", description="点分十进制地址，可为空")


class StorageDisk(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = Field(..., description="设备路径，例如 /dev/sdb")
    volume_group: str = Field("cinder-volumes", alias="volumeGroup")


class HybridRoles(BaseModel):
    controller: bool = False
    network: bool = False
    compute: bool = False
    storage: bool = False

    def enabled(self) -> List[Role]:
        return [role for role in Role if getattr(self, role.value)]


class Node(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    hostname: str = ""
    type: NodeType = NodeType.hybrid
    hybrid_roles: Optional[HybridRoles] = Field(None, alias="hybridRoles")
    management_nic: NetworkInterface = Field(default_factory=NetworkInterface, alias="managementNic")
    tunnel_nic: Optional[NetworkInterface] = Field(None, alias="tunnelNic")
    external_nic: Optional[NetworkInterface] = Field(None, alias="externalNic")
    vip_external_nic: Optional[NetworkInterface] = Field(None, alias="vipExternalNic")
    storage_disks: Optional[List[StorageDisk]] = Field(None, alias="storageDisks")

    def interface(self, slot: InterfaceSlot) -> Optional[NetworkInterface]:
        return getattr(self, slot.value)

    @property
    def display_name(self) -> str:
        return self.hostname or "unnamed"


class NetworkConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    management_cidr: str = Field("172.16.100.0/24", alias="managementCidr")
    tunnel_cidr: str = Field("192.168.100.0/24", alias="tunnelCidr")
    external_cidr: str = Field("10.100.0.0/24", alias="externalCidr")
    kolla_user: str = Field("openstack", alias="kollaUser")
    kolla_int_vip_addr: str = Field("172.16.100.254", alias="kollaIntVipAddr")
    ext_gateway_ip: str = Field("10.100.0.1", alias="extGatewayIp")
    ext_start_ip: str = Field("10.100.0.50", alias="extStartIp")
    ext_end_ip: str = Field("10.100.0.200", alias="extEndIp")
    vip_external_ip: Optional[str] = Field("10.100.0.254", alias="vipExternalIp")
