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

"""全局常量与魔法字符串集中管理。"""
from pathlib import Path

# 日志与配置目录
PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent
PROJECT_ROOT = BASE_DIR.parent
CONFIG_DIR = PACKAGE_DIR / "config"
LOG_DIR = PROJECT_ROOT / "logs"

DEFAULT_CONFIG_FILE = CONFIG_DIR / "default.yml"
DEFAULT_PLAN_FILE = "kolla-plan.yml"

# 节点类型 -> IP 末段起始偏移
NODE_TYPE_RANGES = {
    "controller": 10,
    "network": 20,
    "compute": 30,
    "storage": 40,
    "hybrid": 50,
}

# 每种节点类型可自动分配的序号/地址数量
ALLOCATION_SLOTS = 9

# /16 管理网第三段 = offset // 10 + 38
SLASH16_THIRD_OCTET_BASE = 38

# 网卡与磁盘默认值
DEFAULT_MANAGEMENT_NIC = "ens3"
DEFAULT_TUNNEL_NIC = "ens4"
DEFAULT_STORAGE_DISK = "/dev/sdb"
DEFAULT_VOLUME_GROUP = "cinder-volumes"

# 部署必须覆盖的角色
REQUIRED_ROLES = ["controller", "network", "compute", "storage"]

VALIDATION_PASSED = "Configuration validation passed!"
VALIDATION_FAILED = "Configuration validation failed!"
