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

"""通用工具包。

该包聚合了 IP/CIDR 校验、配置、日志等辅助工具，供项目其它模块统一引用。
"""
from .ip_utils import (  # noqa: F401
    check_ip_in_subnet,
    get_base_ip_from_cidr,
    is_valid_cidr,
    is_valid_ip_address,
)
