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

"""核心引擎：分配器、约束模型与校验器。

对外暴露的纯函数接口：
- allocate_hostname(node_type, existing_nodes)
- allocate_ip(node_type, network_kind, network_config, existing_nodes)
- validate(nodes, network_config)
- can_have_external_interface(node) / can_have_tunnel_interface(node)
"""
from .allocation import allocate_hostname, allocate_ip  # noqa: F401
from .validation import can_have_external_interface, can_have_tunnel_interface, validate  # noqa: F401
