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

"""IP / CIDR 相关辅助函数。

提供：
* is_valid_cidr / is_valid_ip_address 字面格式校验
* check_ip_in_subnet -> (整数地址或负数错误码, 是否属于子网)
* get_base_ip_from_cidr 返回分配地址用的前缀
* ip_to_int 点分十进制转 32 位整数

所有函数对任意输入都不会抛异常。
"""
from __future__ import annotations

import re
from typing import Any, Tuple

IP_FORMAT_ERROR = -1
CIDR_FORMAT_ERROR = -2
NOT_IN_SUBNET = -3

_OCTET = r"(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_IP_PATTERN = re.compile(rf"^{_OCTET}\.{_OCTET}\.{_OCTET}\.{_OCTET}$")
# 仅做字面匹配，不要求主机位为 0
_CIDR_PATTERN = re.compile(r"^([0-9]{1,3}\.){3}[0-9]{1,3}/([0-9]|[1-2][0-9]|3[0-2])$")


def is_valid_cidr(cidr: Any) -> bool:
    if not isinstance(cidr, str):
        return False
    return _CIDR_PATTERN.fullmatch(cidr) is not None


def is_valid_ip_address(ip: Any) -> bool:
    if not isinstance(ip, str):
        return False
    return _IP_PATTERN.fullmatch(ip) is not None


def ip_to_int(ip: str) -> int:
    """点分十进制转无符号 32 位整数，调用前需保证格式合法。"""

    a, b, c, d = (int(part) for part in ip.split("."))
    return (a << 24) | (b << 16) | (c << 8) | d


_PREFIX_PATTERN = re.compile(r"[0-9]{1,2}")


def _parse_prefix(raw: str) -> int | None:
    # 仅接受 ASCII 数字，isdigit() 会放行上标等字符
    if _PREFIX_PATTERN.fullmatch(raw) is None:
        return None
    prefix = int(raw)
    if prefix < 0 or prefix > 32:
        return None
    return prefix


def check_ip_in_subnet(ip: Any, cidr: Any) -> Tuple[int, bool]:
    """判断 IP 是否落在子网内。

    返回值第一项在成功时为 IP 的 32 位整数值（可用于跨节点查重），
    失败时为负数错误码：-1 IP 格式非法，-2 子网格式非法，-3 不在子网内。
    """
    if not is_valid_ip_address(ip):
        return IP_FORMAT_ERROR, False

    if not isinstance(cidr, str):
        return CIDR_FORMAT_ERROR, False
    subnet_ip, _, mask_raw = cidr.partition("/")
    prefix = _parse_prefix(mask_raw.strip())
    if not is_valid_ip_address(subnet_ip) or prefix is None:
        return CIDR_FORMAT_ERROR, False

    host_bits = (1 << (32 - prefix)) - 1
    network_mask = 0xFFFFFFFF ^ host_bits
    ip_int = ip_to_int(ip)
    subnet_int = ip_to_int(subnet_ip)

    if ip_int & network_mask == subnet_int & network_mask:
        return ip_int, True
    return NOT_IN_SUBNET, False


def get_base_ip_from_cidr(cidr: Any) -> str:
    """返回 CIDR 的前三段（/24 或缺省）或前两段（/16）。"""

    if not isinstance(cidr, str):
        return ""
    ip, _, _ = cidr.partition("/")
    parts = ip.split(".")
    if "/24" in cidr:
        return ".".join(parts[:3])
    if "/16" in cidr:
        return ".".join(parts[:2])
    return ".".join(parts[:3])


def cidr_prefix(cidr: Any) -> str:
    """返回 CIDR 的前缀长度字符串，缺失时返回空串。"""

    if not isinstance(cidr, str):
        return ""
    return cidr.partition("/")[2]
