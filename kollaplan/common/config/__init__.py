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

"""配置加载模块。"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import os
import yaml

from ..system_constants import DEFAULT_CONFIG_FILE, DEFAULT_PLAN_FILE


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_WEB_HOST = "127.0.0.1"
DEFAULT_WEB_PORT = 8080


class Config(dict):
    """配置对象，dict子类，支持点式访问（简单实现）。"""

    def __getattr__(self, item):  # noqa: D401
        try:
            return self[item]
        except KeyError as exc:
            raise AttributeError(item) from exc


def load_config(path: Path | None = None) -> Config:
    """加载YAML配置，返回Config对象。"""

    cfg_path = path or DEFAULT_CONFIG_FILE
    data: Dict[str, Any] = {}
    if cfg_path.exists():
        with cfg_path.open("r", encoding="utf-8") as file:
            data = yaml.safe_load(file) or {}

    data = _apply_defaults(data)

    env_overrides = _load_env_overrides()
    if env_overrides:
        data = _deep_merge_dicts(data, env_overrides)

    return Config(data)


def _load_env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}

    def _pick_env(*keys: str) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value.strip()
        return None

    level = _pick_env("KOLLAPLAN_LOG_LEVEL")
    if level:
        overrides.setdefault("logging", {})["level"] = level.upper()

    plan_file = _pick_env("KOLLAPLAN_PLAN_FILE")
    if plan_file:
        overrides.setdefault("plan", {})["file"] = plan_file

    host = _pick_env("KOLLAPLAN_WEB_HOST")
    if host:
        overrides.setdefault("web", {})["host"] = host

    port_raw = _pick_env("KOLLAPLAN_WEB_PORT")
    if port_raw:
        try:
            overrides.setdefault("web", {})["port"] = int(port_raw)
        except ValueError:
            pass

    return overrides


def _deep_merge_dicts(original: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(original)
    for key, value in updates.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge_dicts(result[key], value)
        else:
            result[key] = value
    return result


def _apply_defaults(data: Dict[str, Any] | None) -> Dict[str, Any]:
    base = data if isinstance(data, dict) else {}
    defaults: Dict[str, Any] = {
        "logging": {"level": DEFAULT_LOG_LEVEL},
        "plan": {"file": DEFAULT_PLAN_FILE},
        "web": {"host": DEFAULT_WEB_HOST, "port": DEFAULT_WEB_PORT},
    }
    return _deep_merge_dicts(defaults, base)
