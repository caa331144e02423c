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

"""规划文件（YAML/JSON）读写。

文件内容即节点列表与网络配置的序列化形式，键名沿用 camelCase，
与 Web API 的请求体保持一致。
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kollaplan.common.system_constants import DEFAULT_PLAN_FILE
from kollaplan.core.planning.app_state import initial_state
from kollaplan.models import NetworkConfig, Node

logger = logging.getLogger(__name__)


class PlanFileError(RuntimeError):
    """规划文件缺失、格式错误或字段不合法。"""


class PlanDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    nodes: List[Node] = Field(default_factory=list)
    network_config: NetworkConfig = Field(default_factory=NetworkConfig, alias="networkConfig")

    def to_payload(self) -> Dict[str, Any]:
        # 节点省略空槽位；网络配置保留 null，避免重新加载时回落到缺省值
        return {
            "nodes": [node.model_dump(mode="json", by_alias=True, exclude_none=True) for node in self.nodes],
            "networkConfig": self.network_config.model_dump(mode="json", by_alias=True),
        }


def find_plan_file(base_dir: Path, name: str = DEFAULT_PLAN_FILE) -> Path | None:
    """在目录下查找规划文件，优先精确文件名，其次同名的 .yaml/.json 变体。"""

    stem = Path(name).stem
    for candidate in (base_dir / name, base_dir / f"{stem}.yaml", base_dir / f"{stem}.json"):
        if candidate.is_file():
            return candidate
    return None


def _parse_text(text: str, path: Path) -> Any:
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise PlanFileError(f"无法解析规划文件 {path}: {exc}") from exc


def load_plan(path: Path) -> PlanDocument:
    if not path.is_file():
        raise PlanFileError(f"规划文件不存在: {path}")
    data = _parse_text(path.read_text(encoding="utf-8"), path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PlanFileError(f"规划文件 {path} 顶层必须是映射")
    try:
        document = PlanDocument.model_validate(data)
    except ValidationError as exc:
        raise PlanFileError(f"规划文件 {path} 字段不合法: {exc}") from exc
    logger.info("已加载规划文件 %s，节点 %d 台", path, len(document.nodes))
    return document


def save_plan(document: PlanDocument, path: Path) -> Path:
    payload = document.to_payload()
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".json":
        text = json.dumps(payload, ensure_ascii=False, indent=2)
    else:
        text = yaml.safe_dump(payload, allow_unicode=True, sort_keys=False)
    path.write_text(text, encoding="utf-8")
    logger.info("规划文件已写入 %s", path)
    return path


def write_sample_plan(path: Path) -> Path:
    """写入参考部署（controller/network/compute/storage 各一台）。"""

    state = initial_state()
    return save_plan(PlanDocument(nodes=list(state.nodes), network_config=state.network_config), path)
