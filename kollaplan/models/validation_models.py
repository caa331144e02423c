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

"""校验结果数据模型。"""
from __future__ import annotations
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    passed = "pass"
    fail = "fail"
    info = "info"


class Diagnostic(BaseModel):
    """单条校验明细，展示层按 severity 着色，无需匹配文案。"""

    severity: Severity
    rule: str
    message: str
    node: Optional[str] = None


class ValidationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(False, alias="isValid")
    message: str = ""
    details: List[str] = Field(default_factory=list)
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def failures(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.fail]
