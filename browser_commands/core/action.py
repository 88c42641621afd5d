"""
定义动作层的数据契约。
- ActionSpec: 脚本中的一步（name + args），例如
  {"name": "select", "args": {"field": "color", "value": "green"}}
"""
# @file purpose: Define action data contracts.

from typing import Any

from pydantic import BaseModel, Field


class ActionSpec(BaseModel):
    name: str = Field(..., description="Registered action name.")
    args: dict[str, Any] = Field(
        default_factory=dict, description="Parameters validated against the action's model."
    )
