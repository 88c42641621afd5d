"""
结构化的动作返回值，用于向上层（runner/CLI）汇报执行结果。
"""
# @file purpose: Define ActionResult model for action outputs.

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """
    统一的动作返回值：
    - ok: 是否成功
    - extracted_content: 读取类动作（text/value/attribute）得到的字符串，
      其他动作为 None
    - meta: 其它诊断信息（selector/URL/按钮等），便于日志与回放
    """

    ok: bool = True
    extracted_content: Optional[str] = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, **meta: Any) -> "ActionResult":
        return cls(ok=True, meta=meta)

    @classmethod
    def extracted(cls, content: Optional[str], **meta: Any) -> "ActionResult":
        return cls(ok=True, extracted_content=content, meta=meta)
