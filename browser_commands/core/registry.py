"""
动作注册表:
- 每个脚本动作以 name 注册（签名: async fn(browser, params) -> ActionResult）
- 每个动作绑定一个 Pydantic v2 入参模型, 执行前由 validate_spec() 校验 args
- 名称唯一; 拼错的动作名会给出最接近的候选
"""
# @file purpose: Action registry for the script layer (name -> command + params model).

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter

from .action import ActionSpec

ActionFn = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ActionMeta:
    """Registered action: its params model and the first line of its docstring."""

    name: str
    params_model: Optional[Type[BaseModel]] = None
    summary: str = ""


_ACTIONS: Dict[str, Tuple[ActionFn, ActionMeta]] = {}


def action(
    name: str, *, params_model: Optional[Type[BaseModel]] = None
) -> Callable[[ActionFn], ActionFn]:
    """
    装饰器形式:
        @action("select", params_model=SelectParams)
        async def select(browser, params): ...
    """

    def deco(fn: ActionFn) -> ActionFn:
        register(name, fn, params_model=params_model)
        return fn

    return deco


def register(name: str, fn: ActionFn, *, params_model: Optional[Type[BaseModel]] = None) -> None:
    existing = _ACTIONS.get(name)
    # re-importing the same module re-registers the same function object
    if existing is not None and existing[0].__qualname__ != fn.__qualname__:
        raise ValueError(f"Action already registered: {name}")
    doc = (fn.__doc__ or "").strip()
    summary = doc.splitlines()[0] if doc else ""
    _ACTIONS[name] = (fn, ActionMeta(name=name, params_model=params_model, summary=summary))


def _lookup(name: str) -> Tuple[ActionFn, ActionMeta]:
    try:
        return _ACTIONS[name]
    except KeyError:
        close = difflib.get_close_matches(name, _ACTIONS, n=1)
        hint = f" (did you mean {close[0]!r}?)" if close else ""
        raise KeyError(f"Action not registered: {name}{hint}") from None


def get_action(name: str) -> ActionFn:
    return _lookup(name)[0]


def get_meta(name: str) -> ActionMeta:
    return _lookup(name)[1]


def list_actions() -> Dict[str, ActionMeta]:
    """Registered actions sorted by name."""
    return {name: _ACTIONS[name][1] for name in sorted(_ACTIONS)}


def validate_spec(spec: ActionSpec) -> Tuple[ActionMeta, Optional[BaseModel]]:
    """
    执行前校验一步脚本:
    1) 动作未注册 -> KeyError
    2) args 不符合入参模型 -> ValidationError
    3) 成功返回 (ActionMeta, 解析后的 params | None)
    """
    meta = get_meta(spec.name)
    if meta.params_model is None:
        if spec.args:
            raise ValueError(f"Action {spec.name} takes no arguments")
        return meta, None
    return meta, TypeAdapter(meta.params_model).validate_python(spec.args)
