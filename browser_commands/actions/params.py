"""
入参模型: 定义各动作的 Pydantic v2 参数约束。
Why: 在 脚本 → 执行器 的边界先做强校验, 拦截坏数据, 统一错误结构。
"""
# @file purpose: Define parameter schemas for registered actions using Pydantic v2.

from typing import Annotated, Any, Union

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from browser_commands.core.errors import UnknownKeyError
from browser_commands.core.keys import parse_keys

# 辅助约束类型
NonEmptyStr = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]
WaitSeconds = Annotated[float, Field(gt=0, le=60)]
TextLimited = Annotated[str, Field(max_length=4000)]
OptionValue = Union[str, int]


class NoParams(BaseModel):
    """Actions that take no arguments."""

    model_config = ConfigDict(extra="forbid")


class VisitParams(BaseModel):
    url: AnyHttpUrl


class SelectorParams(BaseModel):
    """Parameters for actions addressing one element: click, right_click, text."""

    selector: NonEmptyStr


class WaitForParams(BaseModel):
    selector: NonEmptyStr
    seconds: WaitSeconds | None = None


class ClickLinkParams(BaseModel):
    text: NonEmptyStr


class TypeParams(BaseModel):
    """Parameters for type and append."""

    field: NonEmptyStr
    value: TextLimited


class FieldParams(BaseModel):
    field: NonEmptyStr


class KeysParams(BaseModel):
    selector: NonEmptyStr
    keys: list[Union[str, list[str]]] = Field(..., min_length=1)

    @field_validator("keys")
    @classmethod
    def _known_keys(cls, v: list[Any]) -> list[Any]:
        try:
            parse_keys(v)
        except UnknownKeyError as e:
            raise ValueError(str(e)) from e
        return v


class ValueParams(BaseModel):
    """Read a field's value, or set it when `value` is given."""

    selector: NonEmptyStr
    value: str | None = None


class AttributeParams(BaseModel):
    selector: NonEmptyStr
    attribute: NonEmptyStr


class SelectParams(BaseModel):
    """Native <select>. `value=None` picks a random option."""

    field: NonEmptyStr
    value: OptionValue | None = None
    by_selector: bool = False


class Select2Params(BaseModel):
    field: NonEmptyStr
    value: Union[OptionValue, list[OptionValue], None] = None
    wait: Annotated[float, Field(ge=0, le=60)] | None = None


class RadioParams(BaseModel):
    field: NonEmptyStr
    value: OptionValue


class CheckParams(BaseModel):
    field: NonEmptyStr
    value: OptionValue | None = None


class AttachParams(BaseModel):
    field: NonEmptyStr
    path: NonEmptyStr


class PressParams(BaseModel):
    button: NonEmptyStr


class PressAndWaitParams(BaseModel):
    button: NonEmptyStr
    seconds: WaitSeconds = 5


class DragParams(BaseModel):
    source: NonEmptyStr
    target: NonEmptyStr


class DragOffsetParams(BaseModel):
    selector: NonEmptyStr
    x: int = 0
    y: int = 0


class WysiwygParams(BaseModel):
    kind: NonEmptyStr
    id: NonEmptyStr
    value: TextLimited


class ScreenshotParams(BaseModel):
    path: NonEmptyStr = Field(..., description="Where to save PNG file")
    full_page: bool = True
