"""
定义项目级异常类型，统一错误语义与捕获边界。
- BrowserCommandError: 所有自定义异常的基类
- MissingElementError: 选择器没有解析到任何元素
- InvalidTargetError: 按钮等目标无法定位或参数不足
- UnsupportedWidgetError: 不支持的控件类型（如未知的 wysiwyg 编辑器）
- UnknownKeyError: 按键序列中出现未知的控制键名
- DialogNotOpenError: 当前没有打开的原生对话框
- TimeoutError: 有界等待/轮询超时（避免混用内置 TimeoutError）
- ActionExecutionError: 动作层（registry/runner）统一包装的执行期错误
"""
# @file purpose: Define error taxonomy for browser-commands.

from typing import Any, Iterable


class BrowserCommandError(Exception):
    """Base class for all custom errors in browser-commands."""


class MissingElementError(BrowserCommandError):
    """Raised when a selector resolves to no element."""

    def __init__(
        self,
        selector: str,
        message: str | None = None,
        *,
        tried: Iterable[str] | None = None,
    ) -> None:
        super().__init__(message or f"Unable to locate element [{selector}].")
        self.selector: str = selector
        self.tried: list[str] = list(tried or [])

    def __str__(self) -> str:
        text = super().__str__()
        if self.tried:
            return f"{text} | tried={self.tried}"
        return text


class InvalidTargetError(BrowserCommandError):
    """Raised when a button (or other labelled target) cannot be located."""

    def __init__(self, target: str, message: str | None = None) -> None:
        super().__init__(message or f"Unable to locate button [{target}].")
        self.target: str = target


class UnsupportedWidgetError(BrowserCommandError):
    """Raised for widget kinds this layer does not know how to drive."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unsupported wysiwyg [{kind}].")
        self.kind: str = kind


class UnknownKeyError(BrowserCommandError):
    """Raised when a `{name}` key token names no known control key."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown key [{name}].")
        self.name: str = name


class DialogNotOpenError(BrowserCommandError):
    """Raised by a session asked to handle a dialog when none is open."""


class TimeoutError(BrowserCommandError):
    """Raised when a bounded wait or poll exceeds its deadline."""

    def __init__(self, message: str, *, seconds: float | None = None) -> None:
        super().__init__(message)
        self.seconds: float | None = seconds


class ActionExecutionError(BrowserCommandError):
    """
    Raised when an action fails to execute.
    动作执行期错误（元素缺失、超时、脚本异常等）。
    统一封装上下文，便于 CLI/编排层打印一致的信息与诊断。
    """

    def __init__(
        self,
        action: str,
        message: str,
        *,
        selector: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.action: str = action
        self.selector: str | None = selector
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}
        self.cause: BaseException | None = cause

    def __str__(self) -> str:
        parts = [f"[{self.action}] {super().__str__()}"]
        if self.selector:
            parts.append(f"selector={self.selector}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.cause is not None:
            parts.append(f"cause={self.cause}")
        if self.details:
            # 简单序列化 details，避免过长
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)
