"""
Browser driver protocol (abstraction).

This Protocol defines the primitive browser surface that the `Browser`
facade and `ElementResolver` rely on. It allows plugging different backends
(e.g., Playwright, an in-memory fake in tests) without changing the verbs.

Notes:
- `ctx` represents an execution context for a sequence of commands.
  In the Playwright implementation it is a `Page` created via `new_context()`.
- Element handles are only valid for the current page state; callers
  re-resolve them per command instead of keeping them around.
- A primitive interrupted by a native dialog returns `STALLED` instead of
  its result.
- `execute_script()` receives a function body that reads its inputs from
  `arguments`, so values are passed as data and never spliced into the
  script text.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol, Sequence

from ..core.keys import KeyToken


class _Stalled:
    def __repr__(self) -> str:
        return "STALLED"


# Returned by a primitive that a native dialog interrupted. The primitive has
# been dispatched and finishes once the dialog is accepted or dismissed.
STALLED: Any = _Stalled()


class ElementHandle(Protocol):
    # -------- interactions --------
    async def click(self, *, button: Literal["left", "right"] = "left") -> None: ...
    async def send_keys(self, keys: Sequence[KeyToken]) -> None: ...
    async def clear(self) -> None: ...
    async def upload(self, file_path: str) -> None: ...

    # -------- state --------
    async def get_attribute(self, name: str) -> str | None: ...
    async def text(self) -> str: ...
    async def is_enabled(self) -> bool: ...
    async def is_selected(self) -> bool: ...
    async def is_displayed(self) -> bool: ...

    # -------- lookups scoped to this element --------
    async def find_all(self, selector: str) -> list["ElementHandle"]: ...


class BrowserDriver(Protocol):
    # -------- lifecycle --------
    async def start(self) -> None: ...
    async def stop(self) -> None: ...
    async def new_context(self) -> Any: ...
    async def close_context(self, ctx: Any) -> None: ...

    # -------- navigation --------
    async def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None: ...

    # -------- element lookup --------
    async def find_all(self, ctx: Any, selector: str) -> list[ElementHandle]: ...
    async def find_by_id(self, ctx: Any, element_id: str) -> ElementHandle | None: ...

    # -------- scripting --------
    async def execute_script(self, ctx: Any, script: str, *args: Any) -> Any: ...

    # -------- native dialogs --------
    async def accept_dialog(self, ctx: Any) -> None: ...
    async def dismiss_dialog(self, ctx: Any) -> None: ...

    # -------- gestures --------
    async def drag_and_drop(
        self, ctx: Any, source: ElementHandle, target: ElementHandle
    ) -> None: ...
    async def drag_by(self, ctx: Any, element: ElementHandle, dx: int, dy: int) -> None: ...

    # -------- capabilities & utilities --------
    async def browser_name(self, ctx: Any) -> str: ...
    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None: ...
