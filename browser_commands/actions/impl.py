"""
Action implementations bound to the Browser facade:
- navigation & waits: visit / wait_for / screenshot
- element commands: click / right_click / click_link / keys / text / value / attribute
- typing: type / append / clear / wysiwyg
- widgets: select / select2 / radio / check / uncheck
- files & buttons: attach / press / press_and_wait_for
- gestures & dialogs: drag / drag_offset / accept_dialog / dismiss_dialog

Each action:
  1) Expects a Browser + validated params (Pydantic v2)
  2) Returns ActionResult, or raises ActionExecutionError on failure
"""

# @file purpose: Implement and register script actions.
from __future__ import annotations

from typing import Any, Awaitable

from browser_commands.core.browser import Browser
from browser_commands.core.errors import ActionExecutionError
from browser_commands.core.registry import action
from browser_commands.core.result import ActionResult

from .params import (
    AttachParams,
    AttributeParams,
    CheckParams,
    ClickLinkParams,
    DragOffsetParams,
    DragParams,
    FieldParams,
    KeysParams,
    NoParams,
    PressAndWaitParams,
    PressParams,
    RadioParams,
    ScreenshotParams,
    Select2Params,
    SelectorParams,
    SelectParams,
    TypeParams,
    ValueParams,
    VisitParams,
    WaitForParams,
    WysiwygParams,
)


async def _guarded(
    name: str,
    command: Awaitable[Any],
    message: str,
    *,
    selector: str | None = None,
    url: str | None = None,
    **details: Any,
) -> Any:
    """Await a Browser command, wrapping any failure in ActionExecutionError."""
    try:
        return await command
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action=name,
            message=message,
            selector=selector,
            url=url,
            details=details,
            cause=e,
        ) from e


# ------------------------------------------------------------------------------
# navigation & waits
# ------------------------------------------------------------------------------


@action("visit", params_model=VisitParams)
async def visit(browser: Browser, params: VisitParams) -> ActionResult:
    """Open a URL in the current page."""
    url = str(params.url)
    await _guarded("visit", browser.visit(url), "failed to open url", url=url)
    return ActionResult.success(step="visit", url=url)


@action("wait_for", params_model=WaitForParams)
async def wait_for(browser: Browser, params: WaitForParams) -> ActionResult:
    """Wait until a selector is visible."""
    await _guarded(
        "wait_for",
        browser.wait_for(params.selector, params.seconds),
        "element did not become visible in time",
        selector=params.selector,
    )
    return ActionResult.success(step="wait_for", selector=params.selector)


@action("screenshot", params_model=ScreenshotParams)
async def screenshot(browser: Browser, params: ScreenshotParams) -> ActionResult:
    """Save a PNG screenshot of the page."""
    await _guarded(
        "screenshot",
        browser.screenshot(params.path, full_page=params.full_page),
        "failed to take screenshot",
        path=params.path,
    )
    return ActionResult.success(step="screenshot", path=params.path, full_page=params.full_page)


# ------------------------------------------------------------------------------
# element commands
# ------------------------------------------------------------------------------


@action("click", params_model=SelectorParams)
async def click(browser: Browser, params: SelectorParams) -> ActionResult:
    """Click an element."""
    await _guarded(
        "click", browser.click(params.selector), "failed to click element", selector=params.selector
    )
    return ActionResult.success(step="click", selector=params.selector)


@action("right_click", params_model=SelectorParams)
async def right_click(browser: Browser, params: SelectorParams) -> ActionResult:
    """Right-click an element."""
    await _guarded(
        "right_click",
        browser.right_click(params.selector),
        "failed to right-click element",
        selector=params.selector,
    )
    return ActionResult.success(step="right_click", selector=params.selector)


@action("click_link", params_model=ClickLinkParams)
async def click_link(browser: Browser, params: ClickLinkParams) -> ActionResult:
    """Click the first link whose text contains the given text."""
    await _guarded(
        "click_link", browser.click_link(params.text), "failed to click link", text=params.text
    )
    return ActionResult.success(step="click_link", text=params.text)


@action("keys", params_model=KeysParams)
async def keys(browser: Browser, params: KeysParams) -> ActionResult:
    """Send keys ("{enter}", ["{shift}", "a"], ...) to an element."""
    await _guarded(
        "keys",
        browser.keys(params.selector, *params.keys),
        "failed to send keys",
        selector=params.selector,
    )
    return ActionResult.success(step="keys", selector=params.selector, count=len(params.keys))


@action("text", params_model=SelectorParams)
async def text(browser: Browser, params: SelectorParams) -> ActionResult:
    """Read the rendered text of an element."""
    txt = await _guarded(
        "text", browser.text(params.selector), "failed to read text", selector=params.selector
    )
    return ActionResult.extracted(txt, step="text", selector=params.selector)


@action("value", params_model=ValueParams)
async def value(browser: Browser, params: ValueParams) -> ActionResult:
    """Read a field's value, or set it directly by script."""
    if params.value is None:
        current = await _guarded(
            "value",
            browser.value(params.selector),
            "failed to read value",
            selector=params.selector,
        )
        return ActionResult.extracted(current, step="value", selector=params.selector)

    await _guarded(
        "value",
        browser.value(params.selector, params.value),
        "failed to set value",
        selector=params.selector,
    )
    return ActionResult.success(step="value", selector=params.selector)


@action("attribute", params_model=AttributeParams)
async def attribute(browser: Browser, params: AttributeParams) -> ActionResult:
    """Read an attribute of an element."""
    got = await _guarded(
        "attribute",
        browser.attribute(params.selector, params.attribute),
        "failed to read attribute",
        selector=params.selector,
        attribute=params.attribute,
    )
    return ActionResult.extracted(got, step="attribute", selector=params.selector)


# ------------------------------------------------------------------------------
# typing
# ------------------------------------------------------------------------------


@action("type", params_model=TypeParams)
async def type_action(browser: Browser, params: TypeParams) -> ActionResult:
    """
    Clear a field and type into it.
    Named type_action to avoid shadowing Python's built-in `type`.
    """
    await _guarded(
        "type",
        browser.type(params.field, params.value),
        "failed to input text",
        selector=params.field,
    )
    return ActionResult.success(step="type", selector=params.field, length=len(params.value))


@action("append", params_model=TypeParams)
async def append(browser: Browser, params: TypeParams) -> ActionResult:
    """Type into a field without clearing it."""
    await _guarded(
        "append",
        browser.append(params.field, params.value),
        "failed to append text",
        selector=params.field,
    )
    return ActionResult.success(step="append", selector=params.field, length=len(params.value))


@action("clear", params_model=FieldParams)
async def clear(browser: Browser, params: FieldParams) -> ActionResult:
    """Clear a field."""
    await _guarded(
        "clear", browser.clear(params.field), "failed to clear field", selector=params.field
    )
    return ActionResult.success(step="clear", selector=params.field)


@action("wysiwyg", params_model=WysiwygParams)
async def wysiwyg(browser: Browser, params: WysiwygParams) -> ActionResult:
    """Set the content of a rich-text editor (tinymce)."""
    await _guarded(
        "wysiwyg",
        browser.wysiwyg(params.kind, params.id, params.value),
        "failed to set editor content",
        selector=f"#{params.id}",
        kind=params.kind,
    )
    return ActionResult.success(step="wysiwyg", kind=params.kind, id=params.id)


# ------------------------------------------------------------------------------
# selection widgets
# ------------------------------------------------------------------------------


@action("select", params_model=SelectParams)
async def select(browser: Browser, params: SelectParams) -> ActionResult:
    """Select an option of a native <select> (random when no value)."""
    command = (
        browser.select_by_selector(params.field, params.value)
        if params.by_selector
        else browser.select(params.field, params.value)
    )
    await _guarded(
        "select", command, "failed to select option", selector=params.field, value=params.value
    )
    return ActionResult.success(step="select", selector=params.field, value=params.value)


@action("select2", params_model=Select2Params)
async def select2(browser: Browser, params: Select2Params) -> ActionResult:
    """Select value(s) of a Select2 widget."""
    await _guarded(
        "select2",
        browser.select2(params.field, params.value, params.wait),
        "failed to select from select2 widget",
        selector=params.field,
        value=params.value,
    )
    return ActionResult.success(step="select2", selector=params.field, value=params.value)


@action("radio", params_model=RadioParams)
async def radio(browser: Browser, params: RadioParams) -> ActionResult:
    """Select a radio button by group name and value."""
    await _guarded(
        "radio",
        browser.radio(params.field, params.value),
        "failed to select radio button",
        selector=params.field,
        value=params.value,
    )
    return ActionResult.success(step="radio", selector=params.field, value=params.value)


@action("check", params_model=CheckParams)
async def check(browser: Browser, params: CheckParams) -> ActionResult:
    """Check a checkbox (no-op if already checked)."""
    await _guarded(
        "check", browser.check(params.field, params.value), "failed to check", selector=params.field
    )
    return ActionResult.success(step="check", selector=params.field)


@action("uncheck", params_model=CheckParams)
async def uncheck(browser: Browser, params: CheckParams) -> ActionResult:
    """Uncheck a checkbox (no-op if already unchecked)."""
    await _guarded(
        "uncheck",
        browser.uncheck(params.field, params.value),
        "failed to uncheck",
        selector=params.field,
    )
    return ActionResult.success(step="uncheck", selector=params.field)


# ------------------------------------------------------------------------------
# files & buttons
# ------------------------------------------------------------------------------


@action("attach", params_model=AttachParams)
async def attach(browser: Browser, params: AttachParams) -> ActionResult:
    """Attach a local file to a file input."""
    await _guarded(
        "attach",
        browser.attach(params.field, params.path),
        "failed to attach file",
        selector=params.field,
        path=params.path,
    )
    return ActionResult.success(step="attach", selector=params.field, file=params.path)


@action("press", params_model=PressParams)
async def press(browser: Browser, params: PressParams) -> ActionResult:
    """Press a button by selector, name, value or text."""
    await _guarded(
        "press", browser.press(params.button), "failed to press button", selector=params.button
    )
    return ActionResult.success(step="press", selector=params.button)


@action("press_and_wait_for", params_model=PressAndWaitParams)
async def press_and_wait_for(browser: Browser, params: PressAndWaitParams) -> ActionResult:
    """Press a button and wait until it is enabled again."""
    await _guarded(
        "press_and_wait_for",
        browser.press_and_wait_for(params.button, params.seconds),
        "button did not re-enable in time",
        selector=params.button,
        seconds=params.seconds,
    )
    return ActionResult.success(step="press_and_wait_for", selector=params.button)


# ------------------------------------------------------------------------------
# gestures & dialogs
# ------------------------------------------------------------------------------


@action("drag", params_model=DragParams)
async def drag(browser: Browser, params: DragParams) -> ActionResult:
    """Drag one element onto another."""
    await _guarded(
        "drag",
        browser.drag(params.source, params.target),
        "failed to drag element",
        selector=params.source,
        target=params.target,
    )
    return ActionResult.success(step="drag", selector=params.source, target=params.target)


@action("drag_offset", params_model=DragOffsetParams)
async def drag_offset(browser: Browser, params: DragOffsetParams) -> ActionResult:
    """Drag an element by a pixel offset."""
    await _guarded(
        "drag_offset",
        browser.drag_offset(params.selector, params.x, params.y),
        "failed to drag element",
        selector=params.selector,
        x=params.x,
        y=params.y,
    )
    return ActionResult.success(
        step="drag_offset", selector=params.selector, x=params.x, y=params.y
    )


@action("accept_dialog", params_model=NoParams)
async def accept_dialog(browser: Browser, params: NoParams) -> ActionResult:
    """Accept the open native dialog."""
    await _guarded("accept_dialog", browser.accept_dialog(), "failed to accept dialog")
    return ActionResult.success(step="accept_dialog")


@action("dismiss_dialog", params_model=NoParams)
async def dismiss_dialog(browser: Browser, params: NoParams) -> ActionResult:
    """Dismiss the open native dialog."""
    await _guarded("dismiss_dialog", browser.dismiss_dialog(), "failed to dismiss dialog")
    return ActionResult.success(step="dismiss_dialog")
