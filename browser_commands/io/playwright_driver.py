"""
Playwright-based BrowserDriver implementation.

Conforms to io/driver.py's BrowserDriver Protocol:
- start() / stop()
- new_context() / close_context(ctx)
- goto(ctx, url)
- find_all(ctx, selector) / find_by_id(ctx, id) -> PlaywrightElement
- execute_script(ctx, script, *args)
- accept_dialog(ctx) / dismiss_dialog(ctx)
- drag_and_drop(ctx, source, target) / drag_by(ctx, element, dx, dy)
- browser_name(ctx)
- screenshot(ctx, path)

Native dialogs: a listener queues every alert/confirm/prompt per page
instead of letting Playwright auto-dismiss it. Primitives run through
`_guard()`, which hands control back to the caller as soon as a dialog
opens; the stalled primitive finishes once the dialog is handled.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Literal, Optional, Sequence, Tuple

from playwright.async_api import (
    Browser,
    BrowserContext,
    Dialog,
    ElementHandle as PwElementHandle,
    Page,
    Playwright,
    async_playwright,
)

from ..core.errors import BrowserCommandError, DialogNotOpenError
from ..core.keys import Chord, Key, KeyToken
from .driver import STALLED

logger = logging.getLogger(__name__)

# WebDriver-like attribute read: live property first, then the HTML attribute.
_GET_ATTRIBUTE = """(el, name) => {
    const prop = el[name];
    if (typeof prop === 'boolean') { return prop ? 'true' : null; }
    if (typeof prop === 'string' || typeof prop === 'number') { return String(prop); }
    return el.getAttribute(name);
}"""

_IS_SELECTED = "el => el.tagName === 'OPTION' ? el.selected : !!el.checked"


class PlaywrightElement:
    """ElementHandle protocol over a Playwright `ElementHandle`."""

    def __init__(self, driver: "PlaywrightDriver", page: Page, handle: PwElementHandle) -> None:
        self._driver = driver
        self._page = page
        self.handle = handle

    def __repr__(self) -> str:
        return f"PlaywrightElement({self.handle!r})"

    # ---------------- interactions ----------------

    async def click(self, *, button: Literal["left", "right"] = "left") -> None:
        # <option> has no box of its own inside a closed <select>
        if await self.handle.evaluate("el => el.tagName") == "OPTION":
            await self._driver._guard(self._page, self._select_option())
            return
        await self._driver._guard(self._page, self.handle.click(button=button))

    async def send_keys(self, keys: Sequence[KeyToken]) -> None:
        await self._driver._guard(self._page, self._send_keys(keys))

    async def clear(self) -> None:
        await self.handle.fill("")

    async def upload(self, file_path: str) -> None:
        """
        Upload a local file to <input type="file"> via set_input_files().
        """
        p = Path(file_path)
        if not p.exists():
            raise FileNotFoundError(f"upload(): file not found: {file_path}")
        await self.handle.set_input_files(str(p))

    # ---------------- state ----------------

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self.handle.evaluate(_GET_ATTRIBUTE, name)

    async def text(self) -> str:
        return (await self.handle.inner_text()).strip()

    async def is_enabled(self) -> bool:
        return await self.handle.is_enabled()

    async def is_selected(self) -> bool:
        return bool(await self.handle.evaluate(_IS_SELECTED))

    async def is_displayed(self) -> bool:
        return await self.handle.is_visible()

    async def find_all(self, selector: str) -> List["PlaywrightElement"]:
        handles = await self.handle.query_selector_all(selector)
        return [PlaywrightElement(self._driver, self._page, h) for h in handles]

    # ---------------- internals ----------------

    async def _send_keys(self, keys: Sequence[KeyToken]) -> None:
        for token in keys:
            if isinstance(token, Chord):
                for combo in token.combinations():
                    await self.handle.press(combo)
            elif isinstance(token, Key):
                await self.handle.press(token.value)
            else:
                await self.handle.type(token)

    async def _select_option(self) -> None:
        owner = (await self.handle.evaluate_handle("o => o.closest('select')")).as_element()
        if owner is None:
            raise BrowserCommandError("<option> is not inside a <select>")
        await owner.select_option(element=self.handle)


class PlaywrightDriver:
    """
    A concrete BrowserDriver based on Playwright.
    - `ctx` in this implementation is a Playwright `Page`.
    - Each `new_context()` creates an incognito BrowserContext + a new Page.
    """

    def __init__(
        self,
        *,
        browser: str = "chromium",
        headless: bool = True,
        slow_mo_ms: int = 0,
        default_timeout_ms: int = 30_000,
    ) -> None:
        self.browser = browser
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.default_timeout_ms = default_timeout_ms

        self._pw: Optional[Playwright] = None  # playwright instance
        self._browser: Optional[Browser] = None
        self._page_to_context: Dict[Page, BrowserContext] = {}
        self._dialogs: Dict[Page, List[Dialog]] = {}
        self._dialog_open: Dict[Page, asyncio.Event] = {}
        self._stalled: Dict[Page, List[asyncio.Future]] = {}

    # ---------------- lifecycle ----------------

    async def start(self) -> None:
        """Launch Playwright and the configured browser once."""
        if self._browser is not None:
            return
        pw = await async_playwright().start()
        self._pw = pw
        browser_type = getattr(pw, self.browser)
        self._browser = await browser_type.launch(headless=self.headless, slow_mo=self.slow_mo_ms)
        logger.debug("launched %s (headless=%s)", self.browser, self.headless)

    async def stop(self) -> None:
        """Close all contexts and stop Playwright."""
        try:
            for page in list(self._page_to_context):
                await self.close_context(page)
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._pw is not None:
                await self._pw.stop()
            self._pw = None
            self._browser = None

    async def new_context(self) -> Page:
        """
        Create a fresh incognito context + page.
        Returns the Page object to be used as `ctx`.
        """
        self._ensure_started()
        assert self._browser is not None
        ctx = await self._browser.new_context()
        ctx.set_default_timeout(self.default_timeout_ms)
        page = await ctx.new_page()
        self._page_to_context[page] = ctx
        self._dialogs[page] = []
        self._dialog_open[page] = asyncio.Event()
        self._stalled[page] = []
        page.on("dialog", lambda dialog: self._on_dialog(page, dialog))
        return page

    async def close_context(self, ctx: Any) -> None:
        """Close the page and its owning context."""
        page = self._as_page(ctx)
        context = self._page_to_context.pop(page, None)
        self._dialogs.pop(page, None)
        self._dialog_open.pop(page, None)
        for task in self._stalled.pop(page, []):
            task.cancel()
        try:
            await page.close()
        finally:
            if context is not None:
                await context.close()

    # ---------------- primitives ----------------

    async def goto(self, ctx: Any, url: str, *, timeout_ms: Optional[int] = None) -> None:
        page = self._as_page(ctx)
        await page.goto(url, timeout=timeout_ms or self.default_timeout_ms, wait_until="load")

    async def find_all(self, ctx: Any, selector: str) -> List[PlaywrightElement]:
        page = self._as_page(ctx)
        handles = await page.query_selector_all(selector)
        return [PlaywrightElement(self, page, h) for h in handles]

    async def find_by_id(self, ctx: Any, element_id: str) -> Optional[PlaywrightElement]:
        page = self._as_page(ctx)
        handle = await page.query_selector(f"id={element_id}")
        return PlaywrightElement(self, page, handle) if handle is not None else None

    async def execute_script(self, ctx: Any, script: str, *args: Any) -> Any:
        """Run `script` as a function body; `arguments[i]` is `args[i]`."""
        page = self._as_page(ctx)
        wrapped = "(args) => (function () {\n" + script + "\n}).apply(null, args)"
        payload = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        return await self._guard(page, page.evaluate(wrapped, payload))

    async def accept_dialog(self, ctx: Any) -> None:
        await self._handle_dialog(ctx, accept=True)

    async def dismiss_dialog(self, ctx: Any) -> None:
        await self._handle_dialog(ctx, accept=False)

    async def drag_and_drop(self, ctx: Any, source: Any, target: Any) -> None:
        page = self._as_page(ctx)
        start = await self._center(source)
        end = await self._center(target)
        await self._guard(page, self._mouse_drag(page, start, end))

    async def drag_by(self, ctx: Any, element: Any, dx: int, dy: int) -> None:
        page = self._as_page(ctx)
        start = await self._center(element)
        await self._guard(page, self._mouse_drag(page, start, (start[0] + dx, start[1] + dy)))

    async def browser_name(self, ctx: Any) -> str:
        self._ensure_started()
        assert self._browser is not None
        return self._browser.browser_type.name

    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None:
        page = self._as_page(ctx)
        # ensure parent dir exists
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await page.screenshot(path=path, full_page=full_page)

    # ---------------- dialogs ----------------

    def _on_dialog(self, page: Page, dialog: Dialog) -> None:
        logger.debug("dialog opened: %s %r", dialog.type, dialog.message)
        self._dialogs.setdefault(page, []).append(dialog)
        self._dialog_event(page).set()

    async def _handle_dialog(self, ctx: Any, *, accept: bool) -> None:
        page = self._as_page(ctx)
        pending = self._dialogs.get(page) or []
        if not pending:
            raise DialogNotOpenError("no native dialog is currently open")
        dialog = pending.pop(0)
        if accept:
            await dialog.accept()
        else:
            await dialog.dismiss()
        if pending:
            return

        self._dialog_event(page).clear()
        stalled, self._stalled[page] = self._stalled.get(page, []), []
        for task in stalled:
            await self._guard(page, task)

    def _dialog_event(self, page: Page) -> asyncio.Event:
        return self._dialog_open.setdefault(page, asyncio.Event())

    async def _guard(self, page: Page, action: Awaitable[Any]) -> Any:
        """Await `action` unless a native dialog opens first; then park it and return STALLED."""
        task = asyncio.ensure_future(action)
        opened = asyncio.ensure_future(self._dialog_event(page).wait())
        try:
            await asyncio.wait({task, opened}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            opened.cancel()
        if task.done():
            return task.result()
        self._stalled.setdefault(page, []).append(task)
        logger.debug("primitive stalled by an open dialog")
        return STALLED

    # ---------------- internals ----------------

    @staticmethod
    async def _mouse_drag(page: Page, start: Tuple[float, float], end: Tuple[float, float]) -> None:
        await page.mouse.move(*start)
        await page.mouse.down()
        await page.mouse.move(*end, steps=10)
        await page.mouse.up()

    @staticmethod
    async def _center(element: Any) -> Tuple[float, float]:
        if not isinstance(element, PlaywrightElement):
            raise TypeError("element must be a PlaywrightElement (returned by find_all()).")
        await element.handle.scroll_into_view_if_needed()
        box = await element.handle.bounding_box()
        if box is None:
            raise BrowserCommandError("element has no bounding box; cannot drag it")
        return box["x"] + box["width"] / 2, box["y"] + box["height"] / 2

    def _ensure_started(self) -> None:
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")

    @staticmethod
    def _as_page(ctx: Any) -> Page:
        if not isinstance(ctx, Page):
            raise TypeError("ctx must be a Playwright Page (returned by new_context()).")
        return ctx
