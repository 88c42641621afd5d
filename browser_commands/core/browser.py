"""
Browser: high-level interaction verbs bound to one BrowserDriver context.

Each verb resolves its target through ElementResolver, issues one or more
driver primitives, and returns the Browser so calls can be chained:

    await (await browser.type("email", "a@b.c")).press("Sign in")

Failures from the resolver or the driver propagate unchanged; nothing done
before the failure is rolled back. The only internal loops are the bounded
waits in `wait_using()`.
"""
# @file purpose: Interaction facade (click/type/select/check/drag/attach/dialogs).

from __future__ import annotations

import asyncio
import inspect
import logging
import random
import time
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from ..io.driver import STALLED, BrowserDriver, ElementHandle
from . import scripts
from .attach import delivery_for
from .errors import MissingElementError, TimeoutError, UnsupportedWidgetError
from .keys import parse_keys
from .resolver import ElementResolver
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

WaitCallback = Callable[[], Union[Any, Awaitable[Any]]]


def _as_string(value: Any) -> str:
    """Stringify for option-value comparison: None is "", booleans are "1"/""."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


class Browser:
    def __init__(
        self,
        driver: BrowserDriver,
        ctx: Any,
        resolver: Optional[ElementResolver] = None,
        *,
        config: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.driver = driver
        self.ctx = ctx
        self.config = config or default_settings
        self.resolver = resolver or ElementResolver(
            driver,
            ctx,
            prefix=self.config.selector_prefix,
            html_attribute=self.config.selector_html_attribute,
        )
        self.rng = rng or random.Random()

    # ---------------- navigation & scripting ----------------

    async def visit(self, url: str) -> "Browser":
        await self.driver.goto(self.ctx, url)
        return self

    async def script(self, *sources: str) -> list[Any]:
        """Execute each script in turn and return their results."""
        return [await self.driver.execute_script(self.ctx, source) for source in sources]

    async def screenshot(self, path: str, *, full_page: bool = True) -> "Browser":
        await self.driver.screenshot(self.ctx, path, full_page=full_page)
        return self

    async def ensure_query_helper(self) -> None:
        """Install the DOM query helper used by click_link() and select2()."""
        await self.driver.execute_script(self.ctx, scripts.QUERY_HELPER)

    # ---------------- lookups ----------------

    async def elements(self, selector: str) -> list[ElementHandle]:
        return await self.resolver.all(selector)

    async def element(self, selector: str) -> Optional[ElementHandle]:
        return await self.resolver.find(selector)

    # ---------------- element commands ----------------

    async def click(self, selector: str) -> "Browser":
        element = await self.resolver.find_or_fail(selector)
        await element.click()
        return self

    async def right_click(self, selector: str) -> "Browser":
        element = await self.resolver.find_or_fail(selector)
        await element.click(button="right")
        return self

    async def click_link(self, link: str) -> "Browser":
        """
        Click the first anchor whose text contains `link` (case-sensitive).
        The click is dispatched by script, which also reaches anchors
        outside the viewport.
        """
        await self.ensure_query_helper()
        clicked = await self.driver.execute_script(
            self.ctx, scripts.CLICK_FIRST_CONTAINING, self.resolver.format("a"), link
        )
        # STALLED: the click opened a native dialog, so the link was found
        if clicked is not STALLED and not clicked:
            raise MissingElementError(f"a:contains({link})")
        return self

    async def value(self, selector: str, value: Any = None) -> Union["Browser", Optional[str]]:
        """
        Get the value of a field, or set it directly when `value` is given.
        Setting bypasses keyboard events entirely.
        """
        if value is None:
            element = await self.resolver.find_or_fail(selector)
            return await element.get_attribute("value")

        found = await self.driver.execute_script(
            self.ctx, scripts.SET_VALUE, self.resolver.format(selector), str(value)
        )
        if found is not STALLED and not found:
            raise MissingElementError(selector)
        return self

    async def text(self, selector: str) -> str:
        element = await self.resolver.find_or_fail(selector)
        return await element.text()

    async def attribute(self, selector: str, attribute: str) -> Optional[str]:
        element = await self.resolver.find_or_fail(selector)
        return await element.get_attribute(attribute)

    async def keys(self, selector: str, *keys: Any) -> "Browser":
        """Send keys, e.g. keys("#q", "hello", "{enter}") or keys("#q", ["{shift}", "a"])."""
        parsed = parse_keys(keys)
        element = await self.resolver.find_or_fail(selector)
        await element.send_keys(parsed)
        return self

    # ---------------- typing ----------------

    async def type(self, field: str, value: Any) -> "Browser":
        element = await self.resolver.resolve_for_typing(field)
        await element.clear()
        await element.send_keys([str(value)])
        return self

    async def append(self, field: str, value: Any) -> "Browser":
        element = await self.resolver.resolve_for_typing(field)
        await element.send_keys([str(value)])
        return self

    async def clear(self, field: str) -> "Browser":
        element = await self.resolver.resolve_for_typing(field)
        await element.clear()
        return self

    async def wysiwyg(self, kind: str, element_id: str, value: Any) -> "Browser":
        """Set the content of a rich-text editor. `element_id` is a bare id, no '#'."""
        if kind != "tinymce":
            raise UnsupportedWidgetError(kind)

        await self.wait_for(f"#{element_id}_ifr")
        content = str(value).replace('"', "&quot;").replace("'", "&#039;")
        await self.driver.execute_script(
            self.ctx, scripts.TINYMCE_SET_CONTENT, element_id, content
        )
        return self

    # ---------------- selection widgets ----------------

    async def select(self, field: str, value: Any = None) -> "Browser":
        """
        Select the option whose value equals `value`, or a random option
        when `value` is None. No matching option is a silent no-op.
        """
        element = await self.resolver.resolve_for_selection(field)
        await self._choose_option(element, field, value)
        return self

    async def select_by_selector(self, selector: str, value: Any = None) -> "Browser":
        element = await self.resolver.first_or_fail([selector])
        await self._choose_option(element, selector, value)
        return self

    async def _choose_option(self, element: ElementHandle, field: str, value: Any) -> None:
        options = await element.find_all("option")

        if value is None:
            if not options:
                raise MissingElementError(f"{field} option")
            await self.rng.choice(options).click()
            return

        wanted = _as_string(value)
        for option in options:
            if _as_string(await option.get_attribute("value")) == wanted:
                await option.click()
                return
        logger.debug("select %r: no option with value %r, nothing selected", field, wanted)

    async def select2(
        self,
        field: str,
        value: Union[None, str, int, Iterable[Any]] = None,
        wait: Optional[float] = None,
    ) -> "Browser":
        """
        Select value(s) of a Select2 widget, or a random result when `value`
        is None.

        With a search box, each value is typed and the widget gets `wait`
        seconds (default `select2_settle_seconds`) to load results before the
        highlighted one is clicked. Without one, the result containing the
        value is clicked by script.
        """
        wait = self.config.select2_settle_seconds if wait is None else wait
        await self.click(field)

        if value is None:
            await self.wait_for(f"{scripts.SELECT2_RESULTS_LIST} {scripts.SELECT2_HIGHLIGHTED}")
            await self.driver.execute_script(self.ctx, scripts.SELECT2_HIGHLIGHT_RANDOM)
            await self.click(scripts.SELECT2_HIGHLIGHTED)
            return self

        values = [value] if isinstance(value, (str, int, float)) else list(value)

        search = await self.element(scripts.SELECT2_SEARCH_FIELD)
        if search is not None:
            for item in values:
                await search.send_keys([str(item)])
                # fixed settle delay: results arrive over ajax with no completion signal
                await asyncio.sleep(wait)
                await self.click(scripts.SELECT2_HIGHLIGHTED)
            return self

        await self.ensure_query_helper()
        for item in values:
            clicked = await self.driver.execute_script(
                self.ctx, scripts.CLICK_FIRST_CONTAINING, scripts.SELECT2_RESULTS, str(item)
            )
            if clicked is not STALLED and not clicked:
                raise MissingElementError(f"{scripts.SELECT2_RESULTS}:contains({item})")
        return self

    async def radio(self, field: str, value: Any) -> "Browser":
        element = await self.resolver.resolve_for_radio_selection(field, value)
        await element.click()
        return self

    async def check(self, field: Optional[str], value: Any = None) -> "Browser":
        element = await self.resolver.resolve_for_checking(field, value)
        if not await element.is_selected():
            await element.click()
        return self

    async def uncheck(self, field: Optional[str], value: Any = None) -> "Browser":
        element = await self.resolver.resolve_for_checking(field, value)
        if await element.is_selected():
            await element.click()
        return self

    # ---------------- files & buttons ----------------

    async def attach(self, field: str, path: str) -> "Browser":
        element = await self.resolver.resolve_for_attachment(field)
        browser_name = await self.driver.browser_name(self.ctx)
        delivery = delivery_for(browser_name)
        logger.debug("attach %r via %s (%s)", path, delivery.__name__, browser_name)
        await delivery(element, path)
        return self

    async def press(self, button: str) -> "Browser":
        element = await self.resolver.resolve_for_button_press(button)
        await element.click()
        return self

    async def press_and_wait_for(self, button: str, seconds: float = 5) -> "Browser":
        """
        Press a button, then poll until it is enabled again. The same handle
        is polled throughout, so a removed button surfaces as a driver error.
        """
        element = await self.resolver.resolve_for_button_press(button)
        await element.click()
        return await self.wait_using(
            seconds,
            self.config.poll_interval_ms,
            element.is_enabled,
            f"Waited {seconds} seconds for button [{button}] to be enabled.",
        )

    # ---------------- drag ----------------

    async def drag(self, source: str, target: str) -> "Browser":
        start = await self.resolver.find_or_fail(source)
        end = await self.resolver.find_or_fail(target)
        await self.driver.drag_and_drop(self.ctx, start, end)
        return self

    async def drag_up(self, selector: str, offset: int) -> "Browser":
        return await self.drag_offset(selector, 0, -offset)

    async def drag_down(self, selector: str, offset: int) -> "Browser":
        return await self.drag_offset(selector, 0, offset)

    async def drag_left(self, selector: str, offset: int) -> "Browser":
        return await self.drag_offset(selector, -offset, 0)

    async def drag_right(self, selector: str, offset: int) -> "Browser":
        return await self.drag_offset(selector, offset, 0)

    async def drag_offset(self, selector: str, x: int = 0, y: int = 0) -> "Browser":
        element = await self.resolver.find_or_fail(selector)
        await self.driver.drag_by(self.ctx, element, x, y)
        return self

    # ---------------- dialogs ----------------

    async def accept_dialog(self) -> "Browser":
        await self.driver.accept_dialog(self.ctx)
        return self

    async def dismiss_dialog(self) -> "Browser":
        await self.driver.dismiss_dialog(self.ctx)
        return self

    # ---------------- waiting ----------------

    async def pause(self, milliseconds: float) -> "Browser":
        await asyncio.sleep(milliseconds / 1000)
        return self

    async def wait_for(self, selector: str, seconds: Optional[float] = None) -> "Browser":
        """Wait until `selector` resolves to a visible element."""
        seconds = self.config.default_wait_seconds if seconds is None else seconds

        async def visible() -> bool:
            element = await self.resolver.find_or_fail(selector)
            return await element.is_displayed()

        return await self.wait_using(
            seconds,
            self.config.poll_interval_ms,
            visible,
            f"Waited {seconds} seconds for selector [{selector}].",
        )

    async def wait_using(
        self,
        seconds: float,
        interval_ms: float,
        callback: WaitCallback,
        message: Optional[str] = None,
    ) -> "Browser":
        """
        Poll `callback` every `interval_ms` until it returns a truthy value.
        Raises TimeoutError once `seconds` have elapsed.
        """
        await self.pause(interval_ms)
        deadline = time.monotonic() + seconds

        while True:
            try:
                result = callback()
                if inspect.isawaitable(result):
                    result = await result
                if result:
                    return self
            except MissingElementError:
                pass  # not rendered yet

            if time.monotonic() > deadline:
                raise TimeoutError(
                    message or f"Waited {seconds} seconds for callback.", seconds=seconds
                )
            await self.pause(interval_ms)
