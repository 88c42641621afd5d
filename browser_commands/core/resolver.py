"""
Selector resolution.

Turns human-authored selectors and field names into element handles:
- `@token` becomes `[dusk="token"]` (attribute name configurable);
- page-level aliases registered with `page_elements()` are substituted,
  longest alias first;
- `#id` is looked up by id directly, ignoring the scope prefix;
- everything else is scoped under `prefix` ("body" by default), except XPath.

Each `resolve_for_*` mode tries a widget-specific selector before falling
back to the raw selector, and raises `MissingElementError` when nothing
matches.
"""
# @file purpose: Resolve symbolic selectors into element handles.

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from ..io.driver import BrowserDriver, ElementHandle
from .errors import InvalidTargetError, MissingElementError

logger = logging.getLogger(__name__)

_ID_SELECTOR = re.compile(r"^#[\w\-:]+$")
_XPATH_PREFIXES = ("//", "(//", "xpath=")


def css_string(value: Any) -> str:
    """Quote a value for use inside a CSS attribute selector."""
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


class ElementResolver:
    def __init__(
        self,
        driver: BrowserDriver,
        ctx: Any,
        *,
        prefix: str = "body",
        html_attribute: str = "dusk",
    ) -> None:
        self.driver = driver
        self.ctx = ctx
        self.prefix = prefix
        self.html_attribute = html_attribute
        self.elements: dict[str, str] = {}

    def page_elements(self, elements: dict[str, str]) -> "ElementResolver":
        """Register page-level selector aliases, e.g. {"@save": "#save-button"}."""
        self.elements = dict(elements)
        return self

    # ---------------- widget-specific resolution ----------------

    async def resolve_for_typing(self, field: str) -> ElementHandle:
        element = await self.find_by_id(field)
        if element is not None:
            return element
        return await self.first_or_fail(
            [f"input[name={css_string(field)}]", f"textarea[name={css_string(field)}]", field]
        )

    async def resolve_for_selection(self, field: str) -> ElementHandle:
        element = await self.find_by_id(field)
        if element is not None:
            return element
        return await self.first_or_fail([f"select[name={css_string(field)}]", field])

    async def resolve_for_radio_selection(self, field: str, value: Any = None) -> ElementHandle:
        element = await self.find_by_id(field)
        if element is not None:
            return element
        if value is None:
            raise InvalidTargetError(field, f"No value was provided for radio button [{field}].")
        return await self.first_or_fail(
            [
                f"input[type=radio][name={css_string(field)}][value={css_string(value)}]",
                field,
            ]
        )

    async def resolve_for_checking(self, field: Optional[str], value: Any = None) -> ElementHandle:
        if field is not None:
            element = await self.find_by_id(field)
            if element is not None:
                return element

        selector = "input[type=checkbox]"
        if field is not None:
            selector += f"[name={css_string(field)}]"
        if value is not None:
            selector += f"[value={css_string(value)}]"

        candidates = [selector] if field is None else [selector, field]
        return await self.first_or_fail(candidates)

    async def resolve_for_attachment(self, field: str) -> ElementHandle:
        element = await self.find_by_id(field)
        if element is not None:
            return element
        return await self.first_or_fail([f"input[type=file][name={css_string(field)}]", field])

    async def resolve_for_button_press(self, button: str) -> ElementHandle:
        """
        Precedence: the label as a selector, then by name (submit inputs,
        button inputs by value, buttons by name), then submit inputs whose
        value equals the label, then buttons whose text contains it.
        """
        for finder in (
            self._find_button_by_selector,
            self._find_button_by_name,
            self._find_button_by_value,
            self._find_button_by_text,
        ):
            element = await finder(button)
            if element is not None:
                logger.debug("button %r resolved via %s", button, finder.__name__)
                return element
        raise InvalidTargetError(button)

    async def _find_button_by_selector(self, button: str) -> Optional[ElementHandle]:
        return await self.find(button)

    async def _find_button_by_name(self, button: str) -> Optional[ElementHandle]:
        quoted = css_string(button)
        for selector in (
            f"input[type=submit][name={quoted}]",
            f"input[type=button][value={quoted}]",
            f"button[name={quoted}]",
        ):
            element = await self.find(selector)
            if element is not None:
                return element
        return None

    async def _find_button_by_value(self, button: str) -> Optional[ElementHandle]:
        for element in await self.all("input[type=submit]"):
            if await element.get_attribute("value") == button:
                return element
        return None

    async def _find_button_by_text(self, button: str) -> Optional[ElementHandle]:
        for element in await self.all("button"):
            if button in await element.text():
                return element
        return None

    # ---------------- generic lookups ----------------

    async def find(self, selector: str) -> Optional[ElementHandle]:
        try:
            return await self.find_or_fail(selector)
        except MissingElementError:
            return None

    async def find_or_fail(self, selector: str) -> ElementHandle:
        element = await self.find_by_id(selector)
        if element is not None:
            return element
        found = await self.driver.find_all(self.ctx, self.format(selector))
        if not found:
            raise MissingElementError(selector)
        return found[0]

    async def first_or_fail(self, selectors: Iterable[str]) -> ElementHandle:
        tried = []
        for selector in selectors:
            tried.append(selector)
            element = await self.find(selector)
            if element is not None:
                return element
        raise MissingElementError(tried[-1] if tried else "", tried=tried)

    async def all(self, selector: str) -> list[ElementHandle]:
        return list(await self.driver.find_all(self.ctx, self.format(selector)))

    async def find_by_id(self, selector: str) -> Optional[ElementHandle]:
        if _ID_SELECTOR.match(selector):
            return await self.driver.find_by_id(self.ctx, selector[1:])
        return None

    def format(self, selector: str) -> str:
        original = selector
        for alias in sorted(self.elements, key=len, reverse=True):
            selector = selector.replace(alias, self.elements[alias])

        if selector.startswith("@") and selector == original:
            selector = f'[{self.html_attribute}="{selector[1:]}"]'

        if selector.startswith(_XPATH_PREFIXES):
            return selector
        return f"{self.prefix} {selector}".strip()
