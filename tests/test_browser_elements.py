import pytest

from browser_commands.core import scripts
from browser_commands.core.browser import Browser
from browser_commands.core.errors import (
    MissingElementError,
    TimeoutError,
    UnknownKeyError,
    UnsupportedWidgetError,
)
from browser_commands.core.keys import Chord, Key
from browser_commands.io.driver import STALLED
from fakes import FakeDriver, FakeElement


@pytest.mark.asyncio
async def test_element_lookups_never_fail(browser: Browser) -> None:
    assert await browser.element(".absent") is None
    assert await browser.elements(".absent") == []


@pytest.mark.asyncio
async def test_commands_on_absent_targets_raise_missing_element(browser: Browser) -> None:
    for command in (
        browser.click(".absent"),
        browser.right_click(".absent"),
        browser.text(".absent"),
        browser.attribute(".absent", "href"),
        browser.keys(".absent", "x"),
        browser.value(".absent"),
        browser.drag_offset(".absent", 1, 1),
    ):
        with pytest.raises(MissingElementError):
            await command


@pytest.mark.asyncio
async def test_click_and_right_click(driver: FakeDriver, browser: Browser) -> None:
    el = driver.add("body .menu", FakeElement("div"))
    result = await browser.click(".menu")
    await browser.right_click(".menu")
    assert result is browser
    assert el.clicks == ["left", "right"]


@pytest.mark.asyncio
async def test_text_and_attribute(driver: FakeDriver, browser: Browser) -> None:
    driver.add('body [dusk="title"]', FakeElement("h1", text="Hello", attrs={"class": "big"}))
    assert await browser.text("@title") == "Hello"
    assert await browser.attribute("@title", "class") == "big"
    assert await browser.attribute("@title", "missing") is None


@pytest.mark.asyncio
async def test_keys_parses_control_keys_and_chords(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add("body .search", FakeElement("input"))
    await browser.keys(".search", "a", "{enter}", ["{shift}", "b"])
    assert field.sent == [["a", Key.ENTER, Chord(modifiers=(Key.SHIFT,), target="b")]]


@pytest.mark.asyncio
async def test_keys_with_unknown_name_sends_nothing(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add("body .search", FakeElement("input"))
    with pytest.raises(UnknownKeyError):
        await browser.keys(".search", "a", "{warp}")
    assert field.sent == []


@pytest.mark.asyncio
async def test_value_getter_reads_attribute(driver: FakeDriver, browser: Browser) -> None:
    driver.add_id("email", FakeElement("input", attrs={"value": "a@b.c"}))
    assert await browser.value("#email") == "a@b.c"


@pytest.mark.asyncio
async def test_value_setter_passes_selector_and_value_as_arguments(
    driver: FakeDriver, browser: Browser
) -> None:
    result = await browser.value("@name", "O'Brien \"Jr\"")
    assert result is browser
    script, args = driver.scripts[-1]
    assert script == scripts.SET_VALUE
    assert args == ('body [dusk="name"]', "O'Brien \"Jr\"")


@pytest.mark.asyncio
async def test_value_setter_on_absent_field_fails(driver: FakeDriver, browser: Browser) -> None:
    driver.script_result = False
    with pytest.raises(MissingElementError):
        await browser.value("@gone", "x")


@pytest.mark.asyncio
async def test_click_link_installs_helper_then_clicks_by_text(
    driver: FakeDriver, browser: Browser
) -> None:
    await browser.click_link("Read more")
    assert driver.scripts[0][0] == scripts.QUERY_HELPER
    assert driver.scripts[1] == (scripts.CLICK_FIRST_CONTAINING, ("body a", "Read more"))


@pytest.mark.asyncio
async def test_click_link_without_match_fails(driver: FakeDriver, browser: Browser) -> None:
    driver.script_result = lambda script, args: None if script == scripts.QUERY_HELPER else False
    with pytest.raises(MissingElementError) as exc:
        await browser.click_link("Nowhere")
    assert exc.value.selector == "a:contains(Nowhere)"


@pytest.mark.asyncio
async def test_type_clears_then_sends_literal_value(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add('body input[name="q"]', FakeElement("input", attrs={"value": "old"}))
    await browser.type("q", "{enter} is literal here")
    assert field.log == ["clear", "send_keys"]
    assert field.sent == [["{enter} is literal here"]]


@pytest.mark.asyncio
async def test_append_does_not_clear(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add('body textarea[name="notes"]', FakeElement("textarea"))
    await browser.append("notes", 123)
    assert field.log == ["send_keys"]
    assert field.sent == [["123"]]


@pytest.mark.asyncio
async def test_clear_only_clears(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add_id("q", FakeElement("input", attrs={"value": "x"}))
    await browser.clear("#q")
    assert field.log == ["clear"]
    assert field.attrs["value"] == ""


@pytest.mark.asyncio
async def test_type_into_absent_field_fails(browser: Browser) -> None:
    with pytest.raises(MissingElementError):
        await browser.type("nope", "x")


@pytest.mark.asyncio
async def test_wysiwyg_tinymce_escapes_quotes(driver: FakeDriver, browser: Browser) -> None:
    driver.add_id("body_ifr", FakeElement("iframe"))
    await browser.wysiwyg("tinymce", "body", "<p class=\"x\">it's</p>")
    script, args = driver.scripts[-1]
    assert script == scripts.TINYMCE_SET_CONTENT
    assert args == ("body", "<p class=&quot;x&quot;>it&#039;s</p>")


@pytest.mark.asyncio
async def test_wysiwyg_unknown_kind_is_unsupported(driver: FakeDriver, browser: Browser) -> None:
    with pytest.raises(UnsupportedWidgetError) as exc:
        await browser.wysiwyg("ckeditor", "body", "x")
    assert exc.value.kind == "ckeditor"
    assert driver.scripts == []


@pytest.mark.asyncio
async def test_wysiwyg_times_out_when_editor_never_renders(browser: Browser) -> None:
    with pytest.raises(TimeoutError) as exc:
        await browser.wysiwyg("tinymce", "body", "x")
    assert "#body_ifr" in str(exc.value)


@pytest.mark.asyncio
async def test_wait_for_succeeds_once_element_is_visible(
    driver: FakeDriver, browser: Browser
) -> None:
    el = driver.add("body .toast", FakeElement("div", displayed=False))

    polls = {"n": 0}
    original = el.is_displayed

    async def flips() -> bool:
        polls["n"] += 1
        if polls["n"] >= 3:
            el.displayed = True
        return await original()

    el.is_displayed = flips  # type: ignore[method-assign]
    assert await browser.wait_for(".toast") is browser
    assert polls["n"] == 3


@pytest.mark.asyncio
async def test_wait_using_propagates_unexpected_errors(browser: Browser) -> None:
    def boom() -> bool:
        raise RuntimeError("driver went away")

    with pytest.raises(RuntimeError):
        await browser.wait_using(1, 10, boom)


@pytest.mark.asyncio
async def test_visit_and_script(driver: FakeDriver, browser: Browser) -> None:
    driver.script_result = 2
    assert await browser.visit("http://example.test/") is browser
    assert await browser.script("return 1 + 1;", "return 2;") == [2, 2]
    assert driver.visited == ["http://example.test/"]


@pytest.mark.asyncio
async def test_script_clicks_stalled_by_a_dialog_count_as_done(
    driver: FakeDriver, browser: Browser
) -> None:
    driver.script_result = lambda script, args: (
        None if script == scripts.QUERY_HELPER else STALLED
    )
    driver.add("body .country", FakeElement("span"))

    assert await browser.click_link("Delete") is browser
    assert await browser.value("@name", "x") is browser
    assert await browser.select2(".country", "France") is browser
