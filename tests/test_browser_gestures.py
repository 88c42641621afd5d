import time

import pytest

from browser_commands.core import attach
from browser_commands.core.browser import Browser
from browser_commands.core.errors import (
    DialogNotOpenError,
    InvalidTargetError,
    MissingElementError,
    TimeoutError,
)
from fakes import FakeDriver, FakeElement


# ------------------------------------------------------------------------------
# drag
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_drag_between_elements(driver: FakeDriver, browser: Browser) -> None:
    card = driver.add("body .card", FakeElement("div"))
    lane = driver.add("body .lane", FakeElement("div"))
    await browser.drag(".card", ".lane")
    assert driver.drags == [("to", card, lane)]


@pytest.mark.asyncio
async def test_drag_to_absent_target_fails(driver: FakeDriver, browser: Browser) -> None:
    driver.add("body .card", FakeElement("div"))
    with pytest.raises(MissingElementError):
        await browser.drag(".card", ".nowhere")
    assert driver.drags == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "verb, expected",
    [
        ("drag_up", (0, -10)),
        ("drag_down", (0, 10)),
        ("drag_left", (-10, 0)),
        ("drag_right", (10, 0)),
    ],
)
async def test_directional_drags_are_offset_wrappers(
    driver: FakeDriver, browser: Browser, verb: str, expected: tuple[int, int]
) -> None:
    handle = driver.add("body .knob", FakeElement("div"))
    await getattr(browser, verb)(".knob", 10)
    await browser.drag_offset(".knob", *expected)
    assert driver.drags == [("by", handle, *expected), ("by", handle, *expected)]


# ------------------------------------------------------------------------------
# attach
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_attach_uploads_on_regular_browsers(driver: FakeDriver, browser: Browser) -> None:
    field = driver.add('body input[type=file][name="avatar"]', FakeElement("input"))
    await browser.attach("avatar", "/tmp/me.png")
    assert field.uploads == ["/tmp/me.png"]
    assert field.sent == []


@pytest.mark.asyncio
async def test_attach_on_phantomjs_types_the_path(config) -> None:
    driver = FakeDriver(name="phantomjs")
    field = driver.add('body input[type=file][name="avatar"]', FakeElement("input"))
    await Browser(driver, "page", config=config).attach("avatar", "/tmp/me.png")
    assert field.uploads == []
    assert field.sent == [["/tmp/me.png"]]


def test_delivery_table_lookup_is_case_insensitive() -> None:
    assert attach.delivery_for("PhantomJS") is attach.type_path
    assert attach.delivery_for("chromium") is attach.upload_local_file


@pytest.mark.asyncio
async def test_registered_delivery_is_used_without_touching_call_sites(
    config, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(attach, "_DELIVERIES", dict(attach._DELIVERIES))
    used: list[str] = []

    async def remote_copy(element, path: str) -> None:
        used.append(path)

    attach.register_delivery("grid", remote_copy)
    driver = FakeDriver(name="grid")
    driver.add_id("cv", FakeElement("input"))
    await Browser(driver, "page", config=config).attach("#cv", "cv.pdf")
    assert used == ["cv.pdf"]


# ------------------------------------------------------------------------------
# press
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_press_clicks_the_resolved_button(driver: FakeDriver, browser: Browser) -> None:
    button = driver.add("body button", FakeElement("button", text="Sign in"))
    await browser.press("Sign in")
    assert button.clicks == ["left"]


@pytest.mark.asyncio
async def test_press_unknown_button_is_invalid_target(browser: Browser) -> None:
    with pytest.raises(InvalidTargetError):
        await browser.press("Launch")


@pytest.mark.asyncio
async def test_press_and_wait_for_returns_once_enabled(
    driver: FakeDriver, browser: Browser
) -> None:
    polls = {"n": 0}
    button = driver.add("body button", FakeElement("button", text="Save"))

    def disable(el: FakeElement) -> None:
        el.enabled = False

    button.on_click = disable

    async def is_enabled() -> bool:
        polls["n"] += 1
        if polls["n"] == 3:
            button.enabled = True
        return button.enabled

    button.is_enabled = is_enabled  # type: ignore[method-assign]
    assert await browser.press_and_wait_for("Save", 1) is browser
    assert button.clicks == ["left"]
    assert polls["n"] == 3


@pytest.mark.asyncio
async def test_press_and_wait_for_times_out_when_never_enabled(
    driver: FakeDriver, browser: Browser
) -> None:
    button = driver.add("body button", FakeElement("button", text="Save"))
    button.on_click = lambda el: setattr(el, "enabled", False)

    started = time.monotonic()
    with pytest.raises(TimeoutError) as exc:
        await browser.press_and_wait_for("Save", 1)
    elapsed = time.monotonic() - started

    assert exc.value.seconds == 1
    assert "Save" in str(exc.value)
    assert 1 <= elapsed < 3


# ------------------------------------------------------------------------------
# dialogs
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_accept_and_dismiss_dialogs(driver: FakeDriver, browser: Browser) -> None:
    driver.open_dialogs = ["Are you sure?", "Really?"]
    await browser.accept_dialog()
    await browser.dismiss_dialog()
    assert driver.handled_dialogs == [("accept", "Are you sure?"), ("dismiss", "Really?")]


@pytest.mark.asyncio
async def test_dialog_commands_propagate_session_errors(browser: Browser) -> None:
    with pytest.raises(DialogNotOpenError):
        await browser.accept_dialog()
    with pytest.raises(DialogNotOpenError):
        await browser.dismiss_dialog()
