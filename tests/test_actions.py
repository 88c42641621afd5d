import dataclasses
from pathlib import Path

import pytest
from pydantic import ValidationError

import browser_commands.actions.impl  # noqa: F401  (registers actions)
from browser_commands.core import registry
from browser_commands.core.action import ActionSpec
from browser_commands.core.browser import Browser
from browser_commands.core.controller.runner import Runner, StepOutcome
from browser_commands.core.errors import ActionExecutionError, MissingElementError
from browser_commands.core.result import ActionResult
from fakes import FakeDriver, FakeElement


def test_every_command_is_registered_with_a_params_model() -> None:
    names = set(registry.list_actions())
    assert {
        "visit", "wait_for", "click", "right_click", "click_link", "type", "append", "clear",
        "keys", "value", "text", "attribute", "select", "select2", "radio", "check",
        "uncheck", "attach", "press", "press_and_wait_for", "drag", "drag_offset",
        "accept_dialog", "dismiss_dialog", "wysiwyg", "screenshot",
    } <= names
    assert all(meta.params_model is not None for meta in registry.list_actions().values())


def test_validate_spec_parses_args() -> None:
    _meta, params = registry.validate_spec(
        ActionSpec(name="select", args={"field": " color ", "value": 3})
    )
    assert params.field == "color"
    assert params.value == 3
    assert params.by_selector is False


def test_validate_spec_unknown_action() -> None:
    with pytest.raises(KeyError):
        registry.validate_spec(ActionSpec(name="teleport"))


def test_unknown_action_suggests_the_closest_name() -> None:
    with pytest.raises(KeyError) as exc:
        registry.get_action("selcet")
    assert "did you mean 'select'" in str(exc.value)


def test_names_are_unique() -> None:
    async def other(browser, params):
        """Not the real click."""

    with pytest.raises(ValueError):
        registry.register("click", other)


def test_keys_params_reject_unknown_key_names() -> None:
    with pytest.raises(ValidationError) as exc:
        registry.validate_spec(ActionSpec(name="keys", args={"selector": "#q", "keys": ["{warp}"]}))
    assert "warp" in str(exc.value)

    _meta, params = registry.validate_spec(
        ActionSpec(name="keys", args={"selector": "#q", "keys": ["a", ["{shift}", "b"]]})
    )
    assert params.keys == ["a", ["{shift}", "b"]]


def test_no_params_actions_forbid_extra_args() -> None:
    with pytest.raises(ValidationError):
        registry.validate_spec(ActionSpec(name="accept_dialog", args={"text": "ok"}))


@pytest.mark.asyncio
async def test_action_wraps_command_errors() -> None:
    fn = registry.get_action("click")
    _meta, params = registry.validate_spec(ActionSpec(name="click", args={"selector": ".gone"}))
    with pytest.raises(ActionExecutionError) as exc:
        await fn(Browser(FakeDriver(), "page"), params)
    assert exc.value.action == "click"
    assert exc.value.selector == ".gone"
    assert isinstance(exc.value.cause, MissingElementError)


# ------------------------------------------------------------------------------
# runner
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_runner_executes_steps_in_order(driver: FakeDriver, browser: Browser) -> None:
    driver.add('body input[name="q"]', FakeElement("input"))
    driver.add("body h1", FakeElement("h1", text="Results"))
    specs = [
        ActionSpec(name="visit", args={"url": "http://example.test/"}),
        ActionSpec(name="type", args={"field": "q", "value": "hello"}),
        ActionSpec(name="text", args={"selector": "h1"}),
    ]

    outcomes = await Runner().run(browser, specs)

    assert [o.ok for o in outcomes] == [True, True, True]
    assert outcomes[0].detail == "http://example.test/"
    assert outcomes[1].detail == 'selector="q"'
    assert outcomes[2].extracted == "Results"
    assert driver.visited == ["http://example.test/"]


@pytest.mark.asyncio
async def test_runner_stops_on_first_failure_and_saves_artifact(
    driver: FakeDriver, browser: Browser, tmp_path: Path
) -> None:
    specs = [
        ActionSpec(name="click", args={"selector": ".gone"}),
        ActionSpec(name="visit", args={"url": "http://example.test/"}),
    ]

    outcomes = await Runner(artifacts_dir=tmp_path).run(browser, specs)

    assert len(outcomes) == 1
    failed = outcomes[0]
    assert not failed.ok
    assert "Unable to locate element [.gone]" in failed.detail
    assert failed.artifact_path == str(tmp_path / "fail-01-click.png")
    assert driver.screenshots == [failed.artifact_path]
    assert driver.visited == []


@pytest.mark.asyncio
async def test_runner_can_continue_past_failures(driver: FakeDriver, browser: Browser) -> None:
    specs = [
        ActionSpec(name="teleport"),
        ActionSpec(name="visit", args={"url": "http://example.test/"}),
    ]

    outcomes = await Runner(stop_on_failure=False).run(browser, specs)

    assert [o.ok for o in outcomes] == [False, True]
    assert outcomes[0].detail.startswith("invalid spec")


@pytest.mark.asyncio
async def test_runner_retries_failed_actions(driver: FakeDriver, browser: Browser) -> None:
    late = FakeElement("div")
    specs = [ActionSpec(name="click", args={"selector": ".late"})]

    # first attempt misses; the element shows up before the retry
    async def missing_then_present(ctx, selector):
        driver.queries.append(selector)
        if len(driver.queries) == 1:
            return []
        return [late]

    driver.find_all = missing_then_present  # type: ignore[method-assign]

    outcomes = await Runner(retries=1).run(browser, specs)

    assert outcomes[0].ok
    assert outcomes[0].attempts == 2
    assert late.clicks == ["left"]


def test_results_expose_only_fields_the_cli_reports() -> None:
    assert set(ActionResult.model_fields) == {"ok", "extracted_content", "meta"}
    assert "meta" not in {f.name for f in dataclasses.fields(StepOutcome)}
