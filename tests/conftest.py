import random

import pytest

from browser_commands.core.browser import Browser
from browser_commands.core.settings import Settings
from fakes import FakeDriver


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def config() -> Settings:
    return Settings(
        default_wait_seconds=0.3,
        poll_interval_ms=10,
        select2_settle_seconds=0,
        selector_prefix="body",
        selector_html_attribute="dusk",
    )


@pytest.fixture
def browser(driver: FakeDriver, config: Settings) -> Browser:
    return Browser(driver, "page", config=config, rng=random.Random(7))
