"""
集中式配置（环境变量/ .env），保障可测性与可控性。
"""
# @file purpose: Centralized settings using Pydantic Settings.

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BC_", env_file=".env", extra="ignore")

    # driver
    headless: bool = True
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    slow_mo_ms: int = 0
    default_timeout_ms: int = 30_000

    # waits
    default_wait_seconds: float = 5
    poll_interval_ms: int = 100
    select2_settle_seconds: float = 2

    # selector resolution
    selector_prefix: str = "body"
    selector_html_attribute: str = "dusk"

    log_level: str = "INFO"


settings = Settings()
