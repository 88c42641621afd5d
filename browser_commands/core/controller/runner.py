# browser_commands/core/controller/runner.py
"""
Sequential runner for ActionSpec[] against one Browser.

Responsibilities:
- Validate each spec via registry
- Execute actions with retries (ActionExecutionError only)
- Optional random per-step delay
- On failure: save screenshot artifact (if artifacts_dir is set)
- Return per-step outcomes for CLI rendering
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .. import registry
from ..action import ActionSpec
from ..browser import Browser
from ..errors import ActionExecutionError

logger = logging.getLogger(__name__)


@dataclass
class StepOutcome:
    """UI-friendly outcome used by the CLI."""

    index: int
    name: str
    ok: bool
    detail: str = "-"
    artifact_path: str | None = None
    attempts: int = 1
    # Filled from ActionResult on success:
    extracted: str | None = None  # e.g., text read by the text/value actions


class Runner:
    def __init__(
        self,
        *,
        retries: int = 0,
        artifacts_dir: Path | None = None,
        random_delay_ms: tuple[int, int] | None = None,
        stop_on_failure: bool = True,
    ) -> None:
        self.retries = max(0, retries)
        self.artifacts_dir = artifacts_dir
        self.random_delay_ms = random_delay_ms
        self.stop_on_failure = stop_on_failure
        if self.artifacts_dir:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    async def run(self, browser: Browser, specs: list[ActionSpec]) -> list[StepOutcome]:
        outcomes: list[StepOutcome] = []

        for i, spec in enumerate(specs, start=1):
            outcome = await self._run_step(browser, i, spec)
            outcomes.append(outcome)
            await self._maybe_delay()
            # a failed step aborts the chain: later steps assume its effects
            if not outcome.ok and self.stop_on_failure:
                logger.info("step %d (%s) failed; stopping", i, spec.name)
                break

        return outcomes

    async def _run_step(self, browser: Browser, index: int, spec: ActionSpec) -> StepOutcome:
        name = spec.name

        # 1) validate params
        try:
            _meta, params = registry.validate_spec(spec)
        except (ValueError, KeyError) as e:  # pydantic.ValidationError is a ValueError
            artifact = await self._on_failure(browser, index, name)
            return StepOutcome(
                index=index,
                name=name,
                ok=False,
                detail=f"invalid spec: {e}",
                artifact_path=artifact,
            )

        # 2) execute with retries
        attempt = 0
        while True:
            attempt += 1
            try:
                fn = registry.get_action(name)
                res = await fn(browser, params)
            except ActionExecutionError as e:
                if attempt > self.retries:
                    artifact = await self._on_failure(browser, index, name)
                    return StepOutcome(
                        index=index,
                        name=name,
                        ok=False,
                        detail=str(e),
                        artifact_path=artifact,
                        attempts=attempt,
                    )
                logger.debug("step %d (%s) attempt %d failed: %s", index, name, attempt, e)
                # simple backoff
                await asyncio.sleep(0.5 * attempt)
                continue

            return StepOutcome(
                index=index,
                name=name,
                ok=bool(res.ok),
                detail=self._detail(res),
                attempts=attempt,
                extracted=res.extracted_content,
            )

    @staticmethod
    def _detail(res: Any) -> str:
        """Human-friendly detail for CLI."""
        text = res.extracted_content
        if text:
            return (text[:120] + "…") if len(text) > 120 else text
        m = res.meta
        if "url" in m:
            return str(m["url"])
        if "selector" in m:
            return f'selector="{m["selector"]}"'
        return "-"

    async def _maybe_delay(self) -> None:
        if not self.random_delay_ms:
            return
        low, high = self.random_delay_ms
        if low < 0 or high < 0 or high < low:
            return
        ms = random.randint(low, high)
        await asyncio.sleep(ms / 1000)

    async def _on_failure(self, browser: Browser, index: int, name: str) -> str | None:
        """Best-effort failure artifact (screenshot)."""
        if not self.artifacts_dir:
            return None
        png = self.artifacts_dir / f"fail-{index:02d}-{name}.png"
        try:
            await browser.screenshot(str(png), full_page=True)
            return str(png)
        except Exception as e:  # noqa: BLE001
            logger.warning("could not save failure screenshot %s: %s", png, e)
            return None
