"""
CLI entrypoint.

doctor: print effective settings.
keys: list the control-key names accepted in "{name}" key tokens.
actions: list registered script actions with their arguments.
validate / run: check a JSON script of actions offline, or execute it in a
browser through the Runner (retries, random delay, failure artifacts).
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..core import registry
from ..core.action import ActionSpec
from ..core.browser import Browser
from ..core.controller.runner import Runner, StepOutcome
from ..core.keys import Key
from ..core.settings import settings
from ..io.playwright_driver import PlaywrightDriver

app = typer.Typer(help="browser-commands CLI")
console = Console()


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override BC_LOG_LEVEL"),
) -> None:
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings to confirm CLI is usable."""
    console.print("[bold green]browser-commands[/] environment")
    console.print(f"- browser:  {settings.browser} (headless={settings.headless})")
    console.print(f"- timeout:  {settings.default_timeout_ms}ms per driver call")
    console.print(
        f"- waits:    {settings.default_wait_seconds}s, "
        f"polled every {settings.poll_interval_ms}ms"
    )
    console.print(f"- select2 settle delay: {settings.select2_settle_seconds}s")
    console.print(
        f"- selector prefix: {settings.selector_prefix!r}, "
        f"@token attribute: {settings.selector_html_attribute!r}"
    )


@app.command("keys")
def keys() -> None:
    """List control-key names usable as "{name}" in key tokens."""
    table = Table(title="Control keys", show_header=True, header_style="bold")
    table.add_column("token")
    table.add_column("sends")
    for name, member in Key.__members__.items():
        table.add_row(f"{{{name.lower()}}}", member.value)
    console.print(table)


@app.command("actions")
def actions() -> None:
    """List registered script actions and their arguments."""
    _import_actions("actions")
    table = Table(title="Actions", show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("args")
    table.add_column("summary")
    for name, meta in registry.list_actions().items():
        fields = meta.params_model.model_fields if meta.params_model else {}
        args = ", ".join(k if f.is_required() else f"{k}={f.default!r}" for k, f in fields.items())
        table.add_row(name, args or "-", meta.summary)
    console.print(table)


def _load_specs(script: Path, label: str) -> list[ActionSpec]:
    if not script.exists():
        typer.secho(f"[{label}] file not found: {script}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    try:
        data = json.loads(script.read_text(encoding="utf-8"))
        return TypeAdapter(list[ActionSpec]).validate_python(data)
    except json.JSONDecodeError as je:
        typer.secho(f"[{label}] invalid JSON: {je}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    except ValidationError as ve:
        typer.secho(f"[{label}] invalid file format for ActionSpec[]", fg=typer.colors.RED)
        console.print(ve)
        raise typer.Exit(code=2)


def _import_actions(label: str) -> None:
    try:
        import browser_commands.actions.impl  # noqa: F401
    except Exception as e:  # noqa: BLE001
        typer.secho(f"[{label}] failed to import actions: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)


@app.command("validate")
def validate(script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]")) -> None:
    """
    Offline spec validation: read JSON array [{name, args}] and validate each item
    against the params model bound in the registry. Print a table result and exit
    non-zero if any failures.
    """
    specs = _load_specs(script, "validate")
    _import_actions("validate")

    table = Table(title="Validation Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("name")
    table.add_column("result")
    table.add_column("detail")

    failures = 0
    for i, spec in enumerate(specs, start=1):
        try:
            registry.validate_spec(spec)
            table.add_row(str(i), spec.name, "[green]OK[/]", "-")
        except KeyError as ke:
            failures += 1
            table.add_row(str(i), spec.name, "[red]Not Registered[/]", str(ke))
        except ValidationError as ve:
            failures += 1
            msg = ve.errors()[0].get("msg", "invalid args")
            table.add_row(str(i), spec.name, "[red]Invalid Args[/]", msg)
        except ValueError as e:
            failures += 1
            table.add_row(str(i), spec.name, "[red]Invalid Args[/]", str(e))

    console.print(table)
    if failures:
        raise typer.Exit(code=1)
    typer.secho("[validate] all specs passed", fg=typer.colors.GREEN)


@app.command("run")
def run(
    script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]"),
    headless: bool = typer.Option(
        settings.headless, "--headless/--no-headless", help="Run browser headless"
    ),
    browser: str = typer.Option(settings.browser, "--browser", help="chromium | firefox | webkit"),
    slowmo: int = typer.Option(settings.slow_mo_ms, "--slowmo", help="Slow motion in ms (debug)"),
    retries: int = typer.Option(0, "--retries", help="Retry times on ActionExecutionError"),
    artifacts_dir: Path = typer.Option(
        Path("artifacts"), "--artifacts-dir", help="Where to save failure screenshots"
    ),
    # NOTE: Typer parses tuple as two space-separated ints, e.g. "--random-delay-ms 500 1500"
    random_delay_ms: Tuple[int, int] = typer.Option(
        (0, 0),
        "--random-delay-ms",
        help="Random delay range in ms, e.g. --random-delay-ms 500 1500",
    ),
) -> None:
    """
    Execute a list of actions: read JSON -> structure check -> param check -> run in browser.
    Prints a table of results; returns non-zero on any failure.
    """
    specs = _load_specs(script, "run")
    _import_actions("run")

    async def _run() -> int:
        driver = PlaywrightDriver(
            browser=browser,
            headless=headless,
            slow_mo_ms=slowmo,
            default_timeout_ms=settings.default_timeout_ms,
        )
        await driver.start()
        ctx = await driver.new_context()
        try:
            rnd = None if random_delay_ms == (0, 0) else random_delay_ms
            runner = Runner(retries=retries, artifacts_dir=artifacts_dir, random_delay_ms=rnd)
            rows: list[StepOutcome] = await runner.run(Browser(driver, ctx), specs)
            return _render(rows)
        finally:
            await driver.close_context(ctx)
            await driver.stop()

    code = asyncio.run(_run())
    if code != 0:
        raise typer.Exit(code=code)
    typer.secho("[run] completed successfully", fg=typer.colors.GREEN)


def _render(rows: list[StepOutcome]) -> int:
    table = Table(title="Run Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("name")
    table.add_column("result")
    table.add_column("detail")

    failures = 0
    for r in rows:
        result = "[green]OK[/]" if r.ok else "[red]FAIL[/]"
        detail = r.detail
        if (not r.ok) and r.artifact_path:
            detail = f"{detail} (artifact: {r.artifact_path})"
        if not r.ok:
            failures += 1
        table.add_row(str(r.index), r.name, result, detail)

    console.print(table)
    return 1 if failures else 0


def main() -> None:
    app()


if __name__ == "__main__":
    main()
