"""最小化测试：验证包能被导入。"""
# @file purpose: Minimal smoke test.


def test_imports() -> None:
    import browser_commands.actions.impl as impl  # noqa: F401
    import browser_commands.cli.main as cli  # noqa: F401
    import browser_commands.core.browser as browser  # noqa: F401
    import browser_commands.core.settings as settings  # noqa: F401
    import browser_commands.io.playwright_driver as driver  # noqa: F401
