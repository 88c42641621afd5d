"""
File delivery strategies for `Browser.attach()`.

The strategy is picked by the session's reported browser name. In-process
backends that cannot receive uploaded bytes (phantomjs) get the path typed
into the input as keystrokes; every other backend uploads the local file.
"""
# @file purpose: Strategy table for delivering files to <input type=file>.

from __future__ import annotations

from typing import Awaitable, Callable, Dict

from ..io.driver import ElementHandle

FileDelivery = Callable[[ElementHandle, str], Awaitable[None]]


async def type_path(element: ElementHandle, path: str) -> None:
    await element.send_keys([path])


async def upload_local_file(element: ElementHandle, path: str) -> None:
    await element.upload(path)


_DELIVERIES: Dict[str, FileDelivery] = {
    "phantomjs": type_path,
}


def register_delivery(browser_name: str, delivery: FileDelivery) -> None:
    _DELIVERIES[browser_name.lower()] = delivery


def delivery_for(browser_name: str) -> FileDelivery:
    return _DELIVERIES.get(browser_name.lower(), upload_local_file)
