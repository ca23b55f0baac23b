from __future__ import annotations

from typing import Awaitable, Callable

import httpx

from .threads import Run

ResponseHook = Callable[[httpx.Response], None]
RunStatusCallback = Callable[[Run], None]
SleepFunc = Callable[[float], Awaitable[None]]
ClockFunc = Callable[[], float]
