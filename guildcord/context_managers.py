"""
The MIT License (MIT)

Copyright (c) 2015-present Rapptz

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generator, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .abc import Messageable, MessageableChannel

    from types import TracebackType

    BE = TypeVar('BE', bound=BaseException)

# fmt: off
__all__ = (
    'Typing',
)
# fmt: on

_log = logging.getLogger(__name__)

# the indicator disappears after ten seconds
TYPING_INTERVAL: float = 9.5


def _consume_result(task: asyncio.Task[None]) -> None:
    # silences "exception was never retrieved" for the refresh loop
    if not task.cancelled():
        task.exception()


class Typing:
    """Typing indicator bound to a :class:`~guildcord.abc.Messageable`.

    ``async with`` sends the indicator right away and keeps refreshing
    it every ``interval`` seconds until the block exits, however it
    exits. A plain ``await`` sends it once.

    Attributes
    -----------
    interval: :class:`float`
        Seconds between refreshes.
    task: Optional[:class:`asyncio.Task`]
        The refresh loop while the block is running.
    """

    def __init__(self, messageable: Messageable, *, interval: float = TYPING_INTERVAL) -> None:
        self.messageable: Messageable = messageable
        self.interval: float = interval
        self.task: Optional[asyncio.Task[None]] = None
        self._channel: Optional[MessageableChannel] = None

    async def _send(self, channel: MessageableChannel) -> None:
        await channel._state.http.send_typing(channel.id)

    async def _refresh(self, channel: MessageableChannel) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self._send(channel)

    def __await__(self) -> Generator[Any, None, None]:
        return self._send_once().__await__()

    async def _send_once(self) -> None:
        await self._send(await self.messageable._get_channel())

    async def __aenter__(self) -> None:
        channel = self._channel = await self.messageable._get_channel()
        await self._send(channel)
        self.task = asyncio.create_task(self._refresh(channel))
        self.task.add_done_callback(_consume_result)
        _log.debug('Started typing indicator in channel ID %s.', channel.id)

    async def __aexit__(
        self,
        exc_type: Optional[Type[BE]],
        exc: Optional[BE],
        traceback: Optional[TracebackType],
    ) -> None:
        task, self.task = self.task, None
        if task is None:
            return
        task.cancel()
        _log.debug('Stopped typing indicator in channel ID %s.', self._channel and self._channel.id)
