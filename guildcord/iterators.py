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

import datetime
import logging
from typing import TYPE_CHECKING, Any, AsyncIterator, Dict, List, Optional, Union

from . import utils

if TYPE_CHECKING:
    from .abc import Snowflake
    from .guild import Guild
    from .threads import Thread
    from .types.threads import Thread as ThreadPayload, ThreadPaginationPayload

# fmt: off
__all__ = (
    'ArchivedThreadIterator',
)
# fmt: on

_log = logging.getLogger(__name__)

# Page size the archived thread endpoints return at most.
PAGE_SIZE = 50
UNBOUNDED = -1


class ArchivedThreadIterator:
    """An :term:`asynchronous iterator` over batches of archived threads.

    Each step issues exactly one request and yields the decoded
    :class:`Thread` objects of that page as a list. The iterator is
    finite or unbounded depending on ``limit`` and cannot be rewound.

    After every page the request cursor moves to the last thread of that
    page, so each request continues where the previous one stopped.

    It is a single consumer cursor. Advancing it from several tasks at
    once is not supported.

    Examples
    ---------

    Usage ::

        async for batch in channel.archived_threads(limit=120):
            for thread in batch:
                print(thread.name)

    Flattening into a list ::

        threads = await channel.archived_threads(limit=None).flatten()

    Attributes
    -----------
    channel_id: :class:`int`
        The channel the archived threads belong to.
    joined: :class:`bool`
        Whether only private threads the client joined are listed.
    private: :class:`bool`
        Whether private threads are listed instead of public ones.
    before: Optional[:class:`str`]
        The anchor the listing started from, as sent to the platform.
    remaining: :class:`int`
        How many threads can still be yielded. ``-1`` means no limit.
    has_more: :class:`bool`
        Whether another page can be requested.
    """

    def __init__(
        self,
        channel_id: int,
        guild: Guild,
        *,
        limit: Optional[int] = 50,
        joined: bool = False,
        private: bool = False,
        before: Optional[Union[Snowflake, datetime.datetime]] = None,
    ) -> None:
        if joined and not private:
            raise ValueError('Cannot retrieve joined public archived threads')

        if limit is not None and limit < 0:
            raise ValueError('limit must be a positive integer or None')

        self.channel_id: int = channel_id
        self.guild: Guild = guild
        self.joined: bool = joined
        self.private: bool = private
        self.remaining: int = UNBOUNDED if limit is None else limit
        self.has_more: bool = self.remaining != 0
        self.before: Optional[str] = self._resolve_before(before)
        self._cursor: Optional[str] = self.before

    def _resolve_before(self, before: Optional[Union[Snowflake, datetime.datetime]]) -> Optional[str]:
        # The joined listing is ordered by thread ID, the others by archive time.
        if before is None:
            return None
        if isinstance(before, datetime.datetime):
            if self.joined:
                return str(utils.time_snowflake(before, high=False))
            return before.isoformat()
        if self.joined:
            return str(before.id)
        return utils.snowflake_time(before.id).isoformat()

    def _advance_cursor(self, data: ThreadPayload) -> str:
        if self.joined:
            return str(data['id'])
        return data['thread_metadata']['archive_timestamp']

    @property
    def request_size(self) -> int:
        """:class:`int`: The number of threads the next request asks for."""
        if self.remaining == UNBOUNDED:
            return PAGE_SIZE
        # The platform refuses to return fewer than 2 threads, extra ones are dropped.
        return max(2, min(self.remaining, PAGE_SIZE))

    async def _fetch(self, limit: int) -> ThreadPaginationPayload:
        http = self.guild._state.http
        return await http.get_archived_threads(
            self.channel_id,
            before=self._cursor,
            limit=limit,
            joined=self.joined,
            private=self.private,
        )

    async def next(self) -> Optional[List[Thread]]:
        """|coro|

        Fetches the next batch of archived threads.

        Raises
        -------
        Forbidden
            You do not have permissions to get archived threads.
        HTTPException
            The request to get the archived threads failed.

        Returns
        --------
        Optional[List[:class:`Thread`]]
            The next batch, or ``None`` once the iterator is exhausted.
        """
        if not self.has_more:
            return None

        from .threads import _decode_thread

        data = await self._fetch(self.request_size)
        raw_threads: List[ThreadPayload] = data.get('threads', [])

        if not data.get('has_more', False):
            self.has_more = False

        # a short page means the platform has nothing left to send
        if len(raw_threads) < PAGE_SIZE:
            self.has_more = False

        state = self.guild._state
        threads: List[Thread] = []
        for raw in raw_threads:
            threads.append(_decode_thread(raw, guild=self.guild, state=state))
            if self.remaining != UNBOUNDED:
                self.remaining -= 1
                if self.remaining == 0:
                    self.has_more = False
                    break

        if raw_threads:
            self._cursor = self._advance_cursor(raw_threads[-1])

        _log.debug(
            'Fetched %s archived threads from channel ID %s (remaining: %s, has_more: %s).',
            len(threads),
            self.channel_id,
            self.remaining,
            self.has_more,
        )
        return threads

    def __aiter__(self) -> AsyncIterator[List[Thread]]:
        return self

    async def __anext__(self) -> List[Thread]:
        batch = await self.next()
        if not batch:
            raise StopAsyncIteration
        return batch

    async def flatten(self) -> List[Thread]:
        """|coro|

        Collects every remaining batch into a single list.
        """
        ret: List[Thread] = []
        async for batch in self:
            ret.extend(batch)
        return ret

    def __repr__(self) -> str:
        attrs: Dict[str, Any] = {
            'channel_id': self.channel_id,
            'joined': self.joined,
            'private': self.private,
            'remaining': self.remaining,
            'has_more': self.has_more,
        }
        inner = ' '.join('%s=%r' % t for t in attrs.items())
        return f'<{self.__class__.__name__} {inner}>'
