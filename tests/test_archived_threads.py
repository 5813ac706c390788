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

import datetime
from typing import Any, Dict, List

import pytest

import payloads
from guildcord.errors import InvalidData
from guildcord.iterators import ArchivedThreadIterator
from guildcord.object import Object
from guildcord.threads import Thread
from guildcord import utils


class FakeArchive:
    """Serves pages of archived threads the way the platform does."""

    def __init__(self, pages: List[List[Dict[str, Any]]], *, has_more: bool = True) -> None:
        self.pages = pages
        self.has_more = has_more
        self.requests: List[Dict[str, Any]] = []

    def __call__(self, channel_id, **kwargs):
        self.requests.append(kwargs)
        page = self.pages[len(self.requests) - 1]
        more = self.has_more and len(self.requests) < len(self.pages)
        return {'threads': page, 'members': [], 'has_more': more}


def pages_of(*sizes: int) -> List[List[Dict[str, Any]]]:
    pages = []
    start = 1000
    for size in sizes:
        pages.append(payloads.archived_threads(start, size))
        start += size
    return pages


@pytest.mark.asyncio
async def test_bounded_limit_yields_partial_last_batch(text_channel, http):
    # the server always answers with a full page
    server = FakeArchive(pages_of(50, 50, 50, 50))
    http.get_archived_threads.side_effect = server

    batches = [batch async for batch in text_channel.archived_threads(limit=120)]

    assert [len(b) for b in batches] == [50, 50, 20]
    assert sum(len(b) for b in batches) == 120
    assert all(isinstance(t, Thread) for b in batches for t in b)
    assert [r['limit'] for r in server.requests] == [50, 50, 20]


@pytest.mark.asyncio
async def test_exhausted_iterator_stays_exhausted(text_channel, http):
    server = FakeArchive(pages_of(50, 50, 50))
    http.get_archived_threads.side_effect = server

    iterator = text_channel.archived_threads(limit=100)
    assert len(await iterator.next()) == 50
    assert len(await iterator.next()) == 50
    assert await iterator.next() is None
    assert await iterator.next() is None
    assert len(server.requests) == 2


@pytest.mark.asyncio
async def test_short_batch_stops_unbounded_iteration(text_channel, http):
    server = FakeArchive(pages_of(50, 30, 50), has_more=True)
    http.get_archived_threads.side_effect = server

    threads = await text_channel.archived_threads(limit=None).flatten()

    assert len(threads) == 80
    assert len(server.requests) == 2
    assert [r['limit'] for r in server.requests] == [50, 50]


@pytest.mark.asyncio
async def test_has_more_false_stops(text_channel, http):
    server = FakeArchive(pages_of(50, 50), has_more=False)
    http.get_archived_threads.side_effect = server

    batches = [batch async for batch in text_channel.archived_threads(limit=None)]

    assert [len(b) for b in batches] == [50]
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_empty_archive(text_channel, http):
    server = FakeArchive([[]])
    http.get_archived_threads.side_effect = server

    assert await text_channel.archived_threads().flatten() == []
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_small_limit_requests_minimum_page(text_channel, http):
    server = FakeArchive(pages_of(2))
    http.get_archived_threads.side_effect = server

    threads = await text_channel.archived_threads(limit=1).flatten()

    assert len(threads) == 1
    assert server.requests[0]['limit'] == 2


@pytest.mark.asyncio
async def test_zero_limit_never_requests(text_channel, http):
    iterator = text_channel.archived_threads(limit=0)

    assert await iterator.next() is None
    http.get_archived_threads.assert_not_awaited()


@pytest.mark.asyncio
async def test_cursor_advances_by_archive_timestamp(text_channel, http):
    pages = pages_of(50, 10)
    server = FakeArchive(pages)
    http.get_archived_threads.side_effect = server

    anchor = datetime.datetime(2023, 7, 1, tzinfo=datetime.timezone.utc)
    iterator = text_channel.archived_threads(limit=None, before=anchor)
    await iterator.flatten()

    assert server.requests[0]['before'] == anchor.isoformat()
    assert server.requests[1]['before'] == pages[0][-1]['thread_metadata']['archive_timestamp']
    # the anchor the caller gave is kept as is
    assert iterator.before == anchor.isoformat()
    assert all(not r['joined'] and not r['private'] for r in server.requests)


@pytest.mark.asyncio
async def test_joined_cursor_uses_thread_ids(text_channel, http):
    pages = pages_of(50, 10)
    server = FakeArchive(pages)
    http.get_archived_threads.side_effect = server

    iterator = text_channel.archived_threads(private=True, joined=True, limit=None, before=Object(id=5000))
    await iterator.flatten()

    assert server.requests[0]['before'] == '5000'
    assert server.requests[1]['before'] == pages[0][-1]['id']
    assert server.requests[0]['joined'] and server.requests[0]['private']


def test_snowflake_anchor_for_public_listing(text_channel):
    anchor = Object(id=payloads.TEXT_ID)
    iterator = text_channel.archived_threads(before=anchor)

    assert iterator.before == utils.snowflake_time(payloads.TEXT_ID).isoformat()


def test_joined_requires_private(guild):
    with pytest.raises(ValueError):
        ArchivedThreadIterator(payloads.TEXT_ID, guild, joined=True, private=False)

    with pytest.raises(ValueError):
        ArchivedThreadIterator(payloads.TEXT_ID, guild, limit=-5)


@pytest.mark.asyncio
async def test_forum_archived_threads(forum_channel, http):
    server = FakeArchive([payloads.archived_threads(1, 3, parent_id=payloads.FORUM_ID)])
    http.get_archived_threads.side_effect = server

    threads = await forum_channel.archived_threads(private=True).flatten()

    assert [t.parent for t in threads] == [forum_channel] * 3
    assert http.get_archived_threads.await_args.args == (payloads.FORUM_ID,)


@pytest.mark.asyncio
async def test_malformed_thread_raises_invalid_data(text_channel, http):
    page = payloads.archived_threads(1, 3)
    del page[1]['thread_metadata']
    http.get_archived_threads.side_effect = FakeArchive([page])

    with pytest.raises(InvalidData) as info:
        await text_channel.archived_threads(limit=None).next()

    assert isinstance(info.value.__cause__, KeyError)
