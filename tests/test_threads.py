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

import pytest

import payloads
from guildcord.errors import ClientException
from guildcord.object import Object
from guildcord.threads import Thread, ThreadMember


def thread_member(user_id=None, *, thread_id=900):
    data = {'id': str(thread_id), 'join_timestamp': '2023-03-01T12:00:00+00:00', 'flags': 1}
    if user_id is not None:
        data['user_id'] = str(user_id)
    return data


def test_thread_fields(thread, text_channel, category, guild):
    assert thread.parent is text_channel
    assert thread.category is category
    assert thread.owner is guild.get_member(payloads.OWNER_ID)
    assert not thread.archived
    assert not thread.locked
    assert thread.me is None
    assert len(thread.overwrites) == 0


def test_thread_member_defaults_to_self(thread):
    member = ThreadMember(thread, thread_member())

    assert member.id == payloads.ME_ID
    assert member.thread is thread
    assert member.joined_at == datetime.datetime(2023, 3, 1, 12, tzinfo=datetime.timezone.utc)


def test_thread_payload_member_is_me(state, guild):
    thread = Thread(guild=guild, state=state, data=payloads.thread(901, member=thread_member(thread_id=901)))

    assert thread.me is not None
    assert thread.me.id == payloads.ME_ID
    assert thread.me.thread_id == 901


@pytest.mark.asyncio
async def test_join_and_leave(thread, http):
    await thread.join()
    await thread.leave()

    http.join_thread.assert_awaited_once_with(thread.id)
    http.leave_thread.assert_awaited_once_with(thread.id)


@pytest.mark.asyncio
async def test_cannot_join_archived_locked_thread(state, guild, http):
    metadata = payloads.thread_metadata(archived=True, locked=True)
    thread = Thread(guild=guild, state=state, data=payloads.thread(902, metadata=metadata))

    with pytest.raises(ClientException):
        await thread.join()

    http.join_thread.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_and_remove_user(thread, http):
    user = Object(id=payloads.OWNER_ID)

    await thread.add_user(user)
    await thread.remove_user(user)

    http.add_user_to_thread.assert_awaited_once_with(thread.id, payloads.OWNER_ID)
    http.remove_user_from_thread.assert_awaited_once_with(thread.id, payloads.OWNER_ID)


@pytest.mark.asyncio
async def test_fetch_member_is_cached(thread, http):
    http.get_thread_member.return_value = thread_member(payloads.OWNER_ID)

    member = await thread.fetch_member(payloads.OWNER_ID)

    http.get_thread_member.assert_awaited_once_with(thread.id, payloads.OWNER_ID)
    assert member.id == payloads.OWNER_ID
    assert thread.members == [member]


@pytest.mark.asyncio
async def test_fetch_members(thread, http):
    http.get_thread_members.return_value = [thread_member(payloads.OWNER_ID), thread_member(payloads.ME_ID)]

    members = await thread.fetch_members()

    assert [m.id for m in members] == [payloads.OWNER_ID, payloads.ME_ID]
    assert len(thread.members) == 2


def test_applied_tags_only_resolve_for_forums(state, guild, forum_channel):
    in_forum = Thread(guild=guild, state=state, data=payloads.thread(903, parent_id=payloads.FORUM_ID, applied_tags=['2', '1', '99']))
    in_text = Thread(guild=guild, state=state, data=payloads.thread(904, applied_tags=['1']))

    assert [tag.name for tag in in_forum.applied_tags] == ['question', 'bug']
    assert in_text.applied_tags == []
