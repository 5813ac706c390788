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

import asyncio
import datetime

import pytest

import payloads
from guildcord import context_managers, utils
from guildcord.errors import ClientException
from guildcord.mentions import AllowedMentions
from guildcord.message import Message, MessageReference
from guildcord.object import Object


def sent_payload(http):
    params = http.send_message.await_args.kwargs['params']
    return params.payload


@pytest.mark.asyncio
async def test_send_silent_sets_flag(text_channel, http):
    http.send_message.return_value = payloads.message(1, flags=4096)

    message = await text_channel.send('hello', silent=True)

    payload = sent_payload(http)
    assert payload['flags'] == 4096
    assert payload['content'] == 'hello'
    assert isinstance(message, Message)
    assert message.is_silent()
    assert message.channel is text_channel


@pytest.mark.asyncio
async def test_send_without_silent_omits_flags(text_channel, http):
    http.send_message.return_value = payloads.message(1)

    await text_channel.send('hello')

    payload = sent_payload(http)
    assert 'flags' not in payload
    assert payload['tts'] is False
    assert http.send_message.await_args.args == (payloads.TEXT_ID,)


@pytest.mark.asyncio
async def test_send_merges_allowed_mentions(text_channel, state, http):
    http.send_message.return_value = payloads.message(1)
    state.allowed_mentions = AllowedMentions(everyone=False, users=True, roles=False)

    await text_channel.send('hi', allowed_mentions=AllowedMentions(roles=True), mention_author=False)

    mentions = sent_payload(http)['allowed_mentions']
    assert mentions['parse'] == ['users', 'roles']
    assert mentions['replied_user'] is False


@pytest.mark.asyncio
async def test_send_reference_and_stickers(text_channel, http):
    http.send_message.return_value = payloads.message(2)
    reference = MessageReference(message_id=1, channel_id=payloads.TEXT_ID, guild_id=payloads.GUILD_ID)

    await text_channel.send(reference=reference, stickers=[Object(id=10), Object(id=11)])

    payload = sent_payload(http)
    assert payload['message_reference'] == {
        'message_id': 1,
        'channel_id': payloads.TEXT_ID,
        'guild_id': payloads.GUILD_ID,
        'fail_if_not_exists': True,
    }
    assert payload['sticker_ids'] == [10, 11]
    assert 'content' not in payload


@pytest.mark.asyncio
async def test_send_rejects_bad_reference(text_channel):
    with pytest.raises(TypeError):
        await text_channel.send('hi', reference=object())  # type: ignore


@pytest.mark.asyncio
async def test_send_in_thread_and_dm(thread, state, http):
    http.send_message.return_value = payloads.message(3, channel_id=900)
    await thread.send('in a thread')
    assert http.send_message.await_args.args == (900,)

    dm = state.create_channel(payloads.dm_channel())
    http.send_message.return_value = payloads.message(4, channel_id=payloads.DM_ID)
    message = await dm.send('hi')
    assert message.guild_id is None
    assert message.jump_url == f'https://discord.com/channels/@me/{payloads.DM_ID}/4'


@pytest.mark.asyncio
async def test_bulk_delete_with_single_match_deletes_individually(text_channel, http):
    http.logs_from.return_value = [payloads.message(1), payloads.message(2, author_id=payloads.ME_ID)]

    deleted = await text_channel.delete_all_messages(lambda m: m.author_id == payloads.ME_ID, bulk=True)

    assert [m.id for m in deleted] == [2]
    http.delete_messages.assert_not_awaited()
    http.delete_message.assert_awaited_once_with(payloads.TEXT_ID, 2, reason=None)


@pytest.mark.asyncio
async def test_bulk_delete_with_many_matches(text_channel, http):
    http.logs_from.return_value = [payloads.message(i) for i in (5, 4, 3)]

    deleted = await text_channel.delete_all_messages(reason='spam')

    assert [m.id for m in deleted] == [5, 4, 3]
    http.delete_messages.assert_awaited_once_with(payloads.TEXT_ID, [5, 4, 3], reason='spam')
    http.delete_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_bulk_delete_keeps_fetch_order(text_channel, http):
    http.logs_from.return_value = [payloads.message(i) for i in (5, 4, 3)]

    await text_channel.delete_all_messages(bulk=False)

    assert [c.args[1] for c in http.delete_message.await_args_list] == [5, 4, 3]
    http.delete_messages.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_all_messages_without_matches(text_channel, http):
    http.logs_from.return_value = [payloads.message(1)]

    assert await text_channel.delete_all_messages(lambda m: False) == []
    http.delete_message.assert_not_awaited()
    http.delete_messages.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize('count', [0, 1, 101])
async def test_delete_messages_bounds(text_channel, http, count):
    with pytest.raises(ClientException):
        await text_channel.delete_messages([Object(id=i + 1) for i in range(count)])

    http.delete_messages.assert_not_awaited()


@pytest.mark.asyncio
async def test_history_passes_cursor(text_channel, http):
    http.logs_from.return_value = [payloads.message(9), payloads.message(8)]

    messages = [m async for m in text_channel.history(limit=2, before=Object(id=10))]

    assert [m.id for m in messages] == [9, 8]
    http.logs_from.assert_awaited_once_with(payloads.TEXT_ID, 2, before=10)


@pytest.mark.asyncio
async def test_history_datetime_cursor(text_channel, http):
    http.logs_from.return_value = []
    after = datetime.datetime(2023, 1, 1, tzinfo=datetime.timezone.utc)

    assert [m async for m in text_channel.history(after=after)] == []
    http.logs_from.assert_awaited_once_with(payloads.TEXT_ID, 50, after=utils.time_snowflake(after, high=True))


@pytest.mark.asyncio
async def test_history_rejects_many_cursors(text_channel, http):
    with pytest.raises(ClientException):
        async for _ in text_channel.history(before=Object(id=2), after=Object(id=1)):
            pass

    http.logs_from.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize('limit', [0, 101])
async def test_history_limit_bounds(text_channel, limit):
    with pytest.raises(ValueError):
        async for _ in text_channel.history(limit=limit):
            pass


@pytest.mark.asyncio
async def test_fetch_message_and_pins(voice_channel, http):
    http.get_message.return_value = payloads.message(7, channel_id=payloads.VOICE_ID)
    http.pins_from.return_value = [payloads.message(6, channel_id=payloads.VOICE_ID, pinned=True)]

    message = await voice_channel.fetch_message(7)
    pins = await voice_channel.pins()

    assert message.id == 7
    http.get_message.assert_awaited_once_with(payloads.VOICE_ID, 7)
    assert [p.pinned for p in pins] == [True]


@pytest.mark.asyncio
async def test_trigger_typing_once(text_channel, http):
    await text_channel.trigger_typing()

    http.send_typing.assert_awaited_once_with(payloads.TEXT_ID)


@pytest.mark.asyncio
async def test_trigger_typing_around_block(text_channel, http):
    async def work():
        await asyncio.sleep(0)
        return 42

    assert await text_channel.trigger_typing(work()) == 42
    http.send_typing.assert_awaited_once_with(payloads.TEXT_ID)


@pytest.mark.asyncio
async def test_typing_task_cancelled_when_block_raises(text_channel, http):
    typing = context_managers.Typing(text_channel, interval=0.01)

    with pytest.raises(RuntimeError):
        async with typing:
            task = typing.task
            await asyncio.sleep(0.05)
            raise RuntimeError('boom')

    assert typing.task is None
    await asyncio.sleep(0)
    assert task.cancelled() or task.done()
    assert http.send_typing.await_count >= 2
    calls = http.send_typing.await_count
    await asyncio.sleep(0.03)
    assert http.send_typing.await_count == calls


@pytest.mark.asyncio
async def test_awaiting_typing_sends_once(thread, http):
    await thread.typing()

    http.send_typing.assert_awaited_once_with(900)
