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

import logging

import pytest

import payloads
from guildcord.enums import OverwriteType
from guildcord.member import Member
from guildcord.object import Object
from guildcord.permissions import Overwrite, OverwriteSet, PermissionOverwrite, Permissions


RECORDS = [
    payloads.overwrite(payloads.GUILD_ID, type=0, deny=Permissions(send_messages=True).value),
    payloads.overwrite(payloads.OWNER_ID, type=1, allow=Permissions(send_messages=True, manage_channels=True).value),
    payloads.overwrite(payloads.ROLE_ID, type=0, allow=Permissions(view_channel=True).value),
    # duplicates are kept as received
    payloads.overwrite(payloads.ROLE_ID, type=0, deny=Permissions(view_channel=True).value),
]


@pytest.mark.parametrize('count', [0, 1, 2, 4])
def test_materialize_preserves_count_and_order(count):
    records = RECORDS[:count]
    overwrites = OverwriteSet.materialize(records)

    assert len(overwrites) == len(records)
    assert [o.id for o in overwrites] == [int(r['id']) for r in records]
    assert overwrites.to_list() == [
        {'id': int(r['id']), 'type': r['type'], 'allow': r['allow'], 'deny': r['deny']} for r in records
    ]


def test_overwrite_record():
    record = Overwrite.from_data(RECORDS[1])

    assert record.is_member()
    assert not record.is_role()
    assert record.type is OverwriteType.member
    allow, deny = record.pair()
    assert allow.send_messages and allow.manage_channels
    assert deny.value == 0

    view = record.permissions()
    assert view.send_messages is True
    assert view.view_channel is None


def test_overwrite_set_lookup():
    overwrites = OverwriteSet.materialize(RECORDS)

    # first matching record wins
    assert overwrites.get(payloads.ROLE_ID).allow == Permissions(view_channel=True).value
    assert overwrites.get(1234) is None
    assert overwrites[0].id == payloads.GUILD_ID


def test_overwrite_set_equality_ignores_order():
    forward = OverwriteSet.materialize(RECORDS)
    backward = OverwriteSet.materialize(reversed(RECORDS))

    assert forward == backward
    assert forward != OverwriteSet.materialize(RECORDS[:3])
    assert OverwriteSet() == OverwriteSet.materialize([])


def test_channel_overwrites_are_rebuilt(text_channel):
    assert len(text_channel.overwrites) == 0

    text_channel._overwrites.extend(RECORDS[:2])
    assert len(text_channel.overwrites) == 2
    assert text_channel.get_overwrite(payloads.OWNER_ID).is_member()


def test_overwrites_for(text_channel):
    text_channel._overwrites.extend(RECORDS[:2])

    everyone = text_channel.overwrites_for(Object(id=payloads.GUILD_ID))
    assert everyone.send_messages is False
    assert everyone.manage_channels is None

    nobody = text_channel.overwrites_for(Object(id=1))
    assert nobody.is_empty()


def test_permissions_synced(text_channel, category):
    category._overwrites.extend(RECORDS[:2])
    assert not text_channel.permissions_synced

    text_channel._overwrites.extend(reversed(RECORDS[:2]))
    assert text_channel.permissions_synced


@pytest.mark.asyncio
async def test_update_overwrites_sends_record(text_channel, http):
    record = Overwrite(payloads.ROLE_ID, type=OverwriteType.role, allow=Permissions(view_channel=True), deny=0)
    await text_channel.update_overwrites(record, reason='setup')

    http.edit_channel_permissions.assert_awaited_once_with(
        payloads.TEXT_ID,
        payloads.ROLE_ID,
        str(Permissions(view_channel=True).value),
        '0',
        0,
        reason='setup',
    )


@pytest.mark.asyncio
async def test_update_overwrites_on_thread_is_noop(thread, http, caplog):
    before = (thread.overwrites, thread.name, thread.metadata, thread.parent_id)
    record = Overwrite(payloads.ROLE_ID, type=OverwriteType.role, allow=Permissions(view_channel=True))

    with caplog.at_level(logging.DEBUG, logger='guildcord.abc'):
        await thread.update_overwrites(record)
        await thread.delete_permission(Object(id=payloads.ROLE_ID))
        await thread.set_permissions(Object(id=payloads.ROLE_ID), view_channel=False)

    assert (thread.overwrites, thread.name, thread.metadata, thread.parent_id) == before
    assert len(thread.overwrites) == 0
    http.edit_channel_permissions.assert_not_awaited()
    http.delete_channel_permissions.assert_not_awaited()
    assert 'Skipping overwrite update' in caplog.text


@pytest.mark.asyncio
async def test_set_permissions_for_member(text_channel, guild, http):
    member = guild.get_member(payloads.OWNER_ID)
    assert isinstance(member, Member)

    await text_channel.set_permissions(member, send_messages=True, attach_files=False)

    allow, deny = PermissionOverwrite(send_messages=True, attach_files=False).pair()
    http.edit_channel_permissions.assert_awaited_once_with(
        payloads.TEXT_ID, payloads.OWNER_ID, str(allow.value), str(deny.value), 1, reason=None
    )


@pytest.mark.asyncio
async def test_set_permissions_object_typed_as_member(text_channel, http):
    target = Object(id=42, type=Member)
    await text_channel.set_permissions(target, overwrite=PermissionOverwrite(speak=True))

    assert http.edit_channel_permissions.await_args.args[4] == 1


@pytest.mark.asyncio
async def test_set_permissions_none_deletes(text_channel, http):
    await text_channel.set_permissions(Object(id=payloads.ROLE_ID), overwrite=None, reason='cleanup')

    http.delete_channel_permissions.assert_awaited_once_with(payloads.TEXT_ID, payloads.ROLE_ID, reason='cleanup')
    http.edit_channel_permissions.assert_not_awaited()


@pytest.mark.asyncio
async def test_set_permissions_validation(text_channel):
    target = Object(id=payloads.ROLE_ID)
    with pytest.raises(ValueError):
        await text_channel.set_permissions(target)

    with pytest.raises(TypeError):
        await text_channel.set_permissions(target, overwrite=PermissionOverwrite(), send_messages=True)

    with pytest.raises(TypeError):
        await text_channel.set_permissions(target, not_a_permission=True)

    with pytest.raises(TypeError):
        await text_channel.set_permissions(target, overwrite=Permissions())  # type: ignore
