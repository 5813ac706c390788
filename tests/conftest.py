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

from unittest.mock import AsyncMock, MagicMock

import pytest

import payloads
from guildcord.channel import _decode_guild_channel
from guildcord.guild import Guild
from guildcord.state import ConnectionState


@pytest.fixture
def http() -> AsyncMock:
    # every endpoint becomes an awaitable mock returning whatever a test configures
    return AsyncMock()


@pytest.fixture
def dispatch() -> MagicMock:
    return MagicMock()


@pytest.fixture
def state(http: AsyncMock, dispatch: MagicMock) -> ConnectionState:
    return ConnectionState(dispatch=dispatch, http=http, self_id=payloads.ME_ID)


@pytest.fixture
def guild(state: ConnectionState) -> Guild:
    data = payloads.guild(
        channels=[
            payloads.category_channel(),
            payloads.text_channel(parent_id=str(payloads.CATEGORY_ID)),
            payloads.text_channel(payloads.NEWS_ID, type=5, name='announcements'),
            payloads.voice_channel(),
            payloads.stage_channel(),
            payloads.forum_channel(
                available_tags=[
                    payloads.forum_tag(1, 'bug', emoji_name='\N{BUG}'),
                    payloads.forum_tag(2, 'question'),
                ]
            ),
        ],
        members=[payloads.member(payloads.OWNER_ID, username='Danny')],
    )
    return state._add_guild_from_data(data)


@pytest.fixture
def text_channel(guild: Guild):
    return guild.get_channel(payloads.TEXT_ID)


@pytest.fixture
def news_channel(guild: Guild):
    return guild.get_channel(payloads.NEWS_ID)


@pytest.fixture
def voice_channel(guild: Guild):
    return guild.get_channel(payloads.VOICE_ID)


@pytest.fixture
def stage_channel(guild: Guild):
    return guild.get_channel(payloads.STAGE_ID)


@pytest.fixture
def forum_channel(guild: Guild):
    return guild.get_channel(payloads.FORUM_ID)


@pytest.fixture
def category(guild: Guild):
    return guild.get_channel(payloads.CATEGORY_ID)


@pytest.fixture
def thread(guild: Guild, state: ConnectionState):
    decoded = _decode_guild_channel(11, payloads.thread(900), state=state, guild=guild)
    guild._add_thread(decoded)  # type: ignore
    return decoded
