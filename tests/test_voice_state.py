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

import pytest

import payloads
from guildcord.member import Member
from guildcord.voice_state import VoiceState, VoiceStateRemoval

SPEAKER_ID = 111111111111111111
LISTENER_ID = 222222222222222222
REQUEST_ID = 333333333333333333


@pytest.fixture
def connected(guild):
    return guild._update_voice_state(payloads.voice_state('session-a'))


def test_join_caches_by_session(guild, connected, voice_channel):
    assert isinstance(connected, VoiceState)
    assert guild._voice_states == {'session-a': connected}
    assert connected.channel is voice_channel
    assert connected.guild is guild
    assert voice_channel.voice_states == {'session-a': connected}
    assert [m.id for m in voice_channel.members] == [payloads.OWNER_ID]


def test_leaving_removes_exactly_once(guild, connected):
    other = guild._update_voice_state(payloads.voice_state('session-b', user_id=SPEAKER_ID))

    leave = payloads.voice_state('session-a', channel_id=None)
    assert guild._update_voice_state(leave) is None
    assert guild._voice_states == {'session-b': other}
    assert connected.channel_id is None
    assert connected.channel is None

    # the same departure again leaves the collection untouched
    assert guild._update_voice_state(leave) is None
    assert guild._voice_states == {'session-b': other}


def test_update_returns_removal_intent(guild, connected):
    assert connected._update({'channel_id': None}) == VoiceStateRemoval('session-a')
    assert connected._update({'self_mute': True}) is None


def test_departure_for_unknown_session_is_not_cached(guild):
    assert guild._update_voice_state(payloads.voice_state('ghost', channel_id=None)) is None
    assert guild.voice_states == []


def test_moving_channels(guild, connected, stage_channel, voice_channel):
    moved = guild._update_voice_state({'session_id': 'session-a', 'channel_id': str(payloads.STAGE_ID)})

    assert moved is connected
    assert connected.channel is stage_channel
    assert voice_channel.voice_states == {}
    assert list(stage_channel.voice_states) == ['session-a']


def test_partial_patch_only_touches_present_keys(guild, connected):
    guild._update_voice_state({'session_id': 'session-a', 'self_mute': True})

    assert connected.self_mute is True
    assert connected.self_deaf is False
    assert connected.channel_id == payloads.VOICE_ID


def test_member_snapshot_is_kept(guild):
    data = payloads.voice_state('session-c', user_id=SPEAKER_ID, member=payloads.member(SPEAKER_ID, username='Speaker'))
    voice = guild._update_voice_state(data)

    assert voice.member.id == SPEAKER_ID
    assert voice.member.name == 'Speaker'


def test_guild_payload_voice_states(state):
    data = payloads.guild(
        channels=[payloads.voice_channel()],
        voice_states=[
            payloads.voice_state('one', user_id=SPEAKER_ID),
            payloads.voice_state('two', user_id=LISTENER_ID, channel_id=None),
        ],
    )
    guild = state._add_guild_from_data(data)

    assert [v.session_id for v in guild.voice_states] == ['one']


def test_stage_audience(guild, stage_channel):
    for session_id, user_id, extra in (
        ('speaker', SPEAKER_ID, {'suppress': False}),
        ('listener', LISTENER_ID, {'suppress': True}),
        ('request', REQUEST_ID, {'suppress': True, 'request_to_speak_timestamp': '2023-01-01T00:00:00+00:00'}),
    ):
        guild._add_member(Member(data=payloads.member(user_id), guild=guild, state=guild._state))
        guild._update_voice_state(payloads.voice_state(session_id, user_id=user_id, channel_id=payloads.STAGE_ID, **extra))

    assert [m.id for m in stage_channel.speakers] == [SPEAKER_ID]
    assert sorted(m.id for m in stage_channel.listeners) == [LISTENER_ID, REQUEST_ID]
    assert [m.id for m in stage_channel.requesting_to_speak] == [REQUEST_ID]


def test_parse_voice_state_update_dispatches(state, guild, dispatch):
    voice = state.parse_voice_state_update(payloads.voice_state('session-z'))

    dispatch.assert_called_once_with('voice_state_update', 'session-z', voice)
    assert guild.voice_states == [voice]

    dispatch.reset_mock()
    assert state.parse_voice_state_update(payloads.voice_state('session-z', channel_id=None)) is None
    dispatch.assert_called_once_with('voice_state_update', 'session-z', None)
    assert guild.voice_states == []


def test_parse_voice_state_update_unknown_guild(state, dispatch):
    assert state.parse_voice_state_update(payloads.voice_state('x', guild_id=1)) is None
    dispatch.assert_not_called()
