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
from typing import TYPE_CHECKING, Any, Dict, NamedTuple, Optional, Union

from . import utils
from .member import Member

if TYPE_CHECKING:
    from .channel import VoiceChannel, StageChannel
    from .guild import Guild
    from .types.voice import VoiceState as VoiceStatePayload

    VocalChannel = Union[VoiceChannel, StageChannel]

__all__ = (
    'VoiceState',
    'VoiceStateRemoval',
)


class VoiceStateRemoval(NamedTuple):
    """Asks the owner of a voice state collection to drop a session.

    Returned by :meth:`VoiceState._update` when the user left voice.
    """

    session_id: str


_FLAG_KEYS = (
    'deaf',
    'mute',
    'self_deaf',
    'self_mute',
    'self_stream',
    'self_video',
    'suppress',
)


class VoiceState:
    """Represents a user's voice connection inside a guild.

    A voice state is identified by its :attr:`session_id`. The
    :class:`Guild` owns the collection of voice states, this class only
    tells it when a state has to be dropped.

    Attributes
    ------------
    session_id: :class:`str`
        The voice connection session ID.
    user_id: :class:`int`
        The ID of the user this voice state belongs to.
    guild_id: :class:`int`
        The guild the connection lives in.
    channel_id: Optional[:class:`int`]
        The ID of the connected channel. ``None`` once the user left.
    channel: Optional[Union[:class:`VoiceChannel`, :class:`StageChannel`]]
        The connected channel, if it could be found in the guild cache.
    member: Optional[:class:`Member`]
        The member snapshot that came with the voice state, if any.
    deaf: :class:`bool`
        Indicates if the user is currently deafened by the guild.
    mute: :class:`bool`
        Indicates if the user is currently muted by the guild.
    self_deaf: :class:`bool`
        Indicates if the user is currently deafened by their own accord.
    self_mute: :class:`bool`
        Indicates if the user is currently muted by their own accord.
    self_stream: :class:`bool`
        Indicates if the user is currently streaming via 'Go Live' feature.
    self_video: :class:`bool`
        Indicates if the user is currently broadcasting video.
    suppress: :class:`bool`
        Indicates if the user is suppressed from speaking.

        Only applies to stage channels.
    requested_to_speak_at: Optional[:class:`datetime.datetime`]
        An aware datetime object that specifies the date and time in UTC that the member
        requested to speak. It will be ``None`` if they are not requesting to speak
        anymore or have been accepted to speak.
    """

    __slots__ = (
        'session_id',
        'user_id',
        'guild_id',
        'channel_id',
        'channel',
        'member',
        'deaf',
        'mute',
        'self_deaf',
        'self_mute',
        'self_stream',
        'self_video',
        'suppress',
        'requested_to_speak_at',
        '_guild',
    )

    def __init__(self, *, data: VoiceStatePayload, guild: Guild) -> None:
        self._guild: Guild = guild
        self.session_id: str = data['session_id']
        self.user_id: int = int(data['user_id'])
        self.guild_id: int = utils._get_as_snowflake(data, 'guild_id') or guild.id
        self.channel_id: Optional[int] = None
        self.channel: Optional[VocalChannel] = None
        self.member: Optional[Member] = None
        self.deaf: bool = False
        self.mute: bool = False
        self.self_deaf: bool = False
        self.self_mute: bool = False
        self.self_stream: bool = False
        self.self_video: bool = False
        self.suppress: bool = False
        self.requested_to_speak_at: Optional[datetime.datetime] = None
        self._update(data)

    def __repr__(self) -> str:
        attrs = [
            ('session_id', self.session_id),
            ('user_id', self.user_id),
            ('self_mute', self.self_mute),
            ('self_deaf', self.self_deaf),
            ('self_stream', self.self_stream),
            ('suppress', self.suppress),
            ('requested_to_speak_at', self.requested_to_speak_at),
            ('channel_id', self.channel_id),
        ]
        inner = ' '.join('%s=%r' % t for t in attrs)
        return f'<{self.__class__.__name__} {inner}>'

    def _update(self, data: Dict[str, Any]) -> Optional[VoiceStateRemoval]:
        # Only keys present in the patch are applied.
        for key in _FLAG_KEYS:
            if key in data:
                setattr(self, key, bool(data[key]))

        if 'request_to_speak_timestamp' in data:
            self.requested_to_speak_at = utils.parse_time(data['request_to_speak_timestamp'])

        member = data.get('member')
        if member is not None:
            self.member = Member(data=member, guild=self._guild, state=self._guild._state)

        if 'channel_id' not in data:
            return None

        channel_id = utils._get_as_snowflake(data, 'channel_id')
        if channel_id is None:
            self.channel_id = None
            self.channel = None
            return VoiceStateRemoval(self.session_id)

        self.channel_id = channel_id
        self.channel = self._guild.get_channel(channel_id)  # type: ignore # voice states only point at vocal channels
        return None

    @property
    def guild(self) -> Guild:
        """:class:`Guild`: The guild this voice state belongs to."""
        return self._guild
