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

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from . import utils
from .channel import DMChannel, _decode_guild_channel, _private_channel_factory
from .enums import ChannelType, resolve_channel_type
from .guild import Guild
from .message import Message
from .threads import Thread, _decode_thread

if TYPE_CHECKING:
    from .abc import MessageableChannel
    from .guild import GuildChannel
    from .http import HTTPClient
    from .mentions import AllowedMentions
    from .types.message import Message as MessagePayload
    from .voice_state import VoiceState

    Channel = Union[GuildChannel, Thread, DMChannel]

_log = logging.getLogger(__name__)


class ConnectionState:
    """Cache of guilds and direct message channels, kept current by gateway events.

    Guild collections are mutated without locks, so the events of one
    guild have to be parsed sequentially in arrival order.
    """

    def __init__(
        self,
        *,
        dispatch: Callable[..., Any],
        http: HTTPClient,
        allowed_mentions: Optional[AllowedMentions] = None,
        self_id: Optional[int] = None,
    ) -> None:
        self.dispatch: Callable[..., Any] = dispatch
        self.http: HTTPClient = http
        self.allowed_mentions: Optional[AllowedMentions] = allowed_mentions
        self.self_id: Optional[int] = self_id
        self.clear()

    def clear(self) -> None:
        self._guilds: Dict[int, Guild] = {}
        self._private_channels: Dict[int, DMChannel] = {}

    @property
    def guilds(self) -> List[Guild]:
        return list(self._guilds.values())

    @property
    def private_channels(self) -> List[DMChannel]:
        return list(self._private_channels.values())

    def _get_guild(self, guild_id: Optional[int]) -> Optional[Guild]:
        return self._guilds.get(guild_id)  # type: ignore # None is never a key

    def _add_guild_from_data(self, data: Dict[str, Any]) -> Guild:
        guild = Guild(data=data, state=self)
        self._guilds[guild.id] = guild
        return guild

    def _event_guild(self, event: str, data: Dict[str, Any]) -> Optional[Guild]:
        guild_id = utils._get_as_snowflake(data, 'guild_id')
        guild = self._get_guild(guild_id)
        if guild is None:
            _log.debug('%s referencing an unknown guild ID: %s. Discarding.', event, guild_id)
        return guild

    def _get_private_channel(self, channel_id: Optional[int]) -> Optional[DMChannel]:
        return self._private_channels.get(channel_id)  # type: ignore

    def _add_private_channel(self, channel: DMChannel) -> None:
        self._private_channels[channel.id] = channel

    def _remove_private_channel(self, channel: DMChannel) -> None:
        self._private_channels.pop(channel.id, None)

    def get_channel(self, id: Optional[int]) -> Optional[Channel]:
        if id is None:
            return None

        private = self._get_private_channel(id)
        if private is not None:
            return private

        for guild in self._guilds.values():
            channel = guild.get_channel_or_thread(id)
            if channel is not None:
                return channel
        return None

    def create_message(self, *, channel: MessageableChannel, data: MessagePayload) -> Message:
        return Message(state=self, channel=channel, data=data)

    def create_channel(self, data: Dict[str, Any], *, guild: Optional[Guild] = None) -> Optional[Channel]:
        """Decodes a channel payload of any type, or returns ``None`` for unknown types."""
        factory, _ = _private_channel_factory(data['type'])
        if factory is not None:
            return factory(state=self, data=data)  # type: ignore

        if guild is None:
            guild_id = utils._get_as_snowflake(data, 'guild_id')
            # uncached guilds still get a bare guild to hang the channel off
            guild = self._get_guild(guild_id) or Guild(data={'id': guild_id}, state=self)

        return _decode_guild_channel(data['type'], data, state=self, guild=guild)  # type: ignore

    def parse_guild_create(self, data: Dict[str, Any]) -> None:
        self.dispatch('guild_join', self._add_guild_from_data(data))

    def parse_guild_delete(self, data: Dict[str, Any]) -> None:
        guild = self._guilds.pop(int(data['id']), None)
        if guild is None:
            _log.debug('GUILD_DELETE referencing an unknown guild ID: %s. Discarding.', data['id'])
            return
        self.dispatch('guild_remove', guild)

    def parse_channel_create(self, data: Dict[str, Any]) -> None:
        factory, _ = _private_channel_factory(data['type'])
        if factory is not None:
            if self._get_private_channel(int(data['id'])) is None:
                private = factory(state=self, data=data)  # type: ignore
                self._add_private_channel(private)
                self.dispatch('private_channel_create', private)
            return

        guild = self._event_guild('CHANNEL_CREATE', data)
        if guild is None:
            return

        channel = _decode_guild_channel(data['type'], data, state=self, guild=guild)
        if channel is not None:
            guild._add_channel(channel)  # type: ignore
            self.dispatch('guild_channel_create', channel)

    def parse_channel_update(self, data: Dict[str, Any]) -> None:
        channel_type = resolve_channel_type(data.get('type'))
        channel_id = int(data['id'])

        if channel_type is ChannelType.private:
            private = self._get_private_channel(channel_id)
            if private is None:
                _log.debug('CHANNEL_UPDATE referencing an unknown channel ID: %s. Discarding.', channel_id)
                return
            private._update(data)  # type: ignore # payload shape depends on the channel type
            self.dispatch('private_channel_update', private)
            return

        guild = self._event_guild('CHANNEL_UPDATE', data)
        if guild is None:
            return

        channel = guild.get_channel(channel_id)
        if channel is None:
            _log.debug('CHANNEL_UPDATE referencing an unknown channel ID: %s. Discarding.', channel_id)
            return

        if channel_type is None or channel_type is channel.type:
            channel._update(guild, data)  # type: ignore # payload shape depends on the channel type
            self.dispatch('guild_channel_update', channel)
            return

        # a converted channel, e.g. text to news, needs a new object
        replacement = _decode_guild_channel(data['type'], data, state=self, guild=guild)
        if replacement is not None:
            guild._add_channel(replacement)  # type: ignore
            self.dispatch('guild_channel_update', replacement)

    def parse_channel_delete(self, data: Dict[str, Any]) -> None:
        channel_id = int(data['id'])
        guild = self._get_guild(utils._get_as_snowflake(data, 'guild_id'))

        if guild is None:
            private = self._get_private_channel(channel_id)
            if private is not None:
                self._remove_private_channel(private)
                self.dispatch('private_channel_delete', private)
            return

        channel = guild.get_channel(channel_id)
        if channel is not None:
            guild._remove_channel(channel)
            guild._remove_threads_by_channel(channel.id)
            self.dispatch('guild_channel_delete', channel)

    def parse_thread_create(self, data: Dict[str, Any]) -> None:
        guild = self._event_guild('THREAD_CREATE', data)
        if guild is None:
            return

        thread = _decode_thread(data, guild=guild, state=self)  # type: ignore
        known = guild.get_thread(thread.id) is not None
        guild._add_thread(thread)
        if not known:
            self.dispatch('thread_create', thread)

    def parse_thread_update(self, data: Dict[str, Any]) -> None:
        guild = self._event_guild('THREAD_UPDATE', data)
        if guild is None:
            return

        thread = guild.get_thread(int(data['id']))
        if thread is None:
            thread = _decode_thread(data, guild=guild, state=self)  # type: ignore
            if not thread.archived:
                guild._add_thread(thread)
            self.dispatch('thread_join', thread)
            return

        thread._update(data)  # type: ignore
        # archived threads leave the cache
        if thread.archived:
            guild._remove_thread(thread)
        self.dispatch('thread_update', thread)

    def parse_thread_delete(self, data: Dict[str, Any]) -> None:
        guild = self._event_guild('THREAD_DELETE', data)
        if guild is None:
            return

        thread = guild.get_thread(int(data['id']))
        if thread is not None:
            guild._remove_thread(thread)
            self.dispatch('thread_delete', thread)

    def parse_voice_state_update(self, data: Dict[str, Any]) -> Optional[VoiceState]:
        guild = self._event_guild('VOICE_STATE_UPDATE', data)
        if guild is None:
            return None

        voice = guild._update_voice_state(data)  # type: ignore
        self.dispatch('voice_state_update', data['session_id'], voice)
        return voice
