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
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from . import utils
from .member import Member
from .stage_instance import StageInstance
from .threads import Thread, _decode_thread
from .voice_state import VoiceState

__all__ = (
    'Guild',
)

if TYPE_CHECKING:
    from .abc import Snowflake
    from .channel import CategoryChannel, ForumChannel, StageChannel, TextChannel, VoiceChannel
    from .state import ConnectionState
    from .types.voice import VoiceState as VoiceStatePayload

    GuildChannel = Union[VoiceChannel, StageChannel, TextChannel, ForumChannel, CategoryChannel]

_log = logging.getLogger(__name__)


class Guild:
    """The channel side of a guild's cache.

    A guild owns its channels, threads, members, stage instances and
    voice states. Events for one guild must be applied in the order they
    arrived, one at a time.

    Guilds compare and hash by ID, and ``str(guild)`` is the name.

    Attributes
    ----------
    id: :class:`int`
        Snowflake of the guild.
    name: :class:`str`
        Display name, empty when the payload had none.
    owner_id: Optional[:class:`int`]
        Snowflake of the owner.
    """

    __slots__ = (
        'id',
        'name',
        'owner_id',
        '_state',
        '_threads',
        '_members',
        '_channels',
        '_voice_states',
        '_stage_instances',
    )

    def __init__(self, *, data: Dict[str, Any], state: ConnectionState) -> None:
        self._state: ConnectionState = state
        self._channels: Dict[int, GuildChannel] = {}
        self._threads: Dict[int, Thread] = {}
        self._members: Dict[int, Member] = {}
        self._stage_instances: Dict[int, StageInstance] = {}
        # keyed by session, a user may be connected from several clients
        self._voice_states: Dict[str, VoiceState] = {}
        self._from_data(data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Guild) and other.id == self.id

    def __hash__(self) -> int:
        return self.id >> 22

    def __str__(self) -> str:
        return self.name or ''

    def __repr__(self) -> str:
        return (
            f'<Guild id={self.id} name={self.name!r} channels={len(self._channels)}'
            f' threads={len(self._threads)} voice_states={len(self._voice_states)}>'
        )

    def _from_data(self, data: Dict[str, Any]) -> None:
        from .channel import _decode_guild_channel

        self.id: int = int(data['id'])
        self.name: str = data.get('name', '')
        self.owner_id: Optional[int] = utils._get_as_snowflake(data, 'owner_id')

        state = self._state
        for raw in data.get('channels', []):
            channel = _decode_guild_channel(raw['type'], raw, state=state, guild=self)
            if channel is not None:
                self._add_channel(channel)  # type: ignore

        for raw in data.get('members', []):
            self._add_member(Member(data=raw, guild=self, state=state))
        for raw in data.get('threads', []):
            self._add_thread(_decode_thread(raw, guild=self, state=state))
        for raw in data.get('stage_instances', []):
            self._add_stage_instance(StageInstance(guild=self, data=raw, state=state))
        for raw in data.get('voice_states', []):
            self._update_voice_state(raw)

    def _add_channel(self, channel: GuildChannel, /) -> None:
        self._channels[channel.id] = channel

    def _remove_channel(self, channel: Snowflake, /) -> None:
        self._channels.pop(channel.id, None)

    def _add_member(self, member: Member, /) -> None:
        self._members[member.id] = member

    def _add_thread(self, thread: Thread, /) -> None:
        self._threads[thread.id] = thread

    def _remove_thread(self, thread: Snowflake, /) -> None:
        self._threads.pop(thread.id, None)

    def _remove_threads_by_channel(self, channel_id: int) -> List[Thread]:
        orphans = [thread for thread in self._threads.values() if thread.parent_id == channel_id]
        for thread in orphans:
            del self._threads[thread.id]
        return orphans

    def _add_stage_instance(self, instance: StageInstance, /) -> None:
        self._stage_instances[instance.id] = instance

    def _remove_stage_instance(self, instance: Snowflake, /) -> None:
        self._stage_instances.pop(instance.id, None)

    def _update_voice_state(self, data: VoiceStatePayload) -> Optional[VoiceState]:
        """Applies a voice state event.

        Returns the state cached afterwards, or ``None`` when the session
        is no longer in voice.
        """
        session_id = data['session_id']
        voice = self._voice_states.get(session_id)

        if voice is None:
            voice = VoiceState(data=data, guild=self)
            if voice.channel_id is None:
                return None
            self._voice_states[session_id] = voice
            return voice

        departed = voice._update(data)  # type: ignore # the patch is a partial payload
        if departed is None:
            return voice

        # pop with a default, a second departure finds nothing
        self._voice_states.pop(departed.session_id, None)
        _log.debug('Dropped voice state for session %s in guild ID %s.', departed.session_id, self.id)
        return None

    @property
    def channels(self) -> List[GuildChannel]:
        """List[:class:`abc.GuildChannel`]: Cached channels, threads excluded."""
        return list(self._channels.values())

    @property
    def threads(self) -> List[Thread]:
        """List[:class:`Thread`]: Cached threads. Archived threads are usually not among them."""
        return list(self._threads.values())

    @property
    def members(self) -> List[Member]:
        """List[:class:`Member`]: Cached members."""
        return list(self._members.values())

    @property
    def voice_states(self) -> List[VoiceState]:
        """List[:class:`VoiceState`]: One entry per session connected to voice."""
        return list(self._voice_states.values())

    @property
    def stage_instances(self) -> List[StageInstance]:
        """List[:class:`StageInstance`]: Live stage instances."""
        return list(self._stage_instances.values())

    def get_channel(self, channel_id: int, /) -> Optional[GuildChannel]:
        """Looks up a cached channel. Threads are not searched, see :meth:`get_channel_or_thread`."""
        return self._channels.get(channel_id)

    def get_channel_or_thread(self, channel_id: int, /) -> Optional[Union[Thread, GuildChannel]]:
        """Looks up a cached channel, falling back to threads."""
        return self._channels.get(channel_id) or self._threads.get(channel_id)

    def get_thread(self, thread_id: int, /) -> Optional[Thread]:
        """Looks up a cached thread.

        Archived threads are rarely cached; page through
        :meth:`TextChannel.archived_threads` for those.
        """
        return self._threads.get(thread_id)

    def get_member(self, user_id: int, /) -> Optional[Member]:
        return self._members.get(user_id)

    def get_stage_instance(self, stage_instance_id: int, /) -> Optional[StageInstance]:
        return self._stage_instances.get(stage_instance_id)
