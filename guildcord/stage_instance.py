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

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .enums import PrivacyLevel, try_enum
from .mixins import Hashable
from .utils import MISSING, _get_as_snowflake

__all__ = ('StageInstance',)

if TYPE_CHECKING:
    from .channel import StageChannel
    from .guild import Guild
    from .member import Member
    from .state import ConnectionState
    from .types.channel import StageInstance as StageInstancePayload


class StageInstance(Hashable):
    """A stage that is currently live.

    Instances are compared and hashed by ID.

    Attributes
    -----------
    id: :class:`int`
        The instance's snowflake.
    guild: :class:`Guild`
        Guild hosting the stage.
    channel_id: :class:`int`
        ID of the :class:`StageChannel` that is live.
    topic: :class:`str`
        What is being talked about.
    privacy_level: :class:`PrivacyLevel`
        Who may discover the instance.
    discoverable_disabled: :class:`bool`
        Whether the instance is hidden from discovery.
    scheduled_event_id: Optional[:class:`int`]
        The scheduled event that started this instance, if one did.
    """

    __slots__ = (
        'id',
        'guild',
        'topic',
        'channel_id',
        'privacy_level',
        'scheduled_event_id',
        'discoverable_disabled',
        '_state',
    )

    def __init__(self, *, state: ConnectionState, guild: Guild, data: StageInstancePayload) -> None:
        self._state: ConnectionState = state
        self.guild: Guild = guild
        self._update(data)

    def _update(self, data: StageInstancePayload, /) -> None:
        self.id: int = int(data['id'])
        self.channel_id: int = int(data['channel_id'])
        self.topic: str = data['topic']
        self.privacy_level: PrivacyLevel = try_enum(PrivacyLevel, data['privacy_level'])
        self.discoverable_disabled: bool = data.get('discoverable_disabled', False)
        self.scheduled_event_id: Optional[int] = _get_as_snowflake(data, 'guild_scheduled_event_id')

    def __repr__(self) -> str:
        return f'<StageInstance id={self.id} channel_id={self.channel_id} topic={self.topic!r} guild={self.guild!r}>'

    @property
    def channel(self) -> Optional[StageChannel]:
        """Optional[:class:`StageChannel`]: The live stage, if it is cached."""
        return self.guild.get_channel(self.channel_id)  # type: ignore # always a stage channel

    @property
    def speakers(self) -> List[Member]:
        """List[:class:`Member`]: Who is on stage right now. Empty when the channel is not cached."""
        channel = self.channel
        return channel.speakers if channel is not None else []

    async def edit(
        self,
        *,
        topic: str = MISSING,
        privacy_level: PrivacyLevel = MISSING,
        reason: Optional[str] = None,
    ) -> None:
        """|coro|

        Changes the topic or privacy level in place. Nothing is sent when
        neither is given. Requires :attr:`~Permissions.manage_channels`.

        Raises
        ------
        TypeError
            ``privacy_level`` is not a :class:`PrivacyLevel`.
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the edit.
        """
        payload: Dict[str, Any] = {}

        if topic is not MISSING:
            payload['topic'] = topic

        if privacy_level is not MISSING:
            if not isinstance(privacy_level, PrivacyLevel):
                raise TypeError('privacy_level field must be of type PrivacyLevel')
            payload['privacy_level'] = privacy_level.value

        if not payload:
            return

        data = await self._state.http.edit_stage_instance(self.channel_id, **payload, reason=reason)
        self._update(data)

    async def delete(self, *, reason: Optional[str] = None) -> None:
        """|coro|

        Ends the stage and drops the instance from the guild's cache.
        Requires :attr:`~Permissions.manage_channels`.
        """
        await self._state.http.delete_stage_instance(self.channel_id, reason=reason)
        self.guild._remove_stage_instance(self)
