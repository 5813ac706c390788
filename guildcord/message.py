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
from typing import TYPE_CHECKING, Any, Dict, Optional

from . import utils
from .flags import MessageFlags
from .mixins import Hashable

if TYPE_CHECKING:
    from typing_extensions import Self

    from .abc import MessageableChannel
    from .state import ConnectionState
    from .types.message import Message as MessagePayload, MessageReference as MessageReferencePayload

__all__ = (
    'Message',
    'MessageReference',
)


class MessageReference:
    """Points at a message, for replies and crossposts.

    Attributes
    -----------
    message_id: Optional[:class:`int`]
        Target message.
    channel_id: :class:`int`
        Channel of the target.
    guild_id: Optional[:class:`int`]
        Guild of the target, ``None`` in direct messages.
    fail_if_not_exists: :class:`bool`
        When ``False`` a reply to a deleted message is sent as a plain message
        instead of failing.
    """

    __slots__ = ('message_id', 'channel_id', 'guild_id', 'fail_if_not_exists')

    def __init__(
        self,
        *,
        message_id: Optional[int],
        channel_id: int,
        guild_id: Optional[int] = None,
        fail_if_not_exists: bool = True,
    ) -> None:
        self.message_id: Optional[int] = message_id
        self.channel_id: int = channel_id
        self.guild_id: Optional[int] = guild_id
        self.fail_if_not_exists: bool = fail_if_not_exists

    @classmethod
    def from_message(cls, message: Message, *, fail_if_not_exists: bool = True) -> Self:
        """Builds a reference to ``message``."""
        return cls(
            message_id=message.id,
            channel_id=message.channel_id,
            guild_id=message.guild_id,
            fail_if_not_exists=fail_if_not_exists,
        )

    @classmethod
    def _from_data(cls, data: Dict[str, Any], *, channel_id: int) -> Self:
        return cls(
            message_id=utils._get_as_snowflake(data, 'message_id'),
            channel_id=int(data.get('channel_id', channel_id)),
            guild_id=utils._get_as_snowflake(data, 'guild_id'),
            fail_if_not_exists=data.get('fail_if_not_exists', True),
        )

    def __repr__(self) -> str:
        return (
            f'<MessageReference message_id={self.message_id!r} channel_id={self.channel_id!r}'
            f' guild_id={self.guild_id!r}>'
        )

    def to_dict(self) -> MessageReferencePayload:
        fields = {
            'message_id': self.message_id,
            'channel_id': self.channel_id,
            'guild_id': self.guild_id,
            'fail_if_not_exists': self.fail_if_not_exists,
        }
        return {key: value for key, value in fields.items() if value is not None}  # type: ignore

    to_message_reference_dict = to_dict


class Message(Hashable):
    """A message as returned by the API.

    Only what the channel layer needs is parsed: identifiers, text, flags
    and the reply reference. Messages compare and hash by ID.

    Attributes
    -----------
    id: :class:`int`
        Snowflake of the message.
    channel: Union[:class:`TextChannel`, :class:`VoiceChannel`, :class:`StageChannel`, :class:`Thread`, :class:`DMChannel`]
        Where it was posted.
    channel_id: :class:`int`
        ID of :attr:`channel`.
    guild_id: Optional[:class:`int`]
        Guild it was posted in, ``None`` for direct messages.
    author_id: :class:`int`
        Who posted it.
    content: :class:`str`
        Text body.
    tts: :class:`bool`
        Whether it was read aloud.
    pinned: :class:`bool`
        Whether it is pinned.
    flags: :class:`MessageFlags`
        Message flags.
    reference: Optional[:class:`MessageReference`]
        The replied to or crossposted message.
    """

    __slots__ = (
        'id',
        'tts',
        'type',
        'flags',
        'pinned',
        'channel',
        'content',
        'guild_id',
        'author_id',
        'reference',
        'channel_id',
        '_state',
        '_edited_timestamp',
    )

    def __init__(self, *, state: ConnectionState, channel: MessageableChannel, data: MessagePayload) -> None:
        self._state: ConnectionState = state
        self.channel: MessageableChannel = channel
        self.id: int = int(data['id'])
        self.channel_id: int = int(data.get('channel_id', channel.id))
        self.author_id: int = int(data['author']['id'])
        self.content: str = data.get('content', '')
        self.tts: bool = data.get('tts', False)
        self.pinned: bool = data.get('pinned', False)
        self.type: int = data.get('type', 0)
        self.flags: MessageFlags = MessageFlags._from_value(data.get('flags', 0))
        self._edited_timestamp: Optional[datetime.datetime] = utils.parse_time(data.get('edited_timestamp'))

        guild_id = utils._get_as_snowflake(data, 'guild_id')
        if guild_id is None:
            # responses for guild channels often omit guild_id
            guild = getattr(channel, 'guild', None)
            guild_id = guild and guild.id
        self.guild_id: Optional[int] = guild_id

        ref = data.get('message_reference')
        self.reference: Optional[MessageReference] = (
            None if ref is None else MessageReference._from_data(ref, channel_id=self.channel_id)  # type: ignore
        )

    def __repr__(self) -> str:
        return f'<Message id={self.id} channel_id={self.channel_id} author_id={self.author_id} flags={self.flags!r}>'

    @property
    def created_at(self) -> datetime.datetime:
        """:class:`datetime.datetime`: Creation time, from the snowflake."""
        return utils.snowflake_time(self.id)

    @property
    def edited_at(self) -> Optional[datetime.datetime]:
        """Optional[:class:`datetime.datetime`]: Last edit time, if the message was edited."""
        return self._edited_timestamp

    @property
    def jump_url(self) -> str:
        """:class:`str`: Web link to the message."""
        scope = '@me' if self.guild_id is None else self.guild_id
        return f'https://discord.com/channels/{scope}/{self.channel_id}/{self.id}'

    def is_silent(self) -> bool:
        """:class:`bool`: Whether notifications were suppressed."""
        return self.flags.suppress_notifications

    async def delete(self, *, reason: Optional[str] = None) -> None:
        """|coro|

        Deletes the message.

        Raises
        ------
        Forbidden
            Missing permissions.
        NotFound
            Already deleted.
        HTTPException
            The request failed.
        """
        await self._state.http.delete_message(self.channel_id, self.id, reason=reason)

    def to_reference(self, *, fail_if_not_exists: bool = True) -> MessageReference:
        """Shortcut for :meth:`MessageReference.from_message`."""
        return MessageReference.from_message(self, fail_if_not_exists=fail_if_not_exists)

    def to_message_reference_dict(self) -> MessageReferencePayload:
        # replies to a message object never set fail_if_not_exists
        data: MessageReferencePayload = {'message_id': self.id, 'channel_id': self.channel_id}
        if self.guild_id is not None:
            data['guild_id'] = self.guild_id
        return data
