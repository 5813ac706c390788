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
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .enums import InviteTarget, try_enum
from .utils import parse_time

__all__ = (
    'Invite',
)

if TYPE_CHECKING:
    from .abc import GuildChannel
    from .guild import Guild
    from .object import Object
    from .state import ConnectionState
    from .types.invite import Invite as InvitePayload


def _user_id(data: InvitePayload, key: str) -> Optional[int]:
    user: Optional[Dict[str, Any]] = data.get(key)  # type: ignore
    return None if user is None else int(user['id'])


class Invite:
    r"""An invite code leading to a guild channel.

    Counters and timestamps are only present when the payload carried
    them, which depends on the endpoint that produced it. Invites compare
    and hash by code, and ``str(invite)`` gives :attr:`url`.

    Attributes
    -----------
    code: :class:`str`
        The invite code.
    max_age: Optional[:class:`int`]
        Lifetime in seconds, ``0`` when it never expires.
    max_uses: Optional[:class:`int`]
        Use cap, ``0`` when unlimited.
    uses: Optional[:class:`int`]
        Times used so far.
    temporary: Optional[:class:`bool`]
        Whether it grants temporary membership.
    created_at: Optional[:class:`datetime.datetime`]
        Creation time.
    expires_at: Optional[:class:`datetime.datetime`]
        Expiry time, ``None`` for permanent invites.
    inviter_id: Optional[:class:`int`]
        Who created it.
    target_type: :class:`InviteTarget`
        What a voice channel invite shows.
    target_user_id: Optional[:class:`int`]
        Whose stream it shows.
    guild: Optional[Union[:class:`Guild`, :class:`Object`]]
        Destination guild.
    channel: Optional[Union[:class:`abc.GuildChannel`, :class:`Object`]]
        Destination channel.
    """

    __slots__ = (
        'code',
        'uses',
        'guild',
        'channel',
        'max_age',
        'max_uses',
        'temporary',
        'created_at',
        'expires_at',
        'inviter_id',
        'target_type',
        'target_user_id',
        '_state',
    )

    BASE = 'https://discord.gg'

    def __init__(
        self,
        *,
        state: ConnectionState,
        data: InvitePayload,
        guild: Optional[Union[Guild, Object]] = None,
        channel: Optional[Union[GuildChannel, Object]] = None,
    ) -> None:
        self._state: ConnectionState = state
        self.guild: Optional[Union[Guild, Object]] = guild
        self.channel: Optional[Union[GuildChannel, Object]] = channel

        self.code: str = data['code']
        self.uses: Optional[int] = data.get('uses')
        self.max_age: Optional[int] = data.get('max_age')
        self.max_uses: Optional[int] = data.get('max_uses')
        self.temporary: Optional[bool] = data.get('temporary')
        self.created_at: Optional[datetime.datetime] = parse_time(data.get('created_at'))
        self.expires_at: Optional[datetime.datetime] = parse_time(data.get('expires_at'))
        self.target_type: InviteTarget = try_enum(InviteTarget, data.get('target_type', 0))
        self.inviter_id: Optional[int] = _user_id(data, 'inviter')
        self.target_user_id: Optional[int] = _user_id(data, 'target_user')

    def __str__(self) -> str:
        return self.url

    def __repr__(self) -> str:
        return f'<Invite code={self.code!r} channel_id={self.channel_id} max_age={self.max_age} max_uses={self.max_uses}>'

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Invite) and self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)

    @property
    def id(self) -> str:
        """:class:`str`: Same as :attr:`code`."""
        return self.code

    @property
    def channel_id(self) -> Optional[int]:
        """Optional[:class:`int`]: ID of :attr:`channel`."""
        return self.channel and self.channel.id

    @property
    def url(self) -> str:
        """:class:`str`: The shareable link."""
        return f'{self.BASE}/{self.code}'

    async def delete(self, *, reason: Optional[str] = None) -> Invite:
        """|coro|

        Revokes the invite. Needs :attr:`~Permissions.manage_channels`.

        Raises
        -------
        Forbidden
            Missing permissions.
        NotFound
            Unknown or expired invite.
        HTTPException
            The request failed.

        Returns
        --------
        :class:`Invite`
            The invite as it was when revoked.
        """
        data = await self._state.http.delete_invite(self.code, reason=reason)
        return Invite(state=self._state, data=data, guild=self.guild, channel=self.channel)
