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
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from . import utils
from .mixins import Hashable

if TYPE_CHECKING:
    from .guild import Guild
    from .state import ConnectionState
    from .types.member import MemberWithUser as MemberWithUserPayload

# fmt: off
__all__ = (
    'Member',
)
# fmt: on


class Member(Hashable):
    """Snapshot of a guild member as far as channels care about it.

    Roles stay as raw IDs and presence is not tracked. Members compare
    and hash by user ID, and ``str(member)`` is :attr:`display_name`.

    Attributes
    -----------
    id: :class:`int`
        The user ID of the member.
    name: :class:`str`
        The member's username.
    global_name: Optional[:class:`str`]
        The member's global display name, if set.
    nick: Optional[:class:`str`]
        The guild specific nickname of the member.
    roles: List[:class:`int`]
        The role IDs the member has.
    joined_at: Optional[:class:`datetime.datetime`]
        When the member joined the guild, in UTC.
    deaf: :class:`bool`
        Whether the member is deafened by the guild.
    mute: :class:`bool`
        Whether the member is muted by the guild.
    bot: :class:`bool`
        Whether the member is a bot account.
    """

    __slots__ = (
        'id',
        'name',
        'global_name',
        'nick',
        'roles',
        'joined_at',
        'deaf',
        'mute',
        'bot',
        'guild',
        '_state',
    )

    def __init__(self, *, data: MemberWithUserPayload, guild: Guild, state: ConnectionState) -> None:
        self._state: ConnectionState = state
        self.guild: Guild = guild
        user = data['user']
        self.id: int = int(user['id'])
        self.name: str = user['username']
        self.global_name: Optional[str] = user.get('global_name')
        self.bot: bool = user.get('bot', False)
        self._update(data)

    def __repr__(self) -> str:
        return f'<Member id={self.id} name={self.name!r} nick={self.nick!r} guild_id={self.guild.id}>'

    def __str__(self) -> str:
        return self.display_name

    def _update(self, data: Dict[str, Any]) -> None:
        self.nick: Optional[str] = data.get('nick')
        self.roles: List[int] = [int(r) for r in data.get('roles', [])]
        self.joined_at: Optional[datetime.datetime] = utils.parse_time(data.get('joined_at'))
        self.deaf: bool = data.get('deaf', False)
        self.mute: bool = data.get('mute', False)

    @property
    def display_name(self) -> str:
        """:class:`str`: Returns the nickname, global name or username, whichever is set first."""
        return self.nick or self.global_name or self.name

    @property
    def mention(self) -> str:
        """:class:`str`: Returns a string that allows you to mention the member."""
        return f'<@{self.id}>'

    @property
    def created_at(self) -> datetime.datetime:
        """:class:`datetime.datetime`: Returns the user's creation time in UTC."""
        return utils.snowflake_time(self.id)
