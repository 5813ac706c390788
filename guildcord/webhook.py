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

from typing import TYPE_CHECKING, Optional

from .enums import WebhookType, try_enum
from .mixins import Hashable
from .utils import _get_as_snowflake

# fmt: off
__all__ = (
    'Webhook',
)
# fmt: on

if TYPE_CHECKING:
    from .abc import GuildChannel
    from .state import ConnectionState
    from .types.channel import FollowedChannel as FollowedChannelPayload
    from .types.webhook import Webhook as WebhookPayload


class Webhook(Hashable):
    """Represents a channel webhook.

    Only the read side of webhooks is modelled, executing a webhook is
    handled elsewhere.

    Attributes
    ------------
    id: :class:`int`
        The webhook's ID
    type: :class:`WebhookType`
        The type of the webhook.
    token: Optional[:class:`str`]
        The authentication token of the webhook. If this is ``None``
        then the webhook cannot be used to make requests.
    guild_id: Optional[:class:`int`]
        The guild ID this webhook is for.
    channel_id: Optional[:class:`int`]
        The channel ID this webhook is for.
    user_id: Optional[:class:`int`]
        The ID of the user who created the webhook, if known.
    name: Optional[:class:`str`]
        The default name of the webhook.
    application_id: Optional[:class:`int`]
        The application ID of the webhook, if any.
    """

    __slots__ = (
        'id',
        'type',
        'token',
        'guild_id',
        'channel_id',
        'user_id',
        'name',
        '_avatar',
        'application_id',
        '_state',
    )

    def __init__(self, data: WebhookPayload, *, state: ConnectionState) -> None:
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self.type: WebhookType = try_enum(WebhookType, int(data['type']))
        self.token: Optional[str] = data.get('token')
        self.guild_id: Optional[int] = _get_as_snowflake(data, 'guild_id')
        self.channel_id: Optional[int] = _get_as_snowflake(data, 'channel_id')
        self.name: Optional[str] = data.get('name')
        self._avatar: Optional[str] = data.get('avatar')
        self.application_id: Optional[int] = _get_as_snowflake(data, 'application_id')

        user = data.get('user')
        self.user_id: Optional[int] = None if user is None else int(user['id'])

    @classmethod
    def _as_follower(cls, data: FollowedChannelPayload, *, channel: GuildChannel) -> Webhook:
        feed = {
            'id': data['webhook_id'],
            'type': 2,
            'name': channel.name,
            'channel_id': channel.id,
            'guild_id': channel.guild.id,
        }
        return cls(feed, state=channel._state)  # type: ignore # the feed is a partial webhook payload

    def __repr__(self) -> str:
        return f'<Webhook id={self.id!r} type={self.type!r} name={self.name!r}>'

    @property
    def url(self) -> str:
        """:class:`str` : Returns the webhook's url."""
        return f'https://discord.com/api/webhooks/{self.id}/{self.token}'

    @property
    def channel(self) -> Optional[GuildChannel]:
        """Optional[:class:`abc.GuildChannel`]: The channel this webhook belongs to, if it is cached."""
        if self.channel_id is None:
            return None
        return self._state.get_channel(self.channel_id)  # type: ignore
