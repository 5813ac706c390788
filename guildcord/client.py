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

import asyncio
import inspect
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Coroutine,
    Dict,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
)

import aiohttp

from .errors import InvalidData
from .http import HTTPClient
from .mentions import AllowedMentions
from .state import ConnectionState

if TYPE_CHECKING:
    from typing_extensions import Self
    from types import TracebackType

    from .channel import DMChannel
    from .guild import Guild, GuildChannel
    from .threads import Thread

# fmt: off
__all__ = (
    'Client',
)
# fmt: on

Coro = TypeVar('Coro', bound=Callable[..., Coroutine[Any, Any, Any]])

_log = logging.getLogger(__name__)


class Client:
    r"""Entry point for working with guild channels over the HTTP API.

    Nothing is fetched behind your back. The cache holds the guilds handed
    to :meth:`add_guild` and whatever the gateway events fed to
    :meth:`parse` describe.

    Use it as an async context manager to open and close the HTTP session.

    .. code-block:: python3

        async with guildcord.Client(token='Bot ...') as client:
            channel = await client.fetch_channel(channel_id)
            await channel.send('hello')

    Parameters
    -----------
    token: Optional[:class:`str`]
        Sent verbatim as the ``Authorization`` header.
    connector: Optional[:class:`aiohttp.BaseConnector`]
        Connection pool for the session.
    proxy: Optional[:class:`str`]
        Proxy URL.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        Credentials for ``proxy``.
    http_trace: Optional[:class:`aiohttp.TraceConfig`]
        Hooks for tracing requests.
    allowed_mentions: Optional[:class:`AllowedMentions`]
        Default mention policy for every message sent.
    self_id: Optional[:class:`int`]
        The client's own user ID. Thread memberships without a user ID
        resolve to it.

    Attributes
    -----------
    http: :class:`HTTPClient`
        Request layer.
    """

    def __init__(
        self,
        *,
        token: Optional[str] = None,
        connector: Optional[aiohttp.BaseConnector] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[aiohttp.BasicAuth] = None,
        http_trace: Optional[aiohttp.TraceConfig] = None,
        allowed_mentions: Optional[AllowedMentions] = None,
        self_id: Optional[int] = None,
    ) -> None:
        _check_allowed_mentions(allowed_mentions)
        self.http: HTTPClient = HTTPClient(
            connector,
            token=token,
            proxy=proxy,
            proxy_auth=proxy_auth,
            http_trace=http_trace,
        )
        self._connection: ConnectionState = ConnectionState(
            dispatch=self.dispatch,
            http=self.http,
            allowed_mentions=allowed_mentions,
            self_id=self_id,
        )
        self._closed: bool = False

    async def __aenter__(self) -> Self:
        await self.http.startup()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def _invoke_handler(self, handler: Callable[..., Coroutine[Any, Any, Any]], name: str, *args: Any) -> None:
        try:
            await handler(*args)
        except asyncio.CancelledError:
            return
        except Exception:
            try:
                await self.on_error(name, *args)
            except asyncio.CancelledError:
                return

    def dispatch(self, event: str, /, *args: Any) -> None:
        """Runs the ``on_<event>`` handler, if one is registered, as a background task."""
        name = f'on_{event}'
        handler = getattr(self, name, None)
        if handler is None:
            _log.debug('No handler for event %s.', event)
            return

        _log.debug('Dispatching event %s.', event)
        asyncio.create_task(self._invoke_handler(handler, name, *args), name=f'guildcord: {name}')

    async def on_error(self, event_method: str, /, *args: Any) -> None:
        """|coro|

        Called when an event handler raises. Logs the traceback by default;
        override it to handle errors differently.
        """
        _log.exception('Ignoring exception in %s', event_method)

    def event(self, coro: Coro, /) -> Coro:
        """Decorator that registers ``coro`` as the handler named after it.

        .. code-block:: python3

            @client.event
            async def on_guild_channel_delete(channel):
                print('gone:', channel.name)

        Raises
        --------
        TypeError
            ``coro`` is not a coroutine function.
        """
        if not inspect.iscoroutinefunction(coro):
            raise TypeError('event registered must be a coroutine function')

        setattr(self, coro.__name__, coro)
        _log.debug('Registered event handler %s.', coro.__name__)
        return coro

    @property
    def allowed_mentions(self) -> Optional[AllowedMentions]:
        """Optional[:class:`AllowedMentions`]: Default mention policy for sent messages."""
        return self._connection.allowed_mentions

    @allowed_mentions.setter
    def allowed_mentions(self, value: Optional[AllowedMentions]) -> None:
        _check_allowed_mentions(value)
        self._connection.allowed_mentions = value

    @property
    def guilds(self) -> List[Guild]:
        """List[:class:`Guild`]: Cached guilds."""
        return self._connection.guilds

    @property
    def private_channels(self) -> List[DMChannel]:
        """List[:class:`DMChannel`]: Cached direct message channels."""
        return self._connection.private_channels

    def is_closed(self) -> bool:
        """:class:`bool`: Whether :meth:`close` has run."""
        return self._closed

    async def close(self) -> None:
        """|coro|

        Closes the HTTP session. Calling it again does nothing.
        """
        if not self._closed:
            self._closed = True
            await self.http.close()

    def add_guild(self, data: Dict[str, Any]) -> Guild:
        """Caches a guild payload along with its channels, threads and voice states."""
        return self._connection._add_guild_from_data(data)

    def get_guild(self, id: int, /) -> Optional[Guild]:
        return self._connection._get_guild(id)

    def parse(self, event: str, data: Dict[str, Any]) -> None:
        """Feeds a raw gateway event, e.g. ``THREAD_UPDATE``, into the cache.

        Events the cache does not track are logged and dropped.
        """
        handler = getattr(self._connection, f'parse_{event.lower()}', None)
        if handler is None:
            _log.debug('Unknown event %s.', event)
            return
        handler(data)

    def get_channel(self, id: int, /) -> Optional[Union[GuildChannel, Thread, DMChannel]]:
        """Looks up a cached channel, thread or direct message channel by ID."""
        return self._connection.get_channel(id)

    async def fetch_channel(self, channel_id: int, /) -> Union[GuildChannel, Thread, DMChannel]:
        """|coro|

        Fetches a channel through the API, bypassing the cache.

        Raises
        -------
        InvalidData
            The channel type is not one this library models.
        NotFound
            No such channel.
        Forbidden
            Missing permissions.
        HTTPException
            The request failed.
        """
        data = await self.http.get_channel(channel_id)
        channel = self._connection.create_channel(data)  # type: ignore
        if channel is None:
            raise InvalidData('Unknown channel type {type} for channel ID {id}.'.format_map(data))
        return channel


def _check_allowed_mentions(value: Any) -> None:
    if value is not None and not isinstance(value, AllowedMentions):
        raise TypeError(f'allowed_mentions must be AllowedMentions not {value.__class__.__name__}')
