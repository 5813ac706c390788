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
from datetime import datetime
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    TYPE_CHECKING,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    overload,
    runtime_checkable,
)

from . import utils
from .context_managers import Typing
from .enums import ChannelType, InviteTarget, OverwriteType, RTCRegion
from .errors import ClientException
from .file import File
from .flags import MessageFlags
from .http import handle_message_parameters
from .invite import Invite
from .member import Member
from .mentions import AllowedMentions
from .object import Object
from .permissions import Overwrite, OverwriteSet, PermissionOverwrite

__all__ = (
    'Snowflake',
    'Channel',
    'GuildChannel',
    'Messageable',
)

T = TypeVar('T')

if TYPE_CHECKING:
    from .state import ConnectionState
    from .guild import Guild
    from .channel import CategoryChannel, TextChannel, DMChannel, VoiceChannel, StageChannel
    from .message import Message, MessageReference
    from .threads import Thread
    from .types.channel import (
        PermissionOverwrite as PermissionOverwritePayload,
        Channel as ChannelPayload,
        GuildChannel as GuildChannelPayload,
    )
    from .types.snowflake import SnowflakeList

    MessageableChannel = Union[TextChannel, VoiceChannel, StageChannel, Thread, DMChannel]
    SnowflakeTime = Union['Snowflake', datetime]
    OverwritesInput = Union[Mapping[Union[Member, Object], PermissionOverwrite], Iterable[Overwrite]]

MISSING = utils.MISSING

_log = logging.getLogger(__name__)


@runtime_checkable
class Snowflake(Protocol):
    """Anything carrying a snowflake ``id``.

    :class:`.Object` is the simplest way to build one by hand.

    Attributes
    -----------
    id: :class:`int`
        The snowflake.
    """

    id: int


def _snowflake_id(value: SnowflakeTime, *, high: bool = False) -> int:
    if isinstance(value, datetime):
        return utils.time_snowflake(value, high=high)
    return value.id


def _overwrite_type_for(target: Union[Member, Object, Snowflake]) -> OverwriteType:
    # roles live in another layer, so any non-member target is taken as a role
    if isinstance(target, Member):
        return OverwriteType.member
    if isinstance(target, Object) and target.type is Member:
        return OverwriteType.member
    return OverwriteType.role


def _overwrites_to_payload(overwrites: OverwritesInput) -> List[PermissionOverwritePayload]:
    if isinstance(overwrites, Mapping):
        records = []
        for target, perm in overwrites.items():
            if not isinstance(perm, PermissionOverwrite):
                raise TypeError(f'Expected PermissionOverwrite received {perm.__class__.__name__}')
            records.append(Overwrite.from_permissions(target.id, type=_overwrite_type_for(target), overwrite=perm))
    else:
        records = list(overwrites)
        for record in records:
            if not isinstance(record, Overwrite):
                raise TypeError(f'Expected Overwrite received {record.__class__.__name__}')

    return [record.to_dict() for record in records]


def _enum_value(value: Any) -> Any:
    return getattr(value, 'value', value)


def _clamp_slowmode(delay: Optional[int]) -> Optional[int]:
    return None if delay is None else max(0, int(delay))


def _rtc_region(region: Any) -> Optional[str]:
    if region is None or region == RTCRegion.automatic:
        return None
    return getattr(region, 'value', str(region))


# keyword -> (payload key, conversion)
_EDIT_FIELDS: Tuple[Tuple[str, str, Optional[Callable[[Any], Any]]], ...] = (
    ('category', 'parent_id', lambda category: category and category.id),
    ('slowmode_delay', 'rate_limit_per_user', _clamp_slowmode),
    ('default_thread_slowmode_delay', 'default_thread_rate_limit_per_user', None),
    ('default_auto_archive_duration', 'default_auto_archive_duration', _enum_value),
    ('rtc_region', 'rtc_region', _rtc_region),
    ('video_quality_mode', 'video_quality_mode', _enum_value),
)


class Channel:
    """Base for every channel kind, guild or private.

    Implemented by :class:`~guildcord.TextChannel`, :class:`~guildcord.VoiceChannel`,
    :class:`~guildcord.StageChannel`, :class:`~guildcord.CategoryChannel`,
    :class:`~guildcord.ForumChannel`, :class:`~guildcord.DMChannel` and
    :class:`~guildcord.Thread`.

    Attributes
    -----------
    id: :class:`int`
        The channel's snowflake.
    """

    __slots__ = ()

    id: int
    _messageable: ClassVar[bool] = False

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: What kind of channel this is."""
        raise NotImplementedError

    def is_messageable(self) -> bool:
        """:class:`bool`: Whether :class:`Messageable` operations apply."""
        return self._messageable

    @property
    def created_at(self) -> datetime:
        """:class:`datetime.datetime`: Creation time, read from the snowflake."""
        return utils.snowflake_time(self.id)


class GuildChannel(Channel):
    """Operations shared by every channel that lives in a guild.

    Threads implement this too but have no overwrites of their own, so
    the overwrite mutators are no-ops on them.

    Attributes
    -----------
    name: :class:`str`
        Display name.
    guild: :class:`~guildcord.Guild`
        Owning guild.
    category_id: Optional[:class:`int`]
        Parent category, when there is one.
    """

    __slots__ = ()

    name: str
    guild: Guild
    category_id: Optional[int]
    _state: ConnectionState
    _overwrites: List[PermissionOverwritePayload]
    _supports_overwrites: ClassVar[bool] = True

    if TYPE_CHECKING:

        def __init__(self, *, state: ConnectionState, guild: Guild, data: GuildChannelPayload): ...

    def __str__(self) -> str:
        return self.name

    def _update(self, guild: Guild, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def _fill_overwrites(self, data: GuildChannelPayload) -> None:
        self._overwrites = list(data.get('permission_overwrites', []))

    async def _edit(self, options: Dict[str, Any], reason: Optional[str]) -> Optional[ChannelPayload]:
        for keyword, key, convert in _EDIT_FIELDS:
            if keyword in options:
                value = options.pop(keyword)
                options[key] = value if convert is None else convert(value)

        if options.pop('sync_permissions', False):
            category_id = options.get('parent_id', self.category_id)
            category = None if category_id is None else self.guild.get_channel(category_id)
            if category is not None:
                options['permission_overwrites'] = list(category._overwrites)

        # explicit overwrites win over a category sync
        if 'overwrites' in options:
            overwrites = options.pop('overwrites')
            options['permission_overwrites'] = None if overwrites is None else _overwrites_to_payload(overwrites)

        if 'type' in options:
            if not isinstance(options['type'], ChannelType):
                raise TypeError('type field must be of type ChannelType')
            options['type'] = options['type'].value

        if not options:
            return None
        return await self._state.http.edit_channel(self.id, reason=reason, **options)

    @property
    def overwrites(self) -> OverwriteSet:
        """:class:`OverwriteSet`: The channel's overwrite records, rebuilt on each access."""
        return OverwriteSet.materialize(self._overwrites)

    def get_overwrite(self, id: int, /) -> Optional[Overwrite]:
        """Looks up the overwrite record for a role or member ID.

        Returns ``None`` when the channel has none for ``id``.
        """
        return self.overwrites.get(id)

    def overwrites_for(self, obj: Snowflake) -> PermissionOverwrite:
        """The tri-state overwrite applying to ``obj``.

        Parameters
        -----------
        obj: :class:`~guildcord.abc.Snowflake`
            A role or member.

        Returns
        ---------
        :class:`~guildcord.PermissionOverwrite`
            All ``None`` when there is no record for ``obj``.
        """
        record = self.get_overwrite(obj.id)
        return PermissionOverwrite() if record is None else record.permissions()

    @property
    def mention(self) -> str:
        """:class:`str`: Markup that renders as a link to this channel."""
        return f'<#{self.id}>'

    @property
    def jump_url(self) -> str:
        """:class:`str`: Web link to this channel."""
        return f'https://discord.com/channels/{self.guild.id}/{self.id}'

    @property
    def category(self) -> Optional[CategoryChannel]:
        """Optional[:class:`~guildcord.CategoryChannel`]: The cached parent category, if any."""
        if self.category_id is None:
            return None
        return self.guild.get_channel(self.category_id)  # type: ignore # only categories are parents

    @property
    def permissions_synced(self) -> bool:
        """:class:`bool`: Whether the overwrites match the category's, ignoring order.

        ``False`` when the channel has no cached category.
        """
        category = self.category
        return category is not None and category.overwrites == self.overwrites

    async def delete(self, *, reason: Optional[str] = None) -> None:
        """|coro|

        Deletes the channel. Needs :attr:`~guildcord.Permissions.manage_channels`.

        Parameters
        -----------
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.NotFound
            The channel is already gone.
        ~guildcord.HTTPException
            The request failed.
        """
        await self._state.http.delete_channel(self.id, reason=reason)

    async def update_overwrites(self, overwrite: Overwrite, /, *, reason: Optional[str] = None) -> None:
        """|coro|

        Stores ``overwrite`` as the record for its target, replacing any
        existing one. Does nothing on threads.

        Parameters
        -----------
        overwrite: :class:`Overwrite`
            The record to store.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        if not self._supports_overwrites:
            _log.debug('Skipping overwrite update on %s ID %s.', self.__class__.__name__, self.id)
            return

        await self._state.http.edit_channel_permissions(
            self.id,
            overwrite.id,
            str(overwrite.allow),
            str(overwrite.deny),
            overwrite.type.value,
            reason=reason,
        )

    async def delete_permission(self, target: Snowflake, /, *, reason: Optional[str] = None) -> None:
        """|coro|

        Drops the overwrite record of ``target``. Does nothing on threads.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        if not self._supports_overwrites:
            _log.debug('Skipping overwrite removal on %s ID %s.', self.__class__.__name__, self.id)
            return

        await self._state.http.delete_channel_permissions(self.id, target.id, reason=reason)

    async def set_permissions(
        self,
        target: Union[Member, Object],
        *,
        overwrite: Optional[PermissionOverwrite] = MISSING,
        reason: Optional[str] = None,
        **permissions: Optional[bool],
    ) -> None:
        r"""|coro|

        Writes or removes the overwrite for ``target``.

        A :class:`~guildcord.Member`, or an :class:`~guildcord.Object` typed
        as one, gets a member record. Any other snowflake is treated as a role.

        Pass either ``overwrite`` or permission keywords, not both.
        ``overwrite=None`` removes the record.

        .. code-block:: python3

            await channel.set_permissions(member, send_messages=False, view_channel=True)
            await channel.set_permissions(member, overwrite=None)

        Parameters
        -----------
        target: Union[:class:`~guildcord.Member`, :class:`~guildcord.Object`]
            Who the record applies to.
        overwrite: Optional[:class:`~guildcord.PermissionOverwrite`]
            The full overwrite, or ``None`` to delete it.
        \*\*permissions
            Individual permissions, as accepted by :class:`~guildcord.PermissionOverwrite`.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        TypeError
            Bad ``overwrite``, bad keywords, or both were mixed.
        ValueError
            Nothing to set was given.
        """
        if overwrite is MISSING:
            if not permissions:
                raise ValueError('No overwrite provided.')
            try:
                overwrite = PermissionOverwrite(**permissions)
            except (ValueError, TypeError):
                raise TypeError('Invalid permissions given to keyword arguments.')
        elif permissions:
            raise TypeError('Cannot mix overwrite and keyword arguments.')

        if overwrite is None:
            await self.delete_permission(target, reason=reason)
            return

        if not isinstance(overwrite, PermissionOverwrite):
            raise TypeError('Invalid overwrite type provided.')

        record = Overwrite.from_permissions(target.id, type=_overwrite_type_for(target), overwrite=overwrite)
        await self.update_overwrites(record, reason=reason)

    async def create_invite(
        self,
        *,
        reason: Optional[str] = None,
        max_age: int = 86400,
        max_uses: int = 0,
        temporary: bool = False,
        unique: bool = True,
        target_type: Optional[InviteTarget] = None,
        target_user: Optional[Snowflake] = None,
        target_application_id: Optional[int] = None,
    ) -> Invite:
        """|coro|

        Creates an invite pointing at this channel. Needs
        :attr:`~guildcord.Permissions.create_instant_invite`. Limits on the
        arguments are checked by the platform.

        Parameters
        ------------
        max_age: :class:`int`
            Lifetime in seconds, ``0`` for no expiry. One day by default.
        max_uses: :class:`int`
            Use cap, ``0`` for unlimited.
        temporary: :class:`bool`
            Whether members who join through it are removed when they disconnect.
        unique: :class:`bool`
            When ``False`` an existing matching invite may be returned instead.
        reason: Optional[:class:`str`]
            Audit log reason.
        target_type: Optional[:class:`.InviteTarget`]
            What a voice channel invite shows.
        target_user: Optional[:class:`~guildcord.abc.Snowflake`]
            Whose stream to show.
        target_application_id: Optional[:class:`int`]
            Which embedded application to show.

        Raises
        -------
        ValueError
            ``target_type`` was :attr:`InviteTarget.unknown`.
        ~guildcord.NotFound
            The channel cannot have invites.
        ~guildcord.HTTPException
            The request failed.

        Returns
        --------
        :class:`~guildcord.Invite`
            The new invite.
        """
        if target_type is InviteTarget.unknown:
            raise ValueError('Cannot create invite with an unknown target type')

        data = await self._state.http.create_invite(
            self.id,
            reason=reason,
            max_age=max_age,
            max_uses=max_uses,
            temporary=temporary,
            unique=unique,
            target_type=target_type.value if target_type else None,
            target_user_id=target_user.id if target_user else None,
            target_application_id=target_application_id,
        )
        return Invite(state=self._state, data=data, guild=self.guild, channel=self)

    async def invites(self) -> List[Invite]:
        """|coro|

        Lists the channel's active invites. Needs
        :attr:`~guildcord.Permissions.manage_channels`.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        state = self._state
        data = await state.http.invites_from_channel(self.id)
        return [Invite(state=state, data=invite, channel=self, guild=self.guild) for invite in data]


class Messageable:
    """Mixin for destinations that hold messages.

    Implemented by :class:`~guildcord.TextChannel`, :class:`~guildcord.VoiceChannel`,
    :class:`~guildcord.StageChannel`, :class:`~guildcord.DMChannel` and
    :class:`~guildcord.Thread`.
    """

    __slots__ = ()
    _state: ConnectionState
    _messageable: ClassVar[bool] = True

    async def _get_channel(self) -> MessageableChannel:
        raise NotImplementedError

    async def send(
        self,
        content: Optional[str] = None,
        *,
        tts: bool = False,
        embeds: Optional[Sequence[Any]] = None,
        file: Optional[File] = None,
        files: Optional[Sequence[File]] = None,
        stickers: Optional[Sequence[Snowflake]] = None,
        allowed_mentions: Optional[AllowedMentions] = None,
        reference: Optional[Union[Message, MessageReference]] = None,
        mention_author: Optional[bool] = None,
        components: Optional[Sequence[Any]] = None,
        silent: bool = False,
    ) -> Message:
        """|coro|

        Posts a message here.

        ``content`` goes through :func:`str`. Embeds and components come
        from other layers: anything with ``to_dict()``, or a plain
        :class:`dict`, is sent as is.

        Parameters
        ------------
        content: Optional[:class:`str`]
            Message text.
        tts: :class:`bool`
            Read the message aloud.
        embeds: List[Any]
            Up to 10 embeds.
        file: :class:`~guildcord.File`
            A single attachment.
        files: List[:class:`~guildcord.File`]
            Up to 10 attachments.
        stickers: Sequence[:class:`~guildcord.abc.Snowflake`]
            Up to 3 stickers.
        allowed_mentions: :class:`~guildcord.AllowedMentions`
            Merged over :attr:`~guildcord.Client.allowed_mentions`.
        reference: Union[:class:`~guildcord.Message`, :class:`~guildcord.MessageReference`]
            The message being replied to.
        mention_author: Optional[:class:`bool`]
            Overrides :attr:`~guildcord.AllowedMentions.replied_user`.
        components: List[Any]
            Message components.
        silent: :class:`bool`
            Suppress push and desktop notifications.

        Raises
        --------
        ~guildcord.HTTPException
            The request failed.
        ~guildcord.Forbidden
            Missing permissions.
        ValueError
            Too many files or embeds.
        TypeError
            Both ``file`` and ``files`` were given, or ``reference`` cannot
            be turned into a reply.
        """
        channel = await self._get_channel()
        state = self._state

        if reference is None:
            reference_dict = MISSING
        else:
            try:
                reference_dict = reference.to_message_reference_dict()
            except AttributeError:
                raise TypeError('reference parameter must be Message or MessageReference') from None

        flags = MISSING
        if silent:
            flags = MessageFlags._from_value(0)
            flags.suppress_notifications = True

        def given(value: Any) -> Any:
            return MISSING if value is None else value

        with handle_message_parameters(
            content=given(None if content is None else str(content)),
            tts=tts,
            file=given(file),
            files=given(files),
            embeds=given(embeds),
            components=given(components),
            allowed_mentions=allowed_mentions,
            message_reference=reference_dict,
            previous_allowed_mentions=state.allowed_mentions,
            mention_author=mention_author,
            stickers=given(None if stickers is None else [sticker.id for sticker in stickers]),
            flags=flags,
        ) as params:
            data = await state.http.send_message(channel.id, params=params)

        return state.create_message(channel=channel, data=data)

    def typing(self) -> Typing:
        """Shows the typing indicator for as long as the returned context manager is open.

        Awaiting the context manager instead sends one indicator.

        .. code-block:: python3

            async with channel.typing():
                report = await build_report()
            await channel.send(report)
        """
        return Typing(self)

    @overload
    async def trigger_typing(self) -> None:
        ...

    @overload
    async def trigger_typing(self, block: Awaitable[T], /) -> T:
        ...

    async def trigger_typing(self, block: Optional[Awaitable[Any]] = None, /) -> Any:
        """|coro|

        Shows the typing indicator.

        Without ``block`` a single indicator request is sent. With ``block``
        the indicator is kept alive while the block is awaited, and the
        background refresh is stopped once it finishes or raises.

        Returns
        --------
        Any
            Whatever ``block`` returned, or ``None``.
        """
        if block is None:
            channel = await self._get_channel()
            await self._state.http.send_typing(channel.id)
            return None

        async with self.typing():
            return await block

    async def fetch_message(self, id: int, /) -> Message:
        """|coro|

        Fetches one message by ID.

        Raises
        --------
        ~guildcord.NotFound
            No such message.
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        channel = await self._get_channel()
        data = await self._state.http.get_message(channel.id, id)
        return self._state.create_message(channel=channel, data=data)

    async def pins(self) -> List[Message]:
        """|coro|

        Fetches the pinned messages.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        channel = await self._get_channel()
        state = self._state
        data = await state.http.pins_from(channel.id)
        return [state.create_message(channel=channel, data=raw) for raw in data]

    async def history(
        self,
        *,
        limit: int = 50,
        before: Optional[SnowflakeTime] = None,
        after: Optional[SnowflakeTime] = None,
        around: Optional[SnowflakeTime] = None,
    ) -> AsyncIterator[Message]:
        """Iterates over one page of past messages, in the order the platform returns them.

        ``before``, ``after`` and ``around`` are mutually exclusive. Each
        takes a snowflake or a :class:`datetime.datetime`.

        .. code-block:: python3

            recent = [message async for message in channel.history(limit=20)]

        Parameters
        -----------
        limit: :class:`int`
            Page size, from 1 to 100.
        before: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Only messages older than this.
        after: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Only messages newer than this.
        around: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Messages surrounding this point.

        Raises
        ------
        ~guildcord.ClientException
            More than one cursor was given.
        ValueError
            ``limit`` is out of range.
        ~guildcord.HTTPException
            The request failed.

        Yields
        -------
        :class:`~guildcord.Message`
            Each message of the page.
        """
        cursors = {
            key: _snowflake_id(value, high=key == 'after')
            for key, value in (('before', before), ('after', after), ('around', around))
            if value is not None
        }
        if len(cursors) > 1:
            raise ClientException('Only one of before, after or around can be given.')
        if not 1 <= limit <= 100:
            raise ValueError('history limit must be between 1 and 100')

        channel = await self._get_channel()
        state = self._state
        data = await state.http.logs_from(channel.id, limit, **cursors)
        for raw in data:
            yield state.create_message(channel=channel, data=raw)

    async def delete_messages(self, messages: Iterable[Snowflake], /, *, reason: Optional[str] = None) -> None:
        """|coro|

        Deletes 2 to 100 messages in one request. The platform skips
        messages older than two weeks.

        Raises
        ------
        ~guildcord.ClientException
            Fewer than 2 or more than 100 messages were given.
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            The request failed.
        """
        message_ids: SnowflakeList = [message.id for message in messages]
        if not 2 <= len(message_ids) <= 100:
            raise ClientException('Can only bulk delete messages between 2 and 100 at a time')

        channel = await self._get_channel()
        await self._state.http.delete_messages(channel.id, message_ids, reason=reason)

    async def delete_all_messages(
        self,
        predicate: Optional[Callable[[Message], bool]] = None,
        *,
        limit: int = 100,
        bulk: bool = True,
        before: Optional[SnowflakeTime] = None,
        after: Optional[SnowflakeTime] = None,
        around: Optional[SnowflakeTime] = None,
        reason: Optional[str] = None,
    ) -> List[Message]:
        """|coro|

        Deletes the fetched messages that satisfy ``predicate``.

        One :meth:`history` page of ``limit`` messages is scanned. With
        ``bulk`` and two or more matches a single bulk request is made,
        otherwise matches are deleted one at a time in fetch order.

        .. code-block:: python3

            def from_me(message):
                return message.author_id == client.user_id

            removed = await channel.delete_all_messages(from_me)

        Parameters
        -----------
        predicate: Optional[Callable[[:class:`~guildcord.Message`], :class:`bool`]]
            Selects the messages to delete. ``None`` selects all of them.
        limit: :class:`int`
            How many messages to scan.
        bulk: :class:`bool`
            Allow the bulk endpoint.
        before: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Passed to :meth:`history`.
        after: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Passed to :meth:`history`.
        around: Optional[Union[:class:`~guildcord.abc.Snowflake`, :class:`datetime.datetime`]]
            Passed to :meth:`history`.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        ~guildcord.Forbidden
            Missing permissions.
        ~guildcord.HTTPException
            A request failed.

        Returns
        --------
        List[:class:`~guildcord.Message`]
            The deleted messages.
        """
        matched = [
            message
            async for message in self.history(limit=limit, before=before, after=after, around=around)
            if predicate is None or predicate(message)
        ]

        if bulk and len(matched) >= 2:
            await self.delete_messages(matched, reason=reason)
        else:
            for message in matched:
                await message.delete(reason=reason)

        return matched
