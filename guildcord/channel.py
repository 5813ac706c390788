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
import logging
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    FrozenSet,
    List,
    Literal,
    NamedTuple,
    Optional,
    Sequence,
    TYPE_CHECKING,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from . import abc, utils
from .enums import (
    ChannelType,
    ForumLayoutType,
    ForumOrderType,
    PrivacyLevel,
    RTCRegion,
    ThreadArchiveDuration,
    VideoQualityMode,
    resolve_channel_type,
    try_enum,
)
from .errors import ClientException, InvalidData
from .flags import ChannelFlags, MessageFlags
from .http import handle_message_parameters
from .iterators import ArchivedThreadIterator
from .mixins import Hashable
from .partial_emoji import PartialEmoji
from .stage_instance import StageInstance
from .threads import Thread, _decode_thread
from .utils import MISSING

__all__ = (
    'TextChannel',
    'VoiceChannel',
    'StageChannel',
    'CategoryChannel',
    'ForumTag',
    'ForumChannel',
    'DMChannel',
    'ThreadWithMessage',
)

if TYPE_CHECKING:
    from typing_extensions import Self

    from .abc import Snowflake
    from .file import File
    from .guild import Guild, GuildChannel as GuildChannelType
    from .member import Member
    from .mentions import AllowedMentions
    from .message import Message
    from .state import ConnectionState
    from .voice_state import VoiceState
    from .webhook import Webhook
    from .types.channel import (
        CategoryChannel as CategoryChannelPayload,
        DMChannel as DMChannelPayload,
        ForumChannel as ForumChannelPayload,
        ForumTag as ForumTagPayload,
        NewsChannel as NewsChannelPayload,
        StageChannel as StageChannelPayload,
        TextChannel as TextChannelPayload,
        VoiceChannel as VoiceChannelPayload,
    )
    from .types.snowflake import SnowflakeList

GC = TypeVar('GC', bound='abc.GuildChannel')

_log = logging.getLogger(__name__)

# edit keywords shared by every guild channel kind
_BASE_EDIT_OPTIONS: FrozenSet[str] = frozenset({'name', 'position', 'nsfw', 'overwrites'})
_PLACED_EDIT_OPTIONS = _BASE_EDIT_OPTIONS | {'category', 'sync_permissions', 'slowmode_delay'}
_TEXT_EDIT_OPTIONS = _PLACED_EDIT_OPTIONS | {
    'topic',
    'default_auto_archive_duration',
    'default_thread_slowmode_delay',
}
_VOICE_EDIT_OPTIONS = _PLACED_EDIT_OPTIONS | {'bitrate', 'user_limit', 'rtc_region', 'video_quality_mode'}


class ThreadWithMessage(NamedTuple):
    thread: Thread
    message: Message


def _check_edit_options(channel: abc.GuildChannel, options: Dict[str, Any]) -> None:
    unknown = options.keys() - channel._edit_options  # type: ignore # every editable variant defines it
    if unknown:
        names = ', '.join(sorted(unknown))
        raise TypeError(f'{channel.__class__.__name__}.edit() got unexpected keyword arguments: {names}')


async def _edit_and_rebuild(channel: GC, options: Dict[str, Any], reason: Optional[str]) -> GC:
    # an edit with nothing to send hands back the very same object
    payload = await channel._edit(options, reason=reason)
    if payload is None:
        return channel
    return channel.__class__(state=channel._state, guild=channel.guild, data=payload)  # type: ignore


async def _fetch_webhooks(channel: abc.GuildChannel) -> List[Webhook]:
    from .webhook import Webhook

    data = await channel._state.http.channel_webhooks(channel.id)
    return [Webhook(d, state=channel._state) for d in data]


async def _create_webhook(
    channel: abc.GuildChannel, *, name: str, avatar: Optional[bytes], reason: Optional[str]
) -> Webhook:
    from .webhook import Webhook

    encoded = utils._bytes_to_base64_data(avatar) if avatar is not None else None
    data = await channel._state.http.create_webhook(channel.id, name=str(name), avatar=encoded, reason=reason)
    return Webhook(data, state=channel._state)


def _channel_repr(channel: Any, *names: str) -> str:
    # predicate methods such as is_news are called
    values = ((name, getattr(channel, name)) for name in names)
    inner = ' '.join(f'{name}={value() if callable(value) else value!r}' for name, value in values)
    return f'<{channel.__class__.__name__} {inner}>'


class TextChannel(abc.Messageable, abc.GuildChannel, Hashable):
    """A guild text channel, including announcement channels.

    Announcement channels share this class and are told apart with
    :meth:`is_announcement`. Changing between the two kinds is done
    through :meth:`edit` with the ``type`` option.

    .. container:: operations

        .. describe:: x == y

            Two channels are equal when their IDs match.

        .. describe:: x != y

            Two channels differ when their IDs differ.

        .. describe:: hash(x)

            Hashes the channel by its ID.

        .. describe:: str(x)

            Gives the channel's name.

    Attributes
    -----------
    id: :class:`int`
        The channel's snowflake.
    name: :class:`str`
        The channel's name.
    guild: :class:`Guild`
        The guild that owns this channel.
    category_id: Optional[:class:`int`]
        ID of the enclosing category, or ``None`` at the top level.
    topic: Optional[:class:`str`]
        Free-form channel description, ``None`` when unset.
    position: :class:`int`
        Zero-based sort position in the guild's channel list.
    last_message_id: Optional[:class:`int`]
        ID of the most recent message. The message may since have been deleted.
    last_pin_timestamp: Optional[:class:`datetime.datetime`]
        When a message was last pinned here, ``None`` if nothing is pinned.
    slowmode_delay: :class:`int`
        Seconds a member has to wait between two messages, ``0`` when off.
        The platform caps it at 21600.
    nsfw: :class:`bool`
        Whether the channel is age restricted.
    default_auto_archive_duration: :class:`ThreadArchiveDuration`
        Inactivity period applied to new threads unless they say otherwise.
    default_thread_slowmode_delay: :class:`int`
        Slowmode given to threads created here.
    """

    __slots__ = (
        'id',
        'name',
        'guild',
        'topic',
        'nsfw',
        'position',
        'category_id',
        'slowmode_delay',
        'last_message_id',
        'last_pin_timestamp',
        'default_auto_archive_duration',
        'default_thread_slowmode_delay',
        '_type',
        '_state',
        '_overwrites',
    )

    _edit_options: ClassVar[FrozenSet[str]] = _TEXT_EDIT_OPTIONS | {'type'}

    def __init__(self, *, state: ConnectionState, guild: Guild, data: Union[TextChannelPayload, NewsChannelPayload]):
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self._type: Literal[0, 5] = data['type']
        self._update(guild, data)

    def __repr__(self) -> str:
        return _channel_repr(self, 'id', 'name', 'position', 'nsfw', 'is_news', 'category_id')

    def _update(self, guild: Guild, data: Union[TextChannelPayload, NewsChannelPayload]) -> None:
        self.guild: Guild = guild
        self.name: str = data['name']
        self.position: int = data['position']
        self._type: Literal[0, 5] = data.get('type', self._type)
        self.category_id: Optional[int] = utils._get_as_snowflake(data, 'parent_id')
        self.topic: Optional[str] = data.get('topic')
        self.nsfw: bool = data.get('nsfw', False)
        self.slowmode_delay: int = data.get('rate_limit_per_user', 0)
        self.default_thread_slowmode_delay: int = data.get('default_thread_rate_limit_per_user', 0)
        self.default_auto_archive_duration: ThreadArchiveDuration = try_enum(
            ThreadArchiveDuration, data.get('default_auto_archive_duration', 1440)
        )
        self.last_message_id: Optional[int] = utils._get_as_snowflake(data, 'last_message_id')
        self.last_pin_timestamp: Optional[datetime.datetime] = utils.parse_time(data.get('last_pin_timestamp'))
        self._fill_overwrites(data)

    async def _get_channel(self) -> Self:
        return self

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Either :attr:`ChannelType.text` or :attr:`ChannelType.news`."""
        return try_enum(ChannelType, self._type)

    @property
    def threads(self) -> List[Thread]:
        """List[:class:`Thread`]: Cached threads whose parent is this channel."""
        return [thread for thread in self.guild._threads.values() if thread.parent_id == self.id]

    def is_nsfw(self) -> bool:
        """:class:`bool`: Whether the channel is age restricted."""
        return self.nsfw

    def is_news(self) -> bool:
        """:class:`bool`: Whether this is an announcement channel."""
        return self._type == ChannelType.news.value

    is_announcement = is_news

    def get_thread(self, thread_id: int, /) -> Optional[Thread]:
        """Looks up a cached thread by ID.

        Only active threads are cached. Archived ones are reached through
        :meth:`archived_threads`.
        """
        return self.guild.get_thread(thread_id)

    async def edit(self, *, reason: Optional[str] = None, **options: Any) -> TextChannel:
        """|coro|

        Changes the channel's settings. Requires :attr:`~Permissions.manage_channels`.

        Options that are left out are not sent. ``topic``, ``position``,
        ``category`` and ``overwrites`` accept ``None`` to clear the value.

        Parameters
        ----------
        name: :class:`str`
            New name.
        topic: Optional[:class:`str`]
            New topic.
        position: Optional[:class:`int`]
            New sort position.
        nsfw: :class:`bool`
            Whether the channel is age restricted.
        sync_permissions: :class:`bool`
            Copy the overwrites of the (new or current) category onto this channel.
        category: Optional[:class:`CategoryChannel`]
            Category to move the channel into.
        slowmode_delay: :class:`int`
            Per-member message delay in seconds. Negative values become ``0``.
        type: :class:`ChannelType`
            Switch between :attr:`ChannelType.text` and :attr:`ChannelType.news`.
        overwrites: Optional[Union[Mapping, Iterable[:class:`Overwrite`]]]
            Either a mapping of role or member to :class:`PermissionOverwrite`
            or an iterable of :class:`Overwrite` records.
        default_auto_archive_duration: :class:`ThreadArchiveDuration`
            Inactivity period for new threads.
        default_thread_slowmode_delay: :class:`int`
            Slowmode for new threads.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        ------
        TypeError
            ``overwrites`` or ``type`` had the wrong shape.
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the edit.

        Returns
        --------
        :class:`.TextChannel`
            A fresh object built from the response, or this same channel when
            no option was given.
        """
        _check_edit_options(self, options)
        return await _edit_and_rebuild(self, options, reason)

    async def webhooks(self) -> List[Webhook]:
        """|coro|

        Lists this channel's webhooks. Requires :attr:`~.Permissions.manage_webhooks`.

        Raises
        -------
        Forbidden
            Missing permissions.
        """
        return await _fetch_webhooks(self)

    async def create_webhook(self, *, name: str, avatar: Optional[bytes] = None, reason: Optional[str] = None) -> Webhook:
        """|coro|

        Adds a webhook to this channel. Requires :attr:`~.Permissions.manage_webhooks`.

        Parameters
        -------------
        name: :class:`str`
            Display name of the webhook.
        avatar: Optional[:class:`bytes`]
            Raw image bytes used as the default avatar.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        HTTPException
            The platform rejected the request.
        Forbidden
            Missing permissions.
        """
        return await _create_webhook(self, name=name, avatar=avatar, reason=reason)

    async def follow(self, *, destination: TextChannel, reason: Optional[str] = None) -> Webhook:
        """|coro|

        Subscribes ``destination`` to this announcement channel.

        New announcements are then crossposted into ``destination`` by a
        follower webhook. The returned webhook carries no token.

        Parameters
        -----------
        destination: :class:`TextChannel`
            Where the announcements should be delivered.
        reason: Optional[:class:`str`]
            Audit log reason, recorded in the destination's guild.

        Raises
        -------
        ClientException
            This is not an announcement channel.
        TypeError
            ``destination`` is not a text channel.
        HTTPException
            The platform rejected the request.
        Forbidden
            Missing permissions to add a webhook to ``destination``.
        """
        if not self.is_news():
            raise ClientException('Cannot follow non-announcement channels')

        if not isinstance(destination, TextChannel):
            raise TypeError(f'Expected TextChannel received {destination.__class__.__name__}')

        from .webhook import Webhook

        data = await self._state.http.follow_webhook(self.id, webhook_channel_id=destination.id, reason=reason)
        return Webhook._as_follower(data, channel=destination)

    async def create_thread(
        self,
        *,
        name: str,
        auto_archive_duration: ThreadArchiveDuration = ThreadArchiveDuration.one_day,
        type: Optional[ChannelType] = None,
        reason: Optional[str] = None,
        invitable: bool = True,
        slowmode_delay: Optional[int] = None,
    ) -> Thread:
        """|coro|

        Opens a thread here that has no starter message.

        The thread is private unless ``type`` says otherwise, and it is
        added to the guild's thread cache.

        Parameters
        -----------
        name: :class:`str`
            Thread name.
        auto_archive_duration: :class:`ThreadArchiveDuration`
            Inactivity period before the thread archives itself. One day by default.
        type: Optional[:class:`ChannelType`]
            :attr:`ChannelType.public_thread` or :attr:`ChannelType.private_thread`.
        reason: Optional[:class:`str`]
            Audit log reason.
        invitable: :class:`bool`
            For private threads, whether non-moderators may add others.
        slowmode_delay: Optional[:class:`int`]
            Per-member message delay in seconds, none by default.

        Raises
        -------
        Forbidden
            Missing :attr:`~Permissions.create_public_threads` or
            :attr:`~Permissions.create_private_threads`.
        HTTPException
            The platform rejected the request.
        """
        if type is None:
            type = ChannelType.private_thread

        data = await self._state.http.start_thread_without_message(
            self.id,
            name=name,
            auto_archive_duration=getattr(auto_archive_duration, 'value', auto_archive_duration),
            type=type.value,
            reason=reason,
            invitable=invitable,
            rate_limit_per_user=slowmode_delay,
        )
        thread = _decode_thread(data, guild=self.guild, state=self._state)
        self.guild._add_thread(thread)
        return thread

    def archived_threads(
        self,
        *,
        private: bool = False,
        joined: bool = False,
        limit: Optional[int] = 50,
        before: Optional[Union[Snowflake, datetime.datetime]] = None,
    ) -> ArchivedThreadIterator:
        """Pages through this channel's archived threads.

        Public listings come newest archive first. The joined listing is
        ordered by thread ID instead. Listing private threads needs
        :attr:`~Permissions.manage_threads` on top of
        :attr:`~Permissions.read_message_history`.

        Parameters
        -----------
        limit: Optional[:class:`int`]
            Upper bound on the threads yielded in total. ``None`` walks the
            whole archive.
        before: Optional[Union[:class:`abc.Snowflake`, :class:`datetime.datetime`]]
            Start from threads archived before this point.
        private: :class:`bool`
            List private instead of public threads.
        joined: :class:`bool`
            Only private threads the client is a member of. Needs ``private``.

        Raises
        ------
        ValueError
            ``joined`` without ``private``, or a negative ``limit``.
        """
        return ArchivedThreadIterator(self.id, self.guild, limit=limit, joined=joined, private=private, before=before)


class VocalGuildChannel(abc.GuildChannel, Hashable):
    # fields shared by voice and stage channels, never instantiated on its own
    __slots__ = (
        'id',
        'name',
        'guild',
        'nsfw',
        'bitrate',
        'position',
        'user_limit',
        'rtc_region',
        'category_id',
        'slowmode_delay',
        'last_message_id',
        'video_quality_mode',
        '_state',
        '_overwrites',
    )

    def __init__(self, *, state: ConnectionState, guild: Guild, data: Union[VoiceChannelPayload, StageChannelPayload]):
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self._update(guild, data)

    async def _get_channel(self) -> Self:
        return self

    def _update(self, guild: Guild, data: Union[VoiceChannelPayload, StageChannelPayload]) -> None:
        self.guild: Guild = guild
        self.name: str = data['name']
        self.position: int = data['position']
        self.bitrate: int = data['bitrate']
        self.user_limit: int = data['user_limit']
        self.nsfw: bool = data.get('nsfw', False)
        self.category_id: Optional[int] = utils._get_as_snowflake(data, 'parent_id')
        self.last_message_id: Optional[int] = utils._get_as_snowflake(data, 'last_message_id')
        self.slowmode_delay: int = data.get('rate_limit_per_user', 0)
        # an empty or missing region means the platform picks one
        self.rtc_region: RTCRegion = try_enum(RTCRegion, data.get('rtc_region') or '')
        self.video_quality_mode: VideoQualityMode = try_enum(VideoQualityMode, data.get('video_quality_mode', 1))
        self._fill_overwrites(data)

    def __repr__(self) -> str:
        return _channel_repr(
            self, 'id', 'name', 'rtc_region', 'position', 'bitrate', 'video_quality_mode', 'user_limit', 'category_id'
        )

    def is_nsfw(self) -> bool:
        """:class:`bool`: Whether the channel is age restricted."""
        return self.nsfw

    @property
    def voice_states(self) -> Dict[str, VoiceState]:
        """Mapping[:class:`str`, :class:`VoiceState`]: Session ID to voice state for everyone connected here.

        Works without the member cache, unlike :attr:`members`.
        """
        return {session: voice for session, voice in self.guild._voice_states.items() if voice.channel_id == self.id}

    def _members_where(self, predicate: Callable[[VoiceState], bool]) -> List[Member]:
        ret = []
        for voice in self.voice_states.values():
            if not predicate(voice):
                continue
            member = self.guild.get_member(voice.user_id) or voice.member
            if member is not None:
                ret.append(member)
        return ret

    @property
    def members(self) -> List[Member]:
        """List[:class:`Member`]: Members connected to this channel whose member data is known."""
        return self._members_where(lambda voice: True)


class VoiceChannel(abc.Messageable, VocalGuildChannel):
    """A guild voice channel. Voice channels also carry a text chat.

    Compared and hashed by ID like every other channel. ``str()`` gives the name.

    Attributes
    -----------
    id: :class:`int`
        The channel's snowflake.
    name: :class:`str`
        The channel's name.
    guild: :class:`Guild`
        The guild that owns this channel.
    nsfw: :class:`bool`
        Whether the channel is age restricted.
    category_id: Optional[:class:`int`]
        ID of the enclosing category, if any.
    position: :class:`int`
        Zero-based sort position.
    bitrate: :class:`int`
        Audio bitrate in bits per second.
    user_limit: :class:`int`
        Maximum number of connected users, ``0`` for unlimited.
    rtc_region: :class:`RTCRegion`
        Voice server region. :attr:`RTCRegion.automatic` leaves the choice to the platform.
    video_quality_mode: :class:`VideoQualityMode`
        Camera quality for participants.
    last_message_id: Optional[:class:`int`]
        ID of the most recent chat message, which may no longer exist.
    slowmode_delay: :class:`int`
        Per-member chat delay in seconds.
    """

    __slots__ = ()

    _edit_options: ClassVar[FrozenSet[str]] = _VOICE_EDIT_OPTIONS

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Always :attr:`ChannelType.voice`."""
        return ChannelType.voice

    async def edit(self, *, reason: Optional[str] = None, **options: Any) -> VoiceChannel:
        """|coro|

        Changes the channel's settings. Requires :attr:`~Permissions.manage_channels`.

        Takes ``name``, ``bitrate``, ``nsfw``, ``user_limit``, ``position``,
        ``sync_permissions``, ``category``, ``slowmode_delay`` and
        ``overwrites`` as described in :meth:`TextChannel.edit`, plus:

        Parameters
        ----------
        rtc_region: Optional[Union[:class:`RTCRegion`, :class:`str`]]
            Voice server region. ``None`` and :attr:`RTCRegion.automatic`
            are both sent as "let the platform choose".
        video_quality_mode: :class:`VideoQualityMode`
            Camera quality for participants.
        reason: Optional[:class:`str`]
            Audit log reason.

        Returns
        --------
        :class:`.VoiceChannel`
            A fresh object built from the response, or this same channel when
            nothing was given.
        """
        _check_edit_options(self, options)
        return await _edit_and_rebuild(self, options, reason)


class StageChannel(abc.Messageable, VocalGuildChannel):
    """A guild stage channel.

    Stages have all the voice channel fields plus a topic, and can host
    a live :class:`StageInstance`. A stage is not a :class:`VoiceChannel`.

    Attributes
    -----------
    topic: Optional[:class:`str`]
        What the stage is about, ``None`` when unset.
    """

    __slots__ = ('topic',)

    _edit_options: ClassVar[FrozenSet[str]] = _VOICE_EDIT_OPTIONS | {'topic'}

    def _update(self, guild: Guild, data: StageChannelPayload) -> None:
        super()._update(guild, data)
        self.topic: Optional[str] = data.get('topic')

    def __repr__(self) -> str:
        return _channel_repr(
            self, 'id', 'name', 'topic', 'rtc_region', 'position', 'bitrate', 'video_quality_mode', 'user_limit', 'category_id'
        )

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Always :attr:`ChannelType.stage_voice`."""
        return ChannelType.stage_voice

    @property
    def requesting_to_speak(self) -> List[Member]:
        """List[:class:`Member`]: Audience members with a raised hand."""
        return self._members_where(lambda voice: voice.requested_to_speak_at is not None)

    @property
    def speakers(self) -> List[Member]:
        """List[:class:`Member`]: Members currently allowed to speak."""
        return self._members_where(lambda voice: not voice.suppress and voice.requested_to_speak_at is None)

    @property
    def listeners(self) -> List[Member]:
        """List[:class:`Member`]: Members in the audience."""
        return self._members_where(lambda voice: voice.suppress)

    @property
    def instance(self) -> Optional[StageInstance]:
        """Optional[:class:`StageInstance`]: The cached live instance on this stage."""
        return utils.get(self.guild.stage_instances, channel_id=self.id)

    async def create_instance(
        self,
        *,
        topic: str,
        privacy_level: PrivacyLevel = MISSING,
        send_start_notification: bool = False,
        reason: Optional[str] = None,
    ) -> StageInstance:
        """|coro|

        Goes live on this stage. Requires :attr:`~Permissions.manage_channels`.

        The new instance is cached on the guild.

        Parameters
        -----------
        topic: :class:`str`
            Topic of the live instance.
        privacy_level: :class:`PrivacyLevel`
            Who can find the instance. The platform defaults to
            :attr:`PrivacyLevel.guild_only`.
        send_start_notification: :class:`bool`
            Ping @everyone that the stage started.
        reason: :class:`str`
            Audit log reason.

        Raises
        ------
        TypeError
            ``privacy_level`` is not a :class:`PrivacyLevel`.
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the request.
        """
        payload: Dict[str, Any] = {'channel_id': self.id, 'topic': topic}

        if privacy_level is not MISSING:
            if not isinstance(privacy_level, PrivacyLevel):
                raise TypeError('privacy_level field must be of type PrivacyLevel')
            payload['privacy_level'] = privacy_level.value

        payload['send_start_notification'] = send_start_notification

        data = await self._state.http.create_stage_instance(**payload, reason=reason)
        instance = StageInstance(guild=self.guild, state=self._state, data=data)
        self.guild._add_stage_instance(instance)
        return instance

    async def fetch_instance(self) -> StageInstance:
        """|coro|

        Retrieves the live instance of this stage from the API.

        Raises
        -------
        NotFound
            The stage is not live.
        HTTPException
            The request failed.
        """
        data = await self._state.http.get_stage_instance(self.id)
        return StageInstance(guild=self.guild, state=self._state, data=data)

    async def edit(self, *, reason: Optional[str] = None, **options: Any) -> StageChannel:
        """|coro|

        Same as :meth:`VoiceChannel.edit`, with ``topic`` accepted too
        (``None`` clears it).
        """
        _check_edit_options(self, options)
        return await _edit_and_rebuild(self, options, reason)


class CategoryChannel(abc.GuildChannel, Hashable):
    """A category that groups other guild channels.

    Attributes
    -----------
    id: :class:`int`
        The category's snowflake.
    name: :class:`str`
        The category's name.
    guild: :class:`Guild`
        The guild that owns this category.
    position: :class:`int`
        Zero-based sort position among categories.
    nsfw: :class:`bool`
        Whether the category is age restricted.
    """

    __slots__ = ('id', 'name', 'guild', 'nsfw', 'position', 'category_id', '_state', '_overwrites')

    _edit_options: ClassVar[FrozenSet[str]] = _BASE_EDIT_OPTIONS

    def __init__(self, *, state: ConnectionState, guild: Guild, data: CategoryChannelPayload):
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self._update(guild, data)

    def __repr__(self) -> str:
        return _channel_repr(self, 'id', 'name', 'position', 'nsfw')

    def _update(self, guild: Guild, data: CategoryChannelPayload) -> None:
        self.guild: Guild = guild
        self.name: str = data['name']
        self.position: int = data['position']
        self.nsfw: bool = data.get('nsfw', False)
        # categories never sit inside another category
        self.category_id: Optional[int] = None
        self._fill_overwrites(data)

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Always :attr:`ChannelType.category`."""
        return ChannelType.category

    def is_nsfw(self) -> bool:
        """:class:`bool`: Whether the category is age restricted."""
        return self.nsfw

    async def edit(self, *, reason: Optional[str] = None, **options: Any) -> CategoryChannel:
        """|coro|

        Changes the category. Requires :attr:`~Permissions.manage_channels`.

        Accepts ``name``, ``position``, ``nsfw`` and ``overwrites`` with the
        meaning given in :meth:`TextChannel.edit`.
        """
        _check_edit_options(self, options)
        return await _edit_and_rebuild(self, options, reason)

    def _children(self, cls: Type[GC]) -> List[GC]:
        ret = [c for c in self.guild.channels if c.category_id == self.id and isinstance(c, cls)]
        ret.sort(key=lambda c: (c.position, c.id))
        return ret  # type: ignore

    @property
    def channels(self) -> List[GuildChannelType]:
        """List[:class:`abc.GuildChannel`]: Channels in this category, text-like ones first, then by position."""
        ret = [c for c in self.guild.channels if c.category_id == self.id]
        ret.sort(key=lambda c: (not isinstance(c, (TextChannel, ForumChannel)), c.position))
        return ret

    @property
    def text_channels(self) -> List[TextChannel]:
        """List[:class:`TextChannel`]: Text channels in this category."""
        return self._children(TextChannel)

    @property
    def voice_channels(self) -> List[VoiceChannel]:
        """List[:class:`VoiceChannel`]: Voice channels in this category."""
        return self._children(VoiceChannel)

    @property
    def stage_channels(self) -> List[StageChannel]:
        """List[:class:`StageChannel`]: Stage channels in this category."""
        return self._children(StageChannel)

    @property
    def forums(self) -> List[ForumChannel]:
        """List[:class:`ForumChannel`]: Forums in this category."""
        return self._children(ForumChannel)


class ForumTag(Hashable):
    """A label that forum posts can carry.

    Tags built by hand have an ID of ``0`` until the platform assigns one
    through :meth:`ForumChannel.edit`.

    Attributes
    -----------
    id: :class:`int`
        The tag's snowflake, ``0`` for tags not saved yet.
    name: :class:`str`
        Label text, at most 20 characters.
    moderated: :class:`bool`
        Whether only members with :attr:`~Permissions.manage_threads` may apply it.
    emoji: Optional[:class:`PartialEmoji`]
        Emoji shown next to the label. Custom emoji come without a name.
    """

    __slots__ = ('id', 'name', 'emoji', 'moderated')

    def __init__(
        self, *, name: str, emoji: Optional[Union[PartialEmoji, str]] = None, moderated: bool = False
    ) -> None:
        self.id: int = 0
        self.name: str = name
        self.moderated: bool = moderated
        if emoji is None or isinstance(emoji, PartialEmoji):
            self.emoji: Optional[PartialEmoji] = emoji
        elif isinstance(emoji, str):
            self.emoji = PartialEmoji.from_str(emoji)
        else:
            raise TypeError(f'emoji must be a PartialEmoji, str or None not {emoji.__class__.__name__}')

    @classmethod
    def from_data(cls, *, data: ForumTagPayload) -> Self:
        self = cls.__new__(cls)
        self.id = int(data['id'])
        self.name = data['name']
        self.moderated = data.get('moderated', False)
        self.emoji = PartialEmoji._from_forum_payload(data)
        return self

    def to_dict(self) -> Dict[str, Any]:
        emoji = {'emoji_id': None, 'emoji_name': None} if self.emoji is None else self.emoji._to_forum_tag_payload()
        payload: Dict[str, Any] = {'name': self.name, 'moderated': self.moderated, **emoji}
        if self.id:
            payload['id'] = self.id
        return payload

    def __repr__(self) -> str:
        return f'<ForumTag id={self.id} name={self.name!r} emoji={self.emoji!r} moderated={self.moderated}>'

    def __str__(self) -> str:
        return self.name


def _forum_sort_order(value: Optional[ForumOrderType]) -> Optional[int]:
    if value is None:
        return None
    if not isinstance(value, ForumOrderType):
        raise TypeError(f'default_sort_order parameter must be a ForumOrderType not {value.__class__.__name__}')
    return value.value


def _forum_layout(value: ForumLayoutType) -> int:
    if not isinstance(value, ForumLayoutType):
        raise TypeError(f'default_layout parameter must be a ForumLayoutType not {value.__class__.__name__}')
    return value.value


def _forum_reaction(value: Optional[Union[PartialEmoji, str]]) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, str):
        value = PartialEmoji.from_str(value)
    if not isinstance(value, PartialEmoji):
        raise TypeError(f'default_reaction_emoji must be a PartialEmoji, str or None not {value.__class__.__name__}')
    return value._to_forum_tag_payload()


class ForumChannel(abc.GuildChannel, Hashable):
    """A guild forum. Posts are threads opened with :meth:`create_thread`.

    A forum has no chat of its own, so it is not messageable.

    Attributes
    -----------
    id: :class:`int`
        The forum's snowflake.
    name: :class:`str`
        The forum's name.
    guild: :class:`Guild`
        The guild that owns this forum.
    category_id: Optional[:class:`int`]
        ID of the enclosing category, if any.
    topic: Optional[:class:`str`]
        Posting guidelines, ``None`` when unset.
    position: :class:`int`
        Zero-based sort position.
    last_message_id: Optional[:class:`int`]
        ID of the most recently opened post.
    slowmode_delay: :class:`int`
        Seconds a member has to wait between opening two posts.
    nsfw: :class:`bool`
        Whether the forum is age restricted.
    default_auto_archive_duration: :class:`ThreadArchiveDuration`
        Inactivity period for new posts.
    default_thread_slowmode_delay: :class:`int`
        Slowmode given to new posts.
    default_reaction_emoji: Optional[:class:`PartialEmoji`]
        Reaction button shown on posts.
    default_layout: :class:`ForumLayoutType`
        How posts are laid out in clients.
    default_sort_order: Optional[:class:`ForumOrderType`]
        How posts are sorted, ``None`` for the client default.
    """

    __slots__ = (
        'id',
        'name',
        'guild',
        'topic',
        'nsfw',
        'position',
        'category_id',
        'slowmode_delay',
        'last_message_id',
        'default_layout',
        'default_sort_order',
        'default_reaction_emoji',
        'default_auto_archive_duration',
        'default_thread_slowmode_delay',
        '_flags',
        '_state',
        '_overwrites',
        '_available_tags',
    )

    _edit_options: ClassVar[FrozenSet[str]] = _TEXT_EDIT_OPTIONS | {
        'available_tags',
        'default_reaction_emoji',
        'default_layout',
        'default_sort_order',
        'require_tag',
    }

    def __init__(self, *, state: ConnectionState, guild: Guild, data: ForumChannelPayload):
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self._update(guild, data)

    def __repr__(self) -> str:
        return _channel_repr(self, 'id', 'name', 'position', 'nsfw', 'category_id')

    def _update(self, guild: Guild, data: ForumChannelPayload) -> None:
        self.guild: Guild = guild
        self.name: str = data['name']
        self.position: int = data['position']
        self.topic: Optional[str] = data.get('topic')
        self.nsfw: bool = data.get('nsfw', False)
        self.category_id: Optional[int] = utils._get_as_snowflake(data, 'parent_id')
        self.last_message_id: Optional[int] = utils._get_as_snowflake(data, 'last_message_id')
        self.slowmode_delay: int = data.get('rate_limit_per_user', 0)
        self.default_thread_slowmode_delay: int = data.get('default_thread_rate_limit_per_user', 0)
        self.default_auto_archive_duration: ThreadArchiveDuration = try_enum(
            ThreadArchiveDuration, data.get('default_auto_archive_duration', 1440)
        )
        self.default_layout: ForumLayoutType = try_enum(ForumLayoutType, data.get('default_forum_layout', 0))

        sort_order = data.get('default_sort_order')
        self.default_sort_order: Optional[ForumOrderType] = (
            None if sort_order is None else try_enum(ForumOrderType, sort_order)
        )

        reaction = data.get('default_reaction_emoji')
        self.default_reaction_emoji: Optional[PartialEmoji] = (
            PartialEmoji._from_forum_payload(reaction) if reaction else None
        )

        # dicts keep insertion order, so the tag order survives
        self._available_tags: Dict[int, ForumTag] = {}
        for raw in data.get('available_tags', []):
            tag = ForumTag.from_data(data=raw)
            self._available_tags[tag.id] = tag

        self._flags: Optional[int] = data.get('flags')
        self._fill_overwrites(data)

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Always :attr:`ChannelType.forum`."""
        return ChannelType.forum

    @property
    def threads(self) -> List[Thread]:
        """List[:class:`Thread`]: Cached posts of this forum."""
        return [thread for thread in self.guild._threads.values() if thread.parent_id == self.id]

    def get_thread(self, thread_id: int, /) -> Optional[Thread]:
        """Looks up a cached post of this forum by ID. Threads of other channels give ``None``."""
        thread = self.guild.get_thread(thread_id)
        if thread is None or thread.parent_id != self.id:
            return None
        return thread

    @property
    def flags(self) -> Optional[ChannelFlags]:
        """Optional[:class:`ChannelFlags`]: The forum's flags, ``None`` when the payload had none."""
        if self._flags is None:
            return None
        return ChannelFlags._from_value(self._flags)

    @property
    def available_tags(self) -> List[ForumTag]:
        """List[:class:`ForumTag`]: Tags posts can use, in display order."""
        return list(self._available_tags.values())

    tags = available_tags

    def get_tag(self, tag_id: int, /) -> Optional[ForumTag]:
        """Returns the available tag with this ID, if there is one."""
        return self._available_tags.get(tag_id)

    def is_nsfw(self) -> bool:
        """:class:`bool`: Whether the forum is age restricted."""
        return self.nsfw

    async def edit(self, *, reason: Optional[str] = None, **options: Any) -> ForumChannel:
        """|coro|

        Changes the forum. Requires :attr:`~Permissions.manage_channels`.

        Besides the options of :meth:`TextChannel.edit` (except ``type``)
        a forum accepts:

        Parameters
        ----------
        available_tags: Sequence[:class:`ForumTag`]
            Replaces the set of tags. Tags with ID ``0`` are created.
        default_reaction_emoji: Optional[Union[:class:`PartialEmoji`, :class:`str`]]
            Reaction button for posts, ``None`` removes it.
        default_layout: :class:`ForumLayoutType`
            Post layout.
        default_sort_order: Optional[:class:`ForumOrderType`]
            Post ordering, ``None`` resets it.
        require_tag: :class:`bool`
            Whether new posts must carry a tag. Other flags are kept.

        Raises
        ------
        TypeError
            One of the options has the wrong type.
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the edit.
        """
        _check_edit_options(self, options)

        if 'available_tags' in options:
            options['available_tags'] = [tag.to_dict() for tag in options['available_tags']]

        if 'default_reaction_emoji' in options:
            options['default_reaction_emoji'] = _forum_reaction(options['default_reaction_emoji'])

        if 'require_tag' in options:
            flags = self.flags or ChannelFlags()
            flags.require_tag = options.pop('require_tag')
            options['flags'] = flags.value

        if 'default_layout' in options:
            options['default_forum_layout'] = _forum_layout(options.pop('default_layout'))

        if 'default_sort_order' in options:
            options['default_sort_order'] = _forum_sort_order(options['default_sort_order'])

        return await _edit_and_rebuild(self, options, reason)

    async def create_thread(
        self,
        *,
        name: str,
        auto_archive_duration: ThreadArchiveDuration = MISSING,
        slowmode_delay: Optional[int] = None,
        content: Optional[str] = None,
        tts: bool = False,
        embeds: Optional[Sequence[Any]] = None,
        file: Optional[File] = None,
        files: Optional[Sequence[File]] = None,
        stickers: Optional[Sequence[Snowflake]] = None,
        allowed_mentions: Optional[AllowedMentions] = None,
        mention_author: Optional[bool] = None,
        applied_tags: Optional[Sequence[ForumTag]] = None,
        components: Optional[Sequence[Any]] = None,
        silent: bool = False,
        reason: Optional[str] = None,
    ) -> ThreadWithMessage:
        """|coro|

        Opens a public post in this forum together with its starter message.

        At least one of ``content``, ``embeds``, ``file``, ``files`` or
        ``stickers`` has to be given since a post cannot be empty. The
        thread is added to the guild's cache.

        Parameters
        -----------
        name: :class:`str`
            Post title.
        auto_archive_duration: :class:`ThreadArchiveDuration`
            Inactivity period, the forum's default when left out.
        slowmode_delay: Optional[:class:`int`]
            Per-member message delay in seconds.
        content: Optional[:class:`str`]
            Text of the starter message.
        tts: :class:`bool`
            Read the starter message aloud.
        embeds: List[Any]
            Up to 10 embed payloads.
        file: :class:`~guildcord.File`
            A single attachment.
        files: List[:class:`~guildcord.File`]
            Up to 10 attachments.
        stickers: Sequence[:class:`abc.Snowflake`]
            Up to 3 stickers.
        allowed_mentions: :class:`~guildcord.AllowedMentions`
            Merged over the client's default.
        mention_author: Optional[:class:`bool`]
            Overrides :attr:`~guildcord.AllowedMentions.replied_user`.
        applied_tags: List[:class:`ForumTag`]
            Tags for the post.
        components: List[Any]
            Component payloads for the starter message.
        silent: :class:`bool`
            Suppress push and desktop notifications.
        reason: :class:`str`
            Audit log reason.

        Raises
        -------
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the request.
        ValueError
            More than 10 embeds.
        TypeError
            Both ``file`` and ``files`` were given.

        Returns
        --------
        :class:`ThreadWithMessage`
            The new thread and its starter message.
        """
        state = self._state

        sticker_ids: SnowflakeList = MISSING if stickers is None else [s.id for s in stickers]

        flags = MISSING
        if silent:
            flags = MessageFlags._from_value(0)
            flags.suppress_notifications = True

        if auto_archive_duration is MISSING:
            auto_archive_duration = self.default_auto_archive_duration

        channel_payload: Dict[str, Any] = {
            'name': name,
            'auto_archive_duration': getattr(auto_archive_duration, 'value', auto_archive_duration),
            'rate_limit_per_user': slowmode_delay,
            'type': ChannelType.public_thread.value,
        }
        if applied_tags is not None:
            channel_payload['applied_tags'] = [str(tag.id) for tag in applied_tags]

        with handle_message_parameters(
            content=MISSING if content is None else str(content),
            tts=tts,
            file=MISSING if file is None else file,
            files=MISSING if files is None else files,
            embeds=MISSING if embeds is None else embeds,
            components=MISSING if components is None else components,
            stickers=sticker_ids,
            flags=flags,
            allowed_mentions=allowed_mentions,
            previous_allowed_mentions=state.allowed_mentions,
            mention_author=mention_author,
            channel_payload=channel_payload,
        ) as params:
            data = await state.http.start_thread_in_forum(self.id, params=params, reason=reason)

        thread = _decode_thread(data, guild=self.guild, state=state)  # type: ignore # the response is a thread payload
        self.guild._add_thread(thread)
        message = state.create_message(channel=thread, data=data['message'])
        return ThreadWithMessage(thread=thread, message=message)

    async def webhooks(self) -> List[Webhook]:
        """|coro|

        Lists the forum's webhooks. See :meth:`TextChannel.webhooks`.
        """
        return await _fetch_webhooks(self)

    async def create_webhook(self, *, name: str, avatar: Optional[bytes] = None, reason: Optional[str] = None) -> Webhook:
        """|coro|

        Adds a webhook to this forum. See :meth:`TextChannel.create_webhook`.
        """
        return await _create_webhook(self, name=name, avatar=avatar, reason=reason)

    def archived_threads(
        self,
        *,
        private: bool = False,
        joined: bool = False,
        limit: Optional[int] = 50,
        before: Optional[Union[Snowflake, datetime.datetime]] = None,
    ) -> ArchivedThreadIterator:
        """Pages through archived posts. Parameters match :meth:`TextChannel.archived_threads`."""
        return ArchivedThreadIterator(self.id, self.guild, limit=limit, joined=joined, private=private, before=before)


class DMChannel(abc.Messageable, abc.Channel, Hashable):
    """A direct message conversation with one user.

    Attributes
    ----------
    id: :class:`int`
        The conversation's snowflake.
    recipient_id: Optional[:class:`int`]
        The other participant, ``None`` when the payload listed no recipients.
    last_message_id: Optional[:class:`int`]
        ID of the most recent message, which may no longer exist.
    """

    __slots__ = ('id', 'recipient_id', 'last_message_id', '_state')

    def __init__(self, *, state: ConnectionState, data: DMChannelPayload):
        self._state: ConnectionState = state
        self.id: int = int(data['id'])
        self._update(data)

    def _update(self, data: DMChannelPayload) -> None:
        recipients = data.get('recipients')
        self.recipient_id: Optional[int] = int(recipients[0]['id']) if recipients else None
        self.last_message_id: Optional[int] = utils._get_as_snowflake(data, 'last_message_id')

    async def _get_channel(self) -> Self:
        return self

    def __str__(self) -> str:
        return f'Direct Message with {self.recipient_id or "Unknown User"}'

    def __repr__(self) -> str:
        return f'<DMChannel id={self.id} recipient_id={self.recipient_id}>'

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: Always :attr:`ChannelType.private`."""
        return ChannelType.private

    @property
    def jump_url(self) -> str:
        """:class:`str`: Link that opens this conversation in a client."""
        return f'https://discord.com/channels/@me/{self.id}'


_GUILD_CHANNEL_CLASSES: Dict[ChannelType, Type[abc.GuildChannel]] = {
    ChannelType.text: TextChannel,
    ChannelType.news: TextChannel,
    ChannelType.voice: VoiceChannel,
    ChannelType.stage_voice: StageChannel,
    ChannelType.category: CategoryChannel,
    ChannelType.forum: ForumChannel,
}


def _guild_channel_factory(channel_type: int) -> Tuple[Optional[Type[abc.GuildChannel]], Optional[ChannelType]]:
    value = resolve_channel_type(channel_type)
    if value is None:
        return None, None
    return _GUILD_CHANNEL_CLASSES.get(value), value


def _private_channel_factory(channel_type: int) -> Tuple[Optional[Type[DMChannel]], Optional[ChannelType]]:
    value = resolve_channel_type(channel_type)
    return (DMChannel if value is ChannelType.private else None), value


def _threaded_guild_channel_factory(channel_type: int) -> Tuple[Optional[Type[abc.GuildChannel]], Optional[ChannelType]]:
    cls, value = _guild_channel_factory(channel_type)
    if value is not None and value.is_thread():
        return Thread, value
    return cls, value


def _decode_guild_channel(
    channel_type: int, data: Dict[str, Any], *, state: ConnectionState, guild: Guild
) -> Optional[abc.GuildChannel]:
    """Builds the channel object matching a guild channel payload.

    Type codes this library does not know are logged and give ``None``.

    Raises
    -------
    InvalidData
        The code names a direct message channel, or the payload is missing
        or mistypes a field the channel kind needs.
    """
    cls, value = _threaded_guild_channel_factory(channel_type)
    if value is None:
        _log.debug('Discarding channel ID %s with unknown type %r.', data.get('id'), channel_type)
        return None

    if cls is None:
        raise InvalidData(f'Channel type {value} is not a guild channel')

    try:
        return cls(state=state, guild=guild, data=data)  # type: ignore
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidData(f'Malformed {value} channel payload for channel ID {data.get("id")}') from exc
