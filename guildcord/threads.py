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

import array
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Union

from .abc import GuildChannel, Messageable
from .enums import ChannelType, ThreadArchiveDuration, try_enum
from .errors import ClientException, InvalidData
from .flags import ChannelFlags
from .mixins import Hashable
from .permissions import OverwriteSet
from .utils import MISSING, parse_time, _get_as_snowflake

__all__ = (
    'Thread',
    'ThreadMember',
    'ThreadMetadata',
)

if TYPE_CHECKING:
    from typing_extensions import Self

    from .abc import Snowflake
    from .channel import CategoryChannel, TextChannel, ForumChannel, ForumTag
    from .guild import Guild
    from .member import Member
    from .state import ConnectionState
    from .types.threads import (
        Thread as ThreadPayload,
        ThreadMember as ThreadMemberPayload,
        ThreadMetadata as ThreadMetadataPayload,
    )

_log = logging.getLogger(__name__)

_THREAD_TYPES = (ChannelType.news_thread, ChannelType.public_thread, ChannelType.private_thread)


def _tag_ids(raw: Iterable[Any]) -> array.array[int]:
    # keeps the order tags were applied in
    return array.array('Q', (int(tag_id) for tag_id in raw))


class ThreadMetadata(NamedTuple):
    """Archive state of a :class:`Thread`.

    Attributes
    -----------
    archived: :class:`bool`
        Whether the thread is archived.
    auto_archive_duration: :class:`ThreadArchiveDuration`
        Inactivity period after which it archives itself.
    archive_timestamp: :class:`datetime.datetime`
        Last time :attr:`archived` changed.
    locked: :class:`bool`
        Whether unarchiving is reserved to moderators.
    invitable: :class:`bool`
        For private threads, whether non-moderators may add people.
    created_at: Optional[:class:`datetime.datetime`]
        Creation time. Missing on threads from before 2022.
    archiver_id: Optional[:class:`int`]
        Who archived the thread, when known.
    """

    archived: bool
    auto_archive_duration: ThreadArchiveDuration
    archive_timestamp: datetime
    locked: bool = False
    invitable: bool = True
    created_at: Optional[datetime] = None
    archiver_id: Optional[int] = None

    @classmethod
    def from_data(cls, data: ThreadMetadataPayload) -> ThreadMetadata:
        return cls(
            data['archived'],
            try_enum(ThreadArchiveDuration, data['auto_archive_duration']),
            parse_time(data['archive_timestamp']),
            locked=data.get('locked', False),
            invitable=data.get('invitable', True),
            created_at=parse_time(data.get('create_timestamp')),
            archiver_id=_get_as_snowflake(data, 'archiver_id'),
        )


class Thread(Messageable, GuildChannel, Hashable):
    """A thread under a text channel, or a post in a forum.

    Threads take their permissions from the parent channel. They have no
    overwrites of their own, so :attr:`overwrites` is always empty and
    overwrite edits do nothing.

    Attributes
    -----------
    id: :class:`int`
        The thread's snowflake.
    name: :class:`str`
        The thread's title.
    guild: :class:`Guild`
        Guild the thread lives in.
    parent_id: :class:`int`
        ID of the :class:`TextChannel` or :class:`ForumChannel` holding it.
    owner_id: Optional[:class:`int`]
        Who started the thread.
    last_message_id: Optional[:class:`int`]
        Most recent message ID, which may no longer exist.
    slowmode_delay: :class:`int`
        Per-member message delay in seconds, ``0`` when off.
    message_count: :class:`int`
        Rough number of messages.
    member_count: :class:`int`
        Rough number of members, capped at 50 by the platform.
    me: Optional[:class:`ThreadMember`]
        The client's own membership, ``None`` if it has not joined.
    metadata: :class:`ThreadMetadata`
        Archive state.
    """

    __slots__ = (
        'id',
        'me',
        'name',
        'guild',
        'metadata',
        'owner_id',
        'parent_id',
        'member_count',
        'message_count',
        'slowmode_delay',
        'last_message_id',
        '_type',
        '_state',
        '_flags',
        '_members',
        '_applied_tags',
    )

    _supports_overwrites = False

    def __init__(self, *, guild: Guild, state: ConnectionState, data: ThreadPayload) -> None:
        self._state: ConnectionState = state
        self.guild: Guild = guild
        self._members: Dict[int, ThreadMember] = {}
        self._from_data(data)

    async def _get_channel(self) -> Self:
        return self

    def __repr__(self) -> str:
        return (
            f'<Thread id={self.id!r} name={self.name!r} parent_id={self.parent_id}'
            f' type={self._type!r} locked={self.locked} archived={self.archived}>'
        )

    def __str__(self) -> str:
        return self.name

    def _from_data(self, data: ThreadPayload) -> None:
        self.id: int = int(data['id'])
        self.parent_id: int = int(data['parent_id'])
        self.owner_id: Optional[int] = _get_as_snowflake(data, 'owner_id')
        self._type: ChannelType = try_enum(ChannelType, data['type'])
        self.last_message_id: Optional[int] = _get_as_snowflake(data, 'last_message_id')
        self.message_count: int = data.get('message_count', 0)
        self.member_count: int = data.get('member_count', 0)

        member = data.get('member')
        self.me: Optional[ThreadMember] = None if member is None else ThreadMember(self, member)

        self.name: str = data['name']
        self.metadata: ThreadMetadata = ThreadMetadata.from_data(data['thread_metadata'])
        self._apply_mutable(data)

    def _apply_mutable(self, data: ThreadPayload) -> None:
        # fields that are reset whenever an update arrives, present or not
        self.slowmode_delay: int = data.get('rate_limit_per_user', 0)
        self._flags: int = data.get('flags', 0)
        self._applied_tags: array.array[int] = _tag_ids(data.get('applied_tags', []))

    def _update(self, data: ThreadPayload) -> None:  # type: ignore # threads have no guild argument
        if 'name' in data:
            self.name = data['name']
        if 'thread_metadata' in data:
            self.metadata = ThreadMetadata.from_data(data['thread_metadata'])
        self._apply_mutable(data)

    @property
    def type(self) -> ChannelType:
        """:class:`ChannelType`: News, public or private thread."""
        return self._type

    @property
    def parent(self) -> Optional[Union[ForumChannel, TextChannel]]:
        """Optional[Union[:class:`ForumChannel`, :class:`TextChannel`]]: The cached parent channel."""
        return self.guild.get_channel(self.parent_id)  # type: ignore

    @property
    def flags(self) -> ChannelFlags:
        """:class:`ChannelFlags`: The thread's flags."""
        return ChannelFlags._from_value(self._flags)

    @property
    def owner(self) -> Optional[Member]:
        """Optional[:class:`Member`]: The cached member who started the thread."""
        return None if self.owner_id is None else self.guild.get_member(self.owner_id)

    @property
    def archived(self) -> bool:
        """:class:`bool`: Shortcut for :attr:`ThreadMetadata.archived`."""
        return self.metadata.archived

    @property
    def locked(self) -> bool:
        """:class:`bool`: Shortcut for :attr:`ThreadMetadata.locked`."""
        return self.metadata.locked

    @property
    def invitable(self) -> bool:
        """:class:`bool`: Shortcut for :attr:`ThreadMetadata.invitable`."""
        return self.metadata.invitable

    @property
    def auto_archive_duration(self) -> ThreadArchiveDuration:
        """:class:`ThreadArchiveDuration`: Shortcut for :attr:`ThreadMetadata.auto_archive_duration`."""
        return self.metadata.auto_archive_duration

    @property
    def archive_timestamp(self) -> datetime:
        """:class:`datetime.datetime`: Shortcut for :attr:`ThreadMetadata.archive_timestamp`."""
        return self.metadata.archive_timestamp

    @property
    def created_at(self) -> Optional[datetime]:  # type: ignore # older threads have no creation time
        """Optional[:class:`datetime.datetime`]: Shortcut for :attr:`ThreadMetadata.created_at`."""
        return self.metadata.created_at

    @property
    def members(self) -> List[ThreadMember]:
        """List[:class:`ThreadMember`]: Members fetched or seen so far."""
        return list(self._members.values())

    @property
    def applied_tags(self) -> List[ForumTag]:
        """List[:class:`ForumTag`]: Tags on this forum post, in the order they were applied.

        Empty unless the parent is a cached :class:`ForumChannel`. Tags the
        forum no longer offers are skipped.
        """
        parent = self.parent
        if parent is None or parent.type != ChannelType.forum:
            return []

        resolved = (parent.get_tag(tag_id) for tag_id in self._applied_tags)  # type: ignore # parent is a forum
        return [tag for tag in resolved if tag is not None]

    @property
    def category_id(self) -> Optional[int]:  # type: ignore # read-only on threads
        """Optional[:class:`int`]: The parent channel's category ID."""
        parent = self.parent
        return None if parent is None else parent.category_id

    @property
    def category(self) -> Optional[CategoryChannel]:
        """Optional[:class:`CategoryChannel`]: The parent channel's category."""
        parent = self.parent
        return None if parent is None else parent.category

    @property
    def overwrites(self) -> OverwriteSet:
        """:class:`OverwriteSet`: Always empty."""
        return OverwriteSet()

    def is_private(self) -> bool:
        """:class:`bool`: Whether this is a private thread."""
        return self._type is ChannelType.private_thread

    def is_news(self) -> bool:
        """:class:`bool`: Whether this thread hangs off an announcement channel."""
        return self._type is ChannelType.news_thread

    def is_nsfw(self) -> bool:
        """:class:`bool`: Whether the parent is age restricted. ``False`` when it is not cached."""
        parent = self.parent
        return parent is not None and parent.is_nsfw()

    async def edit(
        self,
        *,
        name: str = MISSING,
        archived: bool = MISSING,
        locked: bool = MISSING,
        invitable: bool = MISSING,
        pinned: bool = MISSING,
        slowmode_delay: Optional[int] = MISSING,
        auto_archive_duration: ThreadArchiveDuration = MISSING,
        applied_tags: Sequence[Snowflake] = MISSING,
        reason: Optional[str] = None,
    ) -> Thread:
        """|coro|

        Changes the thread. Only the arguments given are sent. Without any,
        no request is made and this thread is returned as is.

        Parameters
        ------------
        name: :class:`str`
            New title.
        archived: :class:`bool`
            Archive or unarchive.
        locked: :class:`bool`
            Lock or unlock.
        pinned: :class:`bool`
            Pin the post at the top of its forum. Other flags are kept.
        invitable: :class:`bool`
            For private threads, whether non-moderators may add people.
        auto_archive_duration: :class:`ThreadArchiveDuration`
            New inactivity period.
        slowmode_delay: Optional[:class:`int`]
            Per-member delay in seconds, ``None`` clears it.
        applied_tags: Sequence[:class:`ForumTag`]
            Replaces the post's tags. The platform allows five at most.
        reason: Optional[:class:`str`]
            Audit log reason.

        Raises
        -------
        Forbidden
            Missing permissions.
        HTTPException
            The platform rejected the edit.

        Returns
        --------
        :class:`Thread`
            A new object built from the response.
        """
        payload: Dict[str, Any] = {}

        if name is not MISSING:
            payload['name'] = str(name)
        for key, value in (('archived', archived), ('locked', locked), ('invitable', invitable)):
            if value is not MISSING:
                payload[key] = value
        if auto_archive_duration is not MISSING:
            payload['auto_archive_duration'] = getattr(auto_archive_duration, 'value', auto_archive_duration)
        if slowmode_delay is not MISSING:
            payload['rate_limit_per_user'] = slowmode_delay
        if pinned is not MISSING:
            flags = self.flags
            flags.pinned = pinned
            payload['flags'] = flags.value
        if applied_tags is not MISSING:
            payload['applied_tags'] = [str(tag.id) for tag in applied_tags]

        if not payload:
            return self

        data = await self._state.http.edit_channel(self.id, **payload, reason=reason)
        return _decode_thread(data, state=self._state, guild=self.guild)  # type: ignore # always a thread payload

    async def archive(self, *, locked: bool = MISSING, reason: Optional[str] = None) -> Thread:
        """|coro|

        Same as ``edit(archived=True, locked=locked)``.
        """
        return await self.edit(archived=True, locked=locked, reason=reason)

    async def lock(self, *, reason: Optional[str] = None) -> Thread:
        """|coro|

        Same as ``edit(locked=True)``.
        """
        return await self.edit(locked=True, reason=reason)

    async def join(self) -> None:
        """|coro|

        Adds the client to the thread. Needs
        :attr:`~Permissions.send_messages_in_threads`, and for private
        threads :attr:`~Permissions.manage_threads` as well.

        Raises
        -------
        ClientException
            The thread is both archived and locked.
        Forbidden
            Missing permissions.
        HTTPException
            The request failed.
        """
        if self.archived and self.locked:
            raise ClientException('Cannot join an archived and locked thread')
        await self._state.http.join_thread(self.id)

    async def leave(self) -> None:
        """|coro|

        Removes the client from the thread.
        """
        await self._state.http.leave_thread(self.id)

    async def add_user(self, user: Snowflake, /) -> None:
        """|coro|

        Adds ``user`` to the thread.

        Raises
        -------
        Forbidden
            Missing permissions.
        HTTPException
            The request failed.
        """
        await self._state.http.add_user_to_thread(self.id, user.id)

    async def remove_user(self, user: Snowflake, /) -> None:
        """|coro|

        Removes ``user`` from the thread and from :attr:`members`.

        Raises
        -------
        Forbidden
            Missing permissions.
        HTTPException
            The request failed.
        """
        await self._state.http.remove_user_from_thread(self.id, user.id)
        self._pop_member(user.id)

    async def fetch_member(self, user_id: int, /) -> ThreadMember:
        """|coro|

        Looks up one member of the thread through the API and caches it.

        Raises
        -------
        NotFound
            The user is not in the thread.
        HTTPException
            The request failed.
        """
        data = await self._state.http.get_thread_member(self.id, user_id)
        return self._add_member(ThreadMember(parent=self, data=data))

    async def fetch_members(self) -> List[ThreadMember]:
        """|coro|

        Lists every member of the thread through the API and caches them.

        Raises
        -------
        HTTPException
            The request failed.
        """
        payload = await self._state.http.get_thread_members(self.id)
        return [self._add_member(ThreadMember(parent=self, data=data)) for data in payload]

    def _add_member(self, member: ThreadMember, /) -> ThreadMember:
        self._members[member.id] = member
        return member

    def _pop_member(self, member_id: int, /) -> Optional[ThreadMember]:
        return self._members.pop(member_id, None)


def _decode_thread(data: ThreadPayload, *, guild: Guild, state: ConnectionState) -> Thread:
    """Builds a :class:`Thread`, raising :exc:`InvalidData` when the payload is malformed."""
    try:
        return Thread(guild=guild, state=state, data=data)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidData(f'Malformed thread payload for thread ID {data.get("id")}') from exc


class ThreadMember(Hashable):
    """A user's membership in a :class:`Thread`. Compared and hashed by user ID.

    Attributes
    -----------
    id: :class:`int`
        The member's user ID.
    thread_id: :class:`int`
        The thread's ID.
    joined_at: :class:`datetime.datetime`
        When the user joined.
    flags: :class:`int`
        Raw notification settings.
    """

    __slots__ = ('id', 'flags', 'parent', 'joined_at', 'thread_id', '_state')

    def __init__(self, parent: Thread, data: ThreadMemberPayload) -> None:
        self.parent: Thread = parent
        self._state: ConnectionState = parent._state
        self._from_data(data)

    def __repr__(self) -> str:
        return f'<ThreadMember id={self.id} thread_id={self.thread_id} joined_at={self.joined_at!r}>'

    def _from_data(self, data: ThreadMemberPayload) -> None:
        # the client's own membership comes without user_id and id
        user_id = data.get('user_id')
        self.id: int = int(user_id) if user_id is not None else self._state.self_id  # type: ignore
        thread_id = data.get('id')
        self.thread_id: int = int(thread_id) if thread_id is not None else self.parent.id
        self.joined_at: datetime = parse_time(data['join_timestamp'])
        self.flags: int = data.get('flags', 0)

    @property
    def thread(self) -> Thread:
        """:class:`Thread`: The thread this membership belongs to."""
        return self.parent
