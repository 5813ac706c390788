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

from collections import Counter
from functools import reduce
from operator import or_
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Set, Sequence, Tuple, TYPE_CHECKING, Union, overload

from .enums import OverwriteType, try_enum
from .flags import BaseFlags, flag_value, fill_with_flags, alias_flag_value

__all__ = (
    'Permissions',
    'PermissionOverwrite',
    'Overwrite',
    'OverwriteSet',
)

if TYPE_CHECKING:
    from typing_extensions import Self

    from .types.channel import PermissionOverwrite as PermissionOverwritePayload


class permission_alias(alias_flag_value):
    # second name for an existing bit, resolved to the canonical name by overwrites
    alias: str


def make_permission_alias(alias: str):
    def decorator(func) -> permission_alias:
        ret = permission_alias(func)
        ret.alias = alias
        return ret

    return decorator


@fill_with_flags()
class Permissions(BaseFlags):
    """The permission bits that matter inside a guild channel.

    Each bit is a read/write boolean property. Guild-wide bits such as
    administrator are not modelled.

    ``a <= b`` holds when ``a`` grants nothing beyond ``b``, ``a >= b``
    the other way around. Iterating gives ``(name, enabled)`` pairs
    without the alias names.

    Attributes
    -----------
    value: :class:`int`
        The raw bit field. Prefer the named properties.
    """

    __slots__ = ()

    def __init__(self, permissions: int = 0, **kwargs: bool):
        if not isinstance(permissions, int):
            raise TypeError(f'Expected int parameter, received {permissions.__class__.__name__} instead.')

        self.value = permissions
        self._apply(kwargs, noun='permission')

    def _check_comparable(self, other: Any) -> None:
        if not isinstance(other, Permissions):
            raise TypeError(f'cannot compare {self.__class__.__name__} with {other.__class__.__name__}')

    def is_subset(self, other: Permissions) -> bool:
        """Whether every bit set here is also set in ``other``."""
        self._check_comparable(other)
        return self.value & ~other.value == 0

    def is_superset(self, other: Permissions) -> bool:
        """Whether every bit set in ``other`` is also set here."""
        self._check_comparable(other)
        return other.value & ~self.value == 0

    __le__ = is_subset
    __ge__ = is_superset

    @classmethod
    def none(cls) -> Self:
        """Permissions with no bit set."""
        return cls(0)

    @classmethod
    def all(cls) -> Self:
        """Permissions with every bit this class knows about set."""
        return cls(reduce(or_, cls.VALID_FLAGS.values()))

    def update(self, **kwargs: bool) -> None:
        r"""Sets several bits at once. Names that are not permissions are skipped."""
        self._apply({k: v for k, v in kwargs.items() if k in self.VALID_FLAGS}, noun='permission')

    def handle_overwrite(self, allow: int, deny: int) -> None:
        # deny is applied before allow, so a bit in both ends up allowed
        self.value: int = (self.value & ~deny) | allow

    # general

    @flag_value
    def create_instant_invite(self) -> int:
        """:class:`bool`: May create invites to the channel."""
        return 1 << 0

    @flag_value
    def manage_channels(self) -> int:
        """:class:`bool`: May edit or delete the channel."""
        return 1 << 4

    @flag_value
    def view_channel(self) -> int:
        """:class:`bool`: May see the channel at all."""
        return 1 << 10

    @make_permission_alias('view_channel')
    def read_messages(self) -> int:
        """:class:`bool`: Other name for :attr:`view_channel`."""
        return 1 << 10

    @flag_value
    def manage_roles(self) -> int:
        """:class:`bool`: May change the channel's permission overwrites."""
        return 1 << 28

    @make_permission_alias('manage_roles')
    def manage_permissions(self) -> int:
        """:class:`bool`: Other name for :attr:`manage_roles`."""
        return 1 << 28

    @flag_value
    def manage_webhooks(self) -> int:
        """:class:`bool`: May add, change and remove webhooks."""
        return 1 << 29

    # text

    @flag_value
    def add_reactions(self) -> int:
        """:class:`bool`: May add new reactions."""
        return 1 << 6

    @flag_value
    def send_messages(self) -> int:
        """:class:`bool`: May post messages."""
        return 1 << 11

    @flag_value
    def send_tts_messages(self) -> int:
        """:class:`bool`: May post messages that are read aloud."""
        return 1 << 12

    @flag_value
    def manage_messages(self) -> int:
        """:class:`bool`: May delete and pin the messages of others."""
        return 1 << 13

    @flag_value
    def embed_links(self) -> int:
        """:class:`bool`: Links posted get a preview."""
        return 1 << 14

    @flag_value
    def attach_files(self) -> int:
        """:class:`bool`: May upload attachments."""
        return 1 << 15

    @flag_value
    def read_message_history(self) -> int:
        """:class:`bool`: May read messages sent before they joined the channel."""
        return 1 << 16

    @flag_value
    def mention_everyone(self) -> int:
        """:class:`bool`: @everyone and @here notify the whole channel."""
        return 1 << 17

    # threads

    @flag_value
    def manage_threads(self) -> int:
        """:class:`bool`: May rename, archive, lock and delete threads."""
        return 1 << 34

    @flag_value
    def create_public_threads(self) -> int:
        """:class:`bool`: May start public threads."""
        return 1 << 35

    @flag_value
    def create_private_threads(self) -> int:
        """:class:`bool`: May start private threads."""
        return 1 << 36

    @flag_value
    def send_messages_in_threads(self) -> int:
        """:class:`bool`: May post in threads."""
        return 1 << 38

    # voice and stage

    @flag_value
    def priority_speaker(self) -> int:
        """:class:`bool`: Speech lowers the volume of everyone else."""
        return 1 << 8

    @flag_value
    def stream(self) -> int:
        """:class:`bool`: May share their screen or camera."""
        return 1 << 9

    @flag_value
    def connect(self) -> int:
        """:class:`bool`: May join the voice channel."""
        return 1 << 20

    @flag_value
    def speak(self) -> int:
        """:class:`bool`: May talk once connected."""
        return 1 << 21

    @flag_value
    def mute_members(self) -> int:
        """:class:`bool`: May server-mute others."""
        return 1 << 22

    @flag_value
    def deafen_members(self) -> int:
        """:class:`bool`: May server-deafen others."""
        return 1 << 23

    @flag_value
    def move_members(self) -> int:
        """:class:`bool`: May drag others into different voice channels."""
        return 1 << 24

    @flag_value
    def use_voice_activation(self) -> int:
        """:class:`bool`: May talk without push-to-talk."""
        return 1 << 25

    @flag_value
    def request_to_speak(self) -> int:
        """:class:`bool`: May raise their hand on a stage."""
        return 1 << 32


def _augment_from_permissions(cls):
    # mirror every Permissions name, aliases included, as a tri-state property
    aliases = set()

    for name, attr in vars(Permissions).items():
        if isinstance(attr, permission_alias):
            aliases.add(name)
            key = attr.alias
        elif isinstance(attr, flag_value):
            key = name
        else:
            continue

        def getter(self, key=key):
            return self._values.get(key)

        def setter(self, value, key=key):
            self._set(key, value)

        setattr(cls, name, property(getter, setter))

    cls.VALID_NAMES = set(Permissions.VALID_FLAGS)
    cls.PURE_FLAGS = cls.VALID_NAMES - aliases
    return cls


@_augment_from_permissions
class PermissionOverwrite:
    r"""Tri-state permissions for one role or member in one channel.

    ``True`` grants the permission, ``False`` takes it away and ``None``
    (the default) leaves whatever the roles give. Two overwrites are equal
    when they set the same permissions to the same values.

    Parameters
    -----------
    \*\*kwargs
        Permission names and their initial state.

    Raises
    -------
    ValueError
        A keyword is not a permission name.
    TypeError
        A value is not ``True``, ``False`` or ``None``.
    """

    __slots__ = ('_values',)

    if TYPE_CHECKING:
        VALID_NAMES: ClassVar[Set[str]]
        PURE_FLAGS: ClassVar[Set[str]]
        create_instant_invite: Optional[bool]
        manage_channels: Optional[bool]
        add_reactions: Optional[bool]
        priority_speaker: Optional[bool]
        stream: Optional[bool]
        view_channel: Optional[bool]
        read_messages: Optional[bool]
        send_messages: Optional[bool]
        send_tts_messages: Optional[bool]
        manage_messages: Optional[bool]
        embed_links: Optional[bool]
        attach_files: Optional[bool]
        read_message_history: Optional[bool]
        mention_everyone: Optional[bool]
        connect: Optional[bool]
        speak: Optional[bool]
        mute_members: Optional[bool]
        deafen_members: Optional[bool]
        move_members: Optional[bool]
        use_voice_activation: Optional[bool]
        manage_roles: Optional[bool]
        manage_permissions: Optional[bool]
        manage_webhooks: Optional[bool]
        request_to_speak: Optional[bool]
        manage_threads: Optional[bool]
        create_public_threads: Optional[bool]
        create_private_threads: Optional[bool]
        send_messages_in_threads: Optional[bool]

    def __init__(self, **kwargs: Optional[bool]):
        self._values: Dict[str, Optional[bool]] = {}

        unknown = [name for name in kwargs if name not in self.VALID_NAMES]
        if unknown:
            raise ValueError(f'no permission called {unknown[0]}.')

        for name, value in kwargs.items():
            setattr(self, name, value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PermissionOverwrite) and self._values == other._values

    def __repr__(self) -> str:
        return f'<PermissionOverwrite {self._values!r}>'

    def _set(self, key: str, value: Optional[bool]) -> None:
        if value is not None and not isinstance(value, bool):
            raise TypeError(f'Expected bool or NoneType, received {value.__class__.__name__}')

        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value

    def pair(self) -> Tuple[Permissions, Permissions]:
        """Tuple[:class:`Permissions`, :class:`Permissions`]: The ``(allow, deny)`` bit fields."""
        allow = Permissions.none()
        deny = Permissions.none()
        for key, value in self._values.items():
            setattr(allow if value else deny, key, True)
        return allow, deny

    @classmethod
    def from_pair(cls, allow: Permissions, deny: Permissions) -> Self:
        """Builds an overwrite from ``(allow, deny)`` bit fields. Deny wins when both set a bit."""
        ret = cls()
        for target, permissions in ((True, allow), (False, deny)):
            for key, enabled in permissions:
                if enabled:
                    setattr(ret, key, target)
        return ret

    def is_empty(self) -> bool:
        """Whether every permission is left at ``None``."""
        return not self._values

    def update(self, **kwargs: Optional[bool]) -> None:
        r"""Changes several permissions at once. Unknown names are skipped."""
        for key, value in kwargs.items():
            if key in self.VALID_NAMES:
                setattr(self, key, value)

    def __iter__(self) -> Iterator[Tuple[str, Optional[bool]]]:
        for key in self.PURE_FLAGS:
            yield key, self._values.get(key)


def _bits(value: Union[int, Permissions]) -> int:
    if isinstance(value, Permissions):
        return value.value
    return int(value)


class Overwrite:
    """A single permission overwrite record stored on a guild channel.

    .. container:: operations

        .. describe:: x == y

            Checks if two records target the same entity with the same bits.

        .. describe:: hash(x)

            Returns the record's hash.

    Attributes
    -----------
    id: :class:`int`
        The ID of the role or member the overwrite applies to.
    type: :class:`OverwriteType`
        Whether :attr:`id` refers to a role or a member.
    allow: :class:`int`
        The raw bitmask of explicitly allowed permissions.
    deny: :class:`int`
        The raw bitmask of explicitly denied permissions.
    """

    __slots__ = ('id', 'type', 'allow', 'deny')

    def __init__(
        self,
        id: int,
        *,
        type: OverwriteType,
        allow: Union[int, Permissions] = 0,
        deny: Union[int, Permissions] = 0,
    ) -> None:
        self.id: int = int(id)
        self.type: OverwriteType = type
        self.allow: int = _bits(allow)
        self.deny: int = _bits(deny)

    @classmethod
    def from_data(cls, data: PermissionOverwritePayload) -> Self:
        return cls(
            int(data['id']),
            type=try_enum(OverwriteType, int(data['type'])),
            allow=int(data.get('allow', 0)),
            deny=int(data.get('deny', 0)),
        )

    @classmethod
    def from_permissions(cls, id: int, *, type: OverwriteType, overwrite: PermissionOverwrite) -> Self:
        """Creates a record from a tri-state :class:`PermissionOverwrite`."""
        allow, deny = overwrite.pair()
        return cls(id, type=type, allow=allow, deny=deny)

    def __repr__(self) -> str:
        return f'<Overwrite id={self.id} type={self.type!r} allow={self.allow} deny={self.deny}>'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Overwrite):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> Tuple[int, int, int, int]:
        return (self.id, self.type.value, self.allow, self.deny)

    def to_dict(self) -> PermissionOverwritePayload:
        return {
            'id': self.id,
            'type': self.type.value,
            'allow': str(self.allow),
            'deny': str(self.deny),
        }

    def is_role(self) -> bool:
        """:class:`bool`: Whether the overwrite targets a role."""
        return self.type == OverwriteType.role

    def is_member(self) -> bool:
        """:class:`bool`: Whether the overwrite targets a member."""
        return self.type == OverwriteType.member

    def pair(self) -> Tuple[Permissions, Permissions]:
        """Tuple[:class:`Permissions`, :class:`Permissions`]: Returns the (allow, deny) pair of this record."""
        return Permissions(self.allow), Permissions(self.deny)

    def permissions(self) -> PermissionOverwrite:
        """:class:`PermissionOverwrite`: Returns the tri-state view of this record."""
        return PermissionOverwrite.from_pair(*self.pair())


class OverwriteSet(Sequence[Overwrite]):
    """An ordered, read-only collection of :class:`Overwrite` records.

    Guild channels build a fresh set from their raw overwrite list every
    time :attr:`abc.GuildChannel.overwrites` is accessed, so changes to the
    underlying list are always visible.

    .. container:: operations

        .. describe:: x == y

            Checks if two sets hold the same records, regardless of order.

        .. describe:: len(x)

            Returns the number of records.

        .. describe:: iter(x)

            Iterates over the records in their original order.
    """

    __slots__ = ('_overwrites',)

    def __init__(self, overwrites: Iterable[Overwrite] = ()) -> None:
        self._overwrites: Tuple[Overwrite, ...] = tuple(overwrites)

    @classmethod
    def materialize(cls, records: Iterable[PermissionOverwritePayload]) -> Self:
        """Builds a set from raw overwrite payloads, preserving their order."""
        return cls(Overwrite.from_data(record) for record in records)

    def __repr__(self) -> str:
        return f'<OverwriteSet overwrites={list(self._overwrites)!r}>'

    @overload
    def __getitem__(self, idx: int) -> Overwrite:
        ...

    @overload
    def __getitem__(self, idx: slice) -> Sequence[Overwrite]:
        ...

    def __getitem__(self, idx: Any) -> Any:
        return self._overwrites[idx]

    def __len__(self) -> int:
        return len(self._overwrites)

    def __iter__(self) -> Iterator[Overwrite]:
        return iter(self._overwrites)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OverwriteSet):
            return NotImplemented
        return Counter(self._overwrites) == Counter(other._overwrites)

    __hash__ = None  # type: ignore

    def get(self, id: int) -> Optional[Overwrite]:
        """Returns the first record targeting the given role or member ID, if any."""
        for overwrite in self._overwrites:
            if overwrite.id == id:
                return overwrite
        return None

    def to_list(self) -> List[PermissionOverwritePayload]:
        return [overwrite.to_dict() for overwrite in self._overwrites]
