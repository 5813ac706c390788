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

import operator
import types
from collections import namedtuple
from typing import Any, Callable, ClassVar, Dict, List, Optional, TYPE_CHECKING, Tuple, Type, TypeVar, Iterator, Mapping

__all__ = (
    'Enum',
    'ChannelType',
    'VideoQualityMode',
    'RTCRegion',
    'ThreadArchiveDuration',
    'ForumLayoutType',
    'ForumOrderType',
    'PrivacyLevel',
    'InviteTarget',
    'WebhookType',
    'OverwriteType',
    'resolve_channel_type',
)


def _ordering(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(self: Any, other: Any) -> bool:
        return isinstance(other, self.__class__) and op(self.value, other.value)

    return compare


def _create_value_cls(name: str, comparable: bool):
    # members are namedtuples created per enum, which type checkers cannot see
    cls = namedtuple('_EnumValue_' + name, 'name value')
    cls.__repr__ = lambda self: f'<{name}.{self.name}: {self.value!r}>'  # type: ignore
    cls.__str__ = lambda self: f'{name}.{self.name}'  # type: ignore
    if comparable:
        for dunder, op in (('__lt__', operator.lt), ('__le__', operator.le), ('__gt__', operator.gt), ('__ge__', operator.ge)):
            setattr(cls, dunder, _ordering(op))
    return cls


def _is_descriptor(obj):
    return any(hasattr(obj, attr) for attr in ('__get__', '__set__', '__delete__'))


class EnumMeta(type):
    if TYPE_CHECKING:
        __name__: ClassVar[str]
        _enum_member_names_: ClassVar[List[str]]
        _enum_member_map_: ClassVar[Dict[str, Any]]
        _enum_value_map_: ClassVar[Dict[Any, Any]]

    def __new__(
        cls,
        name: str,
        bases: Tuple[type, ...],
        attrs: Dict[str, Any],
        *,
        comparable: bool = False,
    ) -> EnumMeta:
        by_value: Dict[Any, Any] = {}
        by_name: Dict[str, Any] = {}
        canonical: List[str] = []

        value_cls = _create_value_cls(name, comparable)
        for key, value in list(attrs.items()):
            if isinstance(value, classmethod):
                continue

            if _is_descriptor(value):
                # methods and properties move onto the member type
                setattr(value_cls, key, value)
                del attrs[key]
                continue

            if key.startswith('_'):
                continue

            member = by_value.get(value)
            if member is None:
                member = by_value[value] = value_cls(name=key, value=value)
                canonical.append(key)
            # otherwise key is an alias of an earlier member with the same value

            by_name[key] = member
            attrs[key] = member

        attrs.update(
            _enum_value_map_=by_value,
            _enum_member_map_=by_name,
            _enum_member_names_=canonical,
            _enum_value_cls_=value_cls,
        )
        actual_cls = super().__new__(cls, name, bases, attrs)
        value_cls._actual_enum_cls_ = actual_cls  # type: ignore
        return actual_cls

    def __iter__(cls) -> Iterator[Any]:
        return iter([cls._enum_member_map_[name] for name in cls._enum_member_names_])

    def __len__(cls) -> int:
        return len(cls._enum_member_names_)

    def __repr__(cls) -> str:
        return f'<enum {cls.__name__}>'

    @property
    def __members__(cls) -> Mapping[str, Any]:
        return types.MappingProxyType(cls._enum_member_map_)

    def __call__(cls, value: Any) -> Any:
        try:
            return cls._enum_value_map_[value]
        except (KeyError, TypeError):
            raise ValueError(f'{value!r} is not a valid {cls.__name__}') from None

    def __getitem__(cls, key: str) -> Any:
        return cls._enum_member_map_[key]

    def __setattr__(cls, name: str, value: Any) -> None:
        raise TypeError('Enums are immutable.')

    def __delattr__(cls, attr: str) -> None:
        raise TypeError('Enums are immutable')

    def __instancecheck__(self, instance: Any) -> bool:
        return getattr(instance, '_actual_enum_cls_', None) is self


if TYPE_CHECKING:
    from enum import Enum
else:

    class Enum(metaclass=EnumMeta):
        @classmethod
        def try_value(cls, value):
            try:
                return cls._enum_value_map_[value]
            except (KeyError, TypeError):
                return value


class ChannelType(Enum):
    text = 0
    dm = 1
    voice = 2
    category = 4
    announcement = 5
    announcement_thread = 10
    public_thread = 11
    private_thread = 12
    stage_voice = 13
    forum = 15

    # aliases
    private = 1
    news = 5
    news_thread = 10

    def __str__(self) -> str:
        return self.name

    def is_thread(self) -> bool:
        """:class:`bool`: Whether this type describes a thread."""
        return self.value in (10, 11, 12)


class VideoQualityMode(Enum):
    auto = 1
    full = 2

    def __int__(self) -> int:
        return self.value


class RTCRegion(Enum):
    automatic = ''
    brazil = 'brazil'
    hongkong = 'hongkong'
    india = 'india'
    japan = 'japan'
    rotterdam = 'rotterdam'
    russia = 'russia'
    singapore = 'singapore'
    south_africa = 'southafrica'
    sydney = 'sydney'
    us_central = 'us-central'
    us_east = 'us-east'
    us_south = 'us-south'
    us_west = 'us-west'

    def __str__(self) -> str:
        return self.value


class ThreadArchiveDuration(Enum, comparable=True):
    one_hour = 60
    one_day = 1440
    three_days = 4320
    one_week = 10080

    def __int__(self) -> int:
        return self.value


class ForumLayoutType(Enum):
    not_set = 0
    list_view = 1
    gallery_view = 2


class ForumOrderType(Enum):
    latest_activity = 0
    creation_date = 1


class PrivacyLevel(Enum):
    public = 1
    guild_only = 2


class InviteTarget(Enum):
    unknown = 0
    stream = 1
    embedded_application = 2


class WebhookType(Enum):
    incoming = 1
    channel_follower = 2
    application = 3


class OverwriteType(Enum):
    role = 0
    member = 1


E = TypeVar('E', bound='Enum')


def create_unknown_value(cls: Type[E], val: Any) -> E:
    return cls._enum_value_cls_(name=f'unknown_{val}', value=val)  # type: ignore


def try_enum(cls: Type[E], val: Any) -> E:
    """Looks ``val`` up in ``cls``, making up an ``unknown_<val>`` member when it is not there.

    The made-up member still passes ``isinstance(x, cls)`` and keeps the raw value.
    """
    try:
        return cls._enum_value_map_[val]  # type: ignore
    except (KeyError, TypeError, AttributeError):
        return create_unknown_value(cls, val)


def resolve_channel_type(value: Any) -> Optional[ChannelType]:
    """Maps the ``type`` code of a channel payload onto :class:`ChannelType`.

    Codes without a member give ``None`` rather than a made-up member,
    so channel kinds this library does not model can be skipped.
    """
    # True and False would otherwise match 1 and 0
    if isinstance(value, bool):
        return None

    try:
        return ChannelType._enum_value_map_[value]
    except (KeyError, TypeError):
        return None
