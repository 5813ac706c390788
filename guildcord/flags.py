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

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    Iterator,
    Optional,
    Tuple,
    Type,
    TypeVar,
    overload,
)

if TYPE_CHECKING:
    from typing_extensions import Self


__all__ = (
    'MessageFlags',
    'ChannelFlags',
)

BF = TypeVar('BF', bound='BaseFlags')


class flag_value:
    """Descriptor exposing one bit of a :class:`BaseFlags` value as a bool.

    The decorated function only reports the bit, it is called once with ``None``.
    """

    def __init__(self, func: Callable[[Any], int]):
        self.flag: int = func(None)
        self.__doc__: Optional[str] = func.__doc__

    @overload
    def __get__(self, instance: None, owner: Type[BF]) -> Self:
        ...

    @overload
    def __get__(self, instance: BF, owner: Type[BF]) -> bool:
        ...

    def __get__(self, instance: Optional[BF], owner: Type[BF]) -> Any:
        return self if instance is None else instance._has_flag(self.flag)

    def __set__(self, instance: BaseFlags, value: bool) -> None:
        instance._set_flag(self.flag, value)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} flag={self.flag!r}>'


class alias_flag_value(flag_value):
    # same bit as another flag, skipped when iterating
    pass


def fill_with_flags() -> Callable[[Type[BF]], Type[BF]]:
    def decorator(cls: Type[BF]) -> Type[BF]:
        cls.VALID_FLAGS = {name: attr.flag for name, attr in vars(cls).items() if isinstance(attr, flag_value)}
        cls.DEFAULT_VALUE = 0
        return cls

    return decorator


class BaseFlags:
    """Integer bit field with one boolean descriptor per bit.

    Subclasses declare their bits with :class:`flag_value` and must be
    decorated with :func:`fill_with_flags`.
    """

    VALID_FLAGS: ClassVar[Dict[str, int]]
    DEFAULT_VALUE: ClassVar[int]

    value: int

    __slots__ = ('value',)

    def __init__(self, **kwargs: bool):
        self.value = self.DEFAULT_VALUE
        self._apply(kwargs, noun='flag')

    def _apply(self, values: Dict[str, bool], *, noun: str) -> None:
        for name, toggle in values.items():
            if name not in self.VALID_FLAGS:
                raise TypeError(f'{name!r} is not a valid {noun} name.')
            setattr(self, name, toggle)

    @classmethod
    def _from_value(cls, value: int) -> Self:
        self = cls.__new__(cls)
        self.value = value
        return self

    def _all_bits(self) -> int:
        return (1 << max(self.VALID_FLAGS.values()).bit_length()) - 1

    def __or__(self, other: Self) -> Self:
        return self._from_value(self.value | other.value)

    def __and__(self, other: Self) -> Self:
        return self._from_value(self.value & other.value)

    def __xor__(self, other: Self) -> Self:
        return self._from_value(self.value ^ other.value)

    def __invert__(self) -> Self:
        return self._from_value(self.value ^ self._all_bits())

    def __bool__(self) -> bool:
        return self.value != self.DEFAULT_VALUE

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__) and self.value == other.value

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} value={self.value}>'

    def __iter__(self) -> Iterator[Tuple[str, bool]]:
        for name, attr in vars(self.__class__).items():
            if isinstance(attr, flag_value) and not isinstance(attr, alias_flag_value):
                yield name, self._has_flag(attr.flag)

    def _has_flag(self, bit: int) -> bool:
        return self.value & bit == bit

    def _set_flag(self, bit: int, toggle: bool) -> None:
        if not isinstance(toggle, bool):
            raise TypeError(f'Value to set for {self.__class__.__name__} must be a bool.')
        self.value = self.value | bit if toggle else self.value & ~bit


@fill_with_flags()
class MessageFlags(BaseFlags):
    r"""Bits of a message's ``flags`` field.

    Flags compare equal when their values match, combine with ``|``, ``&``
    and ``^``, and iterate as ``(name, enabled)`` pairs without aliases.

    Attributes
    -----------
    value: :class:`int`
        The raw integer. Prefer the named properties.
    """

    @flag_value
    def crossposted(self):
        """:class:`bool`: This message was published to following channels."""
        return 1 << 0

    @flag_value
    def is_crossposted(self):
        """:class:`bool`: This message is a copy delivered from a followed channel."""
        return 1 << 1

    @flag_value
    def suppress_embeds(self):
        """:class:`bool`: Link previews are hidden."""
        return 1 << 2

    @flag_value
    def has_thread(self):
        """:class:`bool`: A thread was started from this message."""
        return 1 << 5

    @flag_value
    def ephemeral(self):
        """:class:`bool`: Only the invoking user can see this message."""
        return 1 << 6

    @flag_value
    def suppress_notifications(self):
        """:class:`bool`: Sending this message did not cause push or desktop notifications."""
        return 1 << 12

    @alias_flag_value
    def silent(self):
        """:class:`bool`: Same bit as :attr:`suppress_notifications`."""
        return 1 << 12


@fill_with_flags()
class ChannelFlags(BaseFlags):
    r"""Bits of a guild channel's or thread's ``flags`` field.

    ``bool(flags)`` is true when any bit is set.

    Attributes
    -----------
    value: :class:`int`
        The raw integer. Prefer the named properties.
    """

    @flag_value
    def pinned(self):
        """:class:`bool`: The thread is pinned at the top of its forum."""
        return 1 << 1

    @flag_value
    def require_tag(self):
        """:class:`bool`: Posts in this :class:`ForumChannel` must carry at least one tag."""
        return 1 << 4
