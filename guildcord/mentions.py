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

from typing import Any, Dict, List, Sequence, TYPE_CHECKING, Union

__all__ = ('AllowedMentions',)

if TYPE_CHECKING:
    from typing_extensions import Self

    from .abc import Snowflake


class _FakeBool:
    # truthy placeholder telling "left at the default" apart from an explicit True
    def __repr__(self):
        return 'True'

    def __eq__(self, other):
        return other is True

    def __bool__(self):
        return True


default: Any = _FakeBool()

_FIELDS = ('everyone', 'users', 'roles', 'replied_user')


class AllowedMentions:
    """Which mentions in a message are allowed to ping.

    Set one on the :class:`Client` to cover every message, and pass one
    to :meth:`abc.Messageable.send` to override individual fields for a
    single message.

    Attributes
    ------------
    everyone: :class:`bool`
        Whether @everyone and @here ping.
    users: Union[:class:`bool`, Sequence[:class:`abc.Snowflake`]]
        ``True`` lets every mentioned user be pinged, ``False`` none of
        them, and a sequence only those listed.
    roles: Union[:class:`bool`, Sequence[:class:`abc.Snowflake`]]
        The same choice for roles.
    replied_user: :class:`bool`
        Whether replying pings the author of the referenced message.
    """

    __slots__ = _FIELDS

    def __init__(
        self,
        *,
        everyone: bool = default,
        users: Union[bool, Sequence[Snowflake]] = default,
        roles: Union[bool, Sequence[Snowflake]] = default,
        replied_user: bool = default,
    ):
        self.everyone: bool = everyone
        self.users: Union[bool, Sequence[Snowflake]] = users
        self.roles: Union[bool, Sequence[Snowflake]] = roles
        self.replied_user: bool = replied_user

    @classmethod
    def all(cls) -> Self:
        """Every kind of mention pings."""
        return cls(everyone=True, users=True, roles=True, replied_user=True)

    @classmethod
    def none(cls) -> Self:
        """Nothing pings."""
        return cls(everyone=False, users=False, roles=False, replied_user=False)

    def to_dict(self) -> Dict[str, Any]:
        parse: List[str] = ['everyone'] if self.everyone else []
        data: Dict[str, Any] = {'parse': parse}

        for key in ('users', 'roles'):
            value = getattr(self, key)
            if value == True:
                parse.append(key)
            elif value != False:
                data[key] = [target.id for target in value]

        if self.replied_user:
            data['replied_user'] = True
        return data

    def merge(self, other: AllowedMentions) -> AllowedMentions:
        # fields other left at the default fall back to ours
        values = {}
        for field in _FIELDS:
            theirs = getattr(other, field)
            values[field] = getattr(self, field) if theirs is default else theirs
        return AllowedMentions(**values)

    def __repr__(self) -> str:
        fields = ', '.join(f'{field}={getattr(self, field)}' for field in _FIELDS)
        return f'{self.__class__.__name__}({fields})'
