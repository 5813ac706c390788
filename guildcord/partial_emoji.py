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

from typing import Any, Dict, Optional, TYPE_CHECKING, Union

import re

from . import utils

__all__ = ('PartialEmoji',)

if TYPE_CHECKING:
    from typing_extensions import Self
    from datetime import datetime

    from .types.channel import DefaultReaction
    from .types.emoji import PartialEmoji as PartialEmojiPayload


class PartialEmoji:
    """An emoji reference, either a unicode character or a custom emoji ID.

    Forums use these for their default reaction button and for the
    emoji of each :class:`ForumTag`. ``str()`` gives the markup a
    client renders. Custom emoji compare by ID, unicode emoji by name.

    Attributes
    -----------
    name: Optional[:class:`str`]
        The unicode character, or the custom emoji's name. Forum payloads
        leave custom emoji names empty.
    animated: :class:`bool`
        Whether a custom emoji is animated.
    id: Optional[:class:`int`]
        The custom emoji's snowflake, ``None`` for unicode emoji.
    """

    __slots__ = ('animated', 'name', 'id')

    # <a:name:id>, <:name:id>, a:name:id and name:id
    _CUSTOM_EMOJI_RE = re.compile(r'<?(?P<animated>a)?:?(?P<name>[A-Za-z0-9\_]+):(?P<id>[0-9]{13,20})>?')

    def __init__(self, *, name: str, animated: bool = False, id: Optional[int] = None):
        self.name: str = name
        self.id: Optional[int] = id
        self.animated: bool = animated

    @classmethod
    def from_dict(cls, data: Union[PartialEmojiPayload, Dict[str, Any]]) -> Self:
        return cls(
            name=data.get('name') or '',
            id=utils._get_as_snowflake(data, 'id'),
            animated=data.get('animated', False),
        )

    @classmethod
    def _from_forum_payload(cls, data: Union[DefaultReaction, Dict[str, Any]]) -> Optional[Self]:
        emoji_id = utils._get_as_snowflake(data, 'emoji_id')
        emoji_name = data.get('emoji_name')
        if emoji_id is None and not emoji_name:
            return None
        return cls(name=emoji_name or '', id=emoji_id)

    @classmethod
    def from_str(cls, value: str) -> Self:
        """Parses emoji markup such as ``<:blob:1234567890123>``.

        The angle brackets are optional and a leading ``a`` marks an
        animated emoji. Strings that are not custom emoji markup are
        taken as a unicode emoji.
        """
        match = cls._CUSTOM_EMOJI_RE.match(value)
        if match is None:
            return cls(name=value)

        return cls(name=match['name'], id=int(match['id']), animated=match['animated'] is not None)

    def to_dict(self) -> PartialEmojiPayload:
        payload: PartialEmojiPayload = {'id': self.id, 'name': self.name}
        if self.animated:
            payload['animated'] = True
        return payload

    def _to_forum_tag_payload(self) -> Dict[str, Any]:
        # exactly one of the two keys carries a value
        if self.is_custom_emoji():
            return {'emoji_id': self.id, 'emoji_name': None}
        return {'emoji_id': None, 'emoji_name': self.name}

    def __str__(self) -> str:
        # nameless custom emoji still render when given a placeholder name
        name = self.name or '_'
        if self.is_unicode_emoji():
            return name
        prefix = 'a' if self.animated else ''
        return f'<{prefix}:{name}:{self.id}>'

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} animated={self.animated} name={self.name!r} id={self.id}>'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PartialEmoji):
            return False
        if self.is_unicode_emoji():
            return self.name == other.name
        return self.id == other.id

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((self.id, self.name))

    def is_custom_emoji(self) -> bool:
        """:class:`bool`: Whether this references an uploaded emoji."""
        return self.id is not None

    def is_unicode_emoji(self) -> bool:
        """:class:`bool`: Whether this is a plain unicode emoji."""
        return self.id is None

    @property
    def created_at(self) -> Optional[datetime]:
        """Optional[:class:`datetime.datetime`]: Upload time of a custom emoji, ``None`` for unicode ones."""
        return utils.snowflake_time(self.id) if self.id is not None else None
