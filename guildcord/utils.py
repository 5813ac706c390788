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
    Any,
    AsyncIterable,
    Callable,
    Coroutine,
    Dict,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
    overload,
)
from base64 import b64encode
import datetime
from operator import attrgetter
import json
import logging
import os
import sys

try:
    import orjson  # type: ignore
except ModuleNotFoundError:
    HAS_ORJSON = False
else:
    HAS_ORJSON = True


__all__ = (
    'snowflake_time',
    'time_snowflake',
    'find',
    'get',
    'MISSING',
    'setup_logging',
)

# first millisecond of 2015, the zero point of every snowflake
DISCORD_EPOCH = 1420070400000

_log = logging.getLogger(__name__)


class _MissingSentinel:
    __slots__ = ()

    def __eq__(self, other):
        return False

    def __bool__(self):
        return False

    def __hash__(self):
        return 0

    def __repr__(self):
        return '...'


MISSING: Any = _MissingSentinel()


T = TypeVar('T')
_Iter = Union[Iterable[T], AsyncIterable[T]]
Coro = Coroutine[Any, Any, T]


@overload
def parse_time(timestamp: None) -> None:
    ...


@overload
def parse_time(timestamp: str) -> datetime.datetime:
    ...


@overload
def parse_time(timestamp: Optional[str]) -> Optional[datetime.datetime]:
    ...


def parse_time(timestamp: Optional[str]) -> Optional[datetime.datetime]:
    # empty strings show up for fields the platform cleared
    return datetime.datetime.fromisoformat(timestamp) if timestamp else None


def snowflake_time(id: int, /) -> datetime.datetime:
    """Extracts the moment a snowflake was generated.

    Parameters
    -----------
    id: :class:`int`
        Any snowflake.

    Returns
    --------
    :class:`datetime.datetime`
        Aware UTC datetime, accurate to the millisecond.
    """
    millis = (id >> 22) + DISCORD_EPOCH
    return datetime.datetime.fromtimestamp(millis / 1000, tz=datetime.timezone.utc)


def time_snowflake(dt: datetime.datetime, /, *, high: bool = False) -> int:
    """Builds a snowflake that sorts at ``dt``.

    Such snowflakes are meant for range queries such as ``before=`` and
    ``after=``. The lower 22 bits are all zeros, or all ones when ``high``
    is set, so ``time_snowflake(dt)`` is the smallest and
    ``time_snowflake(dt, high=True)`` the largest ID from that millisecond.

    Naive datetimes are read as local time.
    """
    millis = int(dt.timestamp() * 1000) - DISCORD_EPOCH
    low_bits = (1 << 22) - 1 if high else 0
    return (millis << 22) | low_bits


def _is_async_iterable(iterable: Any) -> bool:
    return hasattr(iterable, '__aiter__')


def _find(predicate: Callable[[T], Any], iterable: Iterable[T], /) -> Optional[T]:
    for element in iterable:
        if predicate(element):
            return element
    return None


async def _afind(predicate: Callable[[T], Any], iterable: AsyncIterable[T], /) -> Optional[T]:
    async for element in iterable:
        if predicate(element):
            return element
    return None


@overload
def find(predicate: Callable[[T], Any], iterable: AsyncIterable[T], /) -> Coro[Optional[T]]:
    ...


@overload
def find(predicate: Callable[[T], Any], iterable: Iterable[T], /) -> Optional[T]:
    ...


def find(predicate: Callable[[T], Any], iterable: _Iter[T], /) -> Union[Optional[T], Coro[Optional[T]]]:
    """Gives the first element of ``iterable`` for which ``predicate`` is truthy, or ``None``.

    .. code-block:: python3

        general = guildcord.utils.find(lambda c: c.name == 'general', guild.channels)

    Passing an async iterable turns the call into a coroutine that has to be awaited.
    """
    if _is_async_iterable(iterable):
        return _afind(predicate, iterable)  # type: ignore
    return _find(predicate, iterable)  # type: ignore


def _attribute_matcher(attrs: Dict[str, Any]) -> Callable[[Any], bool]:
    # parent__id=1 looks at elem.parent.id
    checks: List[Tuple[Callable[[Any], Any], Any]] = [
        (attrgetter(name.replace('__', '.')), expected) for name, expected in attrs.items()
    ]

    def matches(element: Any) -> bool:
        return all(getter(element) == expected for getter, expected in checks)

    return matches


@overload
def get(iterable: AsyncIterable[T], /, **attrs: Any) -> Coro[Optional[T]]:
    ...


@overload
def get(iterable: Iterable[T], /, **attrs: Any) -> Optional[T]:
    ...


def get(iterable: _Iter[T], /, **attrs: Any) -> Union[Optional[T], Coro[Optional[T]]]:
    r"""Gives the first element whose attributes equal every keyword given.

    Double underscores reach into nested attributes, so ``parent__id=5``
    compares ``element.parent.id``.

    .. code-block:: python3

        lobby = guildcord.utils.get(guild.voice_channels, name='Lobby', user_limit=10)

    Parameters
    -----------
    iterable: Union[:class:`collections.abc.Iterable`, :class:`collections.abc.AsyncIterable`]
        What to search. An async iterable makes this return a coroutine.
    \*\*attrs
        Attribute names and the values they must equal.
    """
    return find(_attribute_matcher(attrs), iterable)


def _get_as_snowflake(data: Any, key: str) -> Optional[int]:
    value = data.get(key)
    return int(value) if value else None


_IMAGE_SIGNATURES: Tuple[Tuple[str, Callable[[bytes], bool]], ...] = (
    ('image/png', lambda data: data.startswith(b'\x89PNG\r\n\x1a\n')),
    ('image/jpeg', lambda data: data[:3] == b'\xff\xd8\xff' or data[6:10] in (b'JFIF', b'Exif')),
    ('image/gif', lambda data: data.startswith((b'GIF87a', b'GIF89a'))),
    ('image/webp', lambda data: data[:4] == b'RIFF' and data[8:12] == b'WEBP'),
)


def _get_mime_type_for_image(data: bytes, fallback: bool = False) -> str:
    for mime, check in _IMAGE_SIGNATURES:
        if check(data):
            return mime

    if fallback:
        return 'application/octet-stream'
    raise ValueError('Unsupported image type given')


def _bytes_to_base64_data(data: bytes) -> str:
    mime = _get_mime_type_for_image(data, fallback=True)
    return f'data:{mime};base64,{b64encode(data).decode("ascii")}'


if HAS_ORJSON:

    def _to_json(obj: Any) -> str:
        return orjson.dumps(obj).decode('utf-8')

    _from_json = orjson.loads  # type: ignore

else:

    def _to_json(obj: Any) -> str:
        return json.dumps(obj, separators=(',', ':'), ensure_ascii=True)

    _from_json = json.loads


def _in_docker() -> bool:
    if os.path.exists('/.dockerenv'):
        return True
    try:
        with open('/proc/self/cgroup') as fp:
            return any('docker' in line for line in fp)
    except OSError:
        return False


def stream_supports_colour(stream: Any) -> bool:
    # editor consoles render ANSI codes without being a tty
    if 'PYCHARM_HOSTED' in os.environ or os.environ.get('TERM_PROGRAM') == 'vscode':
        return True

    tty = bool(getattr(stream, 'isatty', None) and stream.isatty())
    if sys.platform == 'win32':
        return tty and ('ANSICON' in os.environ or 'WT_SESSION' in os.environ)
    return tty or _in_docker()


class _ColourFormatter(logging.Formatter):
    # SGR sequences, \x1b[0m resets
    GREY = '\x1b[30;1m'
    MAGENTA = '\x1b[35m'
    RED = '\x1b[31m'
    RESET = '\x1b[0m'

    LEVEL_COLOURS = {
        logging.DEBUG: '\x1b[40;1m',
        logging.INFO: '\x1b[34;1m',
        logging.WARNING: '\x1b[33;1m',
        logging.ERROR: '\x1b[31m',
        logging.CRITICAL: '\x1b[41m',
    }

    def __init__(self) -> None:
        super().__init__()
        self._formatters = {
            level: logging.Formatter(
                f'{self.GREY}%(asctime)s{self.RESET} {colour}%(levelname)-8s{self.RESET} '
                f'{self.MAGENTA}%(name)s{self.RESET} %(message)s',
                '%Y-%m-%d %H:%M:%S',
            )
            for level, colour in self.LEVEL_COLOURS.items()
        }

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno, self._formatters[logging.DEBUG])

        if record.exc_info:
            record.exc_text = f'{self.RED}{formatter.formatException(record.exc_info)}{self.RESET}'

        try:
            return formatter.format(record)
        finally:
            # other handlers must not see the coloured traceback
            record.exc_text = None


def setup_logging(
    *,
    handler: logging.Handler = MISSING,
    formatter: logging.Formatter = MISSING,
    level: int = MISSING,
    root: bool = True,
) -> None:
    """Attaches a handler to the root logger or to the ``guildcord`` logger.

    Meant for scripts that have no logging configuration of their own.
    Terminals that understand ANSI escapes get a coloured format.

    Parameters
    -----------
    handler: :class:`logging.Handler`
        Where records go. A :class:`logging.StreamHandler` on stderr by default.
    formatter: :class:`logging.Formatter`
        Overrides the automatic choice between the coloured and the plain format.
    level: :class:`int`
        Level set on the configured logger, ``logging.INFO`` by default.
    root: :class:`bool`
        Configure the root logger instead of only this library's logger.
    """
    if level is MISSING:
        level = logging.INFO

    if handler is MISSING:
        handler = logging.StreamHandler()

    if formatter is MISSING:
        if isinstance(handler, logging.StreamHandler) and stream_supports_colour(handler.stream):
            formatter = _ColourFormatter()
        else:
            formatter = logging.Formatter('[{asctime}] [{levelname:<8}] {name}: {message}', '%Y-%m-%d %H:%M:%S', style='{')

    logger = logging.getLogger() if root else logging.getLogger(__name__.partition('.')[0])
    handler.setFormatter(formatter)
    logger.setLevel(level)
    logger.addHandler(handler)
