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


import collections
import datetime
import io
import logging
import random
import secrets
import typing

import pytest

from guildcord import utils


async def async_iterate(array):
    for item in array:
        yield item


@pytest.mark.parametrize(
    ('snowflake', 'time_tuple'),
    [
        (10000000000000000, (2015, 1, 28, 14, 16, 25)),
        (12345678901234567, (2015, 2, 4, 1, 37, 19)),
        (100000000000000000, (2015, 10, 3, 22, 44, 17)),
        (123456789012345678, (2015, 12, 7, 16, 13, 12)),
        (661720302316814366, (2020, 1, 1, 0, 0, 14)),
        (1000000000000000000, (2022, 7, 22, 11, 22, 59)),
    ],
)
def test_snowflake_time(snowflake: int, time_tuple: typing.Tuple[int, int, int, int, int, int]):
    dt = utils.snowflake_time(snowflake)

    assert (dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second) == time_tuple

    assert utils.time_snowflake(dt, high=False) <= snowflake <= utils.time_snowflake(dt, high=True)


@pytest.mark.asyncio
async def test_get_find():
    # Generate a dictionary of random keys to values
    mapping = {secrets.token_bytes(32): secrets.token_bytes(32) for _ in range(100)}

    # Turn it into a shuffled iterable of pairs
    pair = collections.namedtuple('pair', 'key value')
    array = [pair(key=k, value=v) for k, v in mapping.items()]
    random.shuffle(array)

    # Confirm all values can be found
    for key, value in mapping.items():
        # Sync get
        item = utils.get(array, key=key)
        assert item is not None
        assert item.value == value

        # Async get
        item = await utils.get(async_iterate(array), key=key)
        assert item is not None
        assert item.value == value

        # Sync find
        item = utils.find(lambda i: i.key == key, array)
        assert item is not None
        assert item.value == value

        # Async find
        item = await utils.find(lambda i: i.key == key, async_iterate(array))
        assert item is not None
        assert item.value == value


def test_get_nested_attributes():
    inner = collections.namedtuple('inner', 'id')
    outer = collections.namedtuple('outer', 'name parent')
    items = [outer('a', inner(1)), outer('b', inner(2)), outer('b', inner(3))]

    assert utils.get(items, name='b', parent__id=3) is items[2]
    assert utils.get(items, name='c') is None


@pytest.mark.parametrize(
    ('timestamp', 'expected'),
    [
        (None, None),
        ('', None),
        ('2023-01-01T00:00:00+00:00', datetime.datetime(2023, 1, 1, tzinfo=datetime.timezone.utc)),
        ('2021-06-01T12:30:15.123000+00:00', datetime.datetime(2021, 6, 1, 12, 30, 15, 123000, tzinfo=datetime.timezone.utc)),
    ],
)
def test_parse_time(timestamp, expected):
    assert utils.parse_time(timestamp) == expected


@pytest.mark.parametrize(
    ('data', 'expected'),
    [
        ({'id': '381963689470984203'}, 381963689470984203),
        ({'id': None}, None),
        ({}, None),
    ],
)
def test_get_as_snowflake(data, expected):
    assert utils._get_as_snowflake(data, 'id') == expected


def test_bytes_to_base64_data():
    png = b'\x89\x50\x4E\x47\x0D\x0A\x1A\x0A' + b'\x00' * 8

    assert utils._bytes_to_base64_data(png).startswith('data:image/png;base64,')
    assert utils._bytes_to_base64_data(b'plain').startswith('data:application/octet-stream;base64,')


def test_missing_sentinel():
    assert not utils.MISSING
    assert utils.MISSING != None
    assert repr(utils.MISSING) == '...'


def test_json_helpers():
    assert utils._from_json(utils._to_json({'a': [1, 2]})) == {'a': [1, 2]}


def test_setup_logging_library_logger():
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    logger = logging.getLogger('guildcord')

    formatter = logging.Formatter('{levelname} {name}: {message}', style='{')
    utils.setup_logging(handler=handler, formatter=formatter, level=logging.DEBUG, root=False)
    try:
        logging.getLogger('guildcord.http').debug('hello')
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    assert stream.getvalue() == 'DEBUG guildcord.http: hello\n'
