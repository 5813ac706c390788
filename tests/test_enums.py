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

import pytest

from guildcord.enums import (
    ChannelType,
    RTCRegion,
    ThreadArchiveDuration,
    VideoQualityMode,
    resolve_channel_type,
    try_enum,
)


@pytest.mark.parametrize(
    ('code', 'expected'),
    [
        (0, ChannelType.text),
        (1, ChannelType.private),
        (2, ChannelType.voice),
        (4, ChannelType.category),
        (5, ChannelType.news),
        (10, ChannelType.news_thread),
        (11, ChannelType.public_thread),
        (12, ChannelType.private_thread),
        (13, ChannelType.stage_voice),
        (15, ChannelType.forum),
    ],
)
def test_resolve_known_codes(code: int, expected):
    resolved = resolve_channel_type(code)
    assert resolved is expected
    assert resolved.value == code


@pytest.mark.parametrize('code', [3, 6, 7, 8, 9, 14, 16, -1, 1 << 32, None, '0', 2.5, True, False])
def test_resolve_unknown_codes(code):
    assert resolve_channel_type(code) is None


def test_aliases_share_members():
    assert ChannelType.private is ChannelType.dm
    assert ChannelType.news is ChannelType.announcement
    assert ChannelType.news_thread is ChannelType.announcement_thread
    assert str(ChannelType.news) == 'announcement'
    assert len(ChannelType) == 10


def test_is_thread():
    threads = {ChannelType.news_thread, ChannelType.public_thread, ChannelType.private_thread}
    for member in ChannelType:
        assert member.is_thread() is (member in threads)


def test_try_enum_fabricates_unknown_values():
    value = try_enum(ChannelType, 99)
    assert value.value == 99
    assert value.name == 'unknown_99'

    assert try_enum(VideoQualityMode, 2) is VideoQualityMode.full


def test_call_raises_for_unknown_value():
    with pytest.raises(ValueError):
        ChannelType(99)

    assert ChannelType(13) is ChannelType.stage_voice


def test_archive_duration_is_ordered():
    assert ThreadArchiveDuration.one_hour < ThreadArchiveDuration.one_day < ThreadArchiveDuration.one_week
    assert int(ThreadArchiveDuration.three_days) == 4320


def test_rtc_region_automatic():
    assert try_enum(RTCRegion, '') is RTCRegion.automatic
    assert str(RTCRegion.us_east) == 'us-east'


def test_enums_are_immutable():
    with pytest.raises(TypeError):
        ChannelType.text = 5  # type: ignore
