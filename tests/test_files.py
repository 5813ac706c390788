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

from io import BytesIO

import pytest

from guildcord import File


@pytest.fixture
def notes(tmp_path):
    path = tmp_path / 'notes.txt'
    path.write_bytes(b'release notes')
    return str(path)


def test_path_uses_basename(notes):
    f = File(notes)
    assert f.filename == 'notes.txt'
    assert f.spoiler is False
    f.close()


def test_stream_without_name():
    f = File(BytesIO())
    assert f.filename == 'untitled'


def test_explicit_name_wins(notes):
    assert File(notes, 'renamed.txt').filename == 'renamed.txt'
    assert File(BytesIO(), 'renamed.txt').filename == 'renamed.txt'


@pytest.mark.parametrize(
    ('name', 'spoiler', 'expected_name', 'expected_spoiler'),
    [
        (None, True, 'SPOILER_notes.txt', True),
        ('SPOILER_notes.txt', None, 'SPOILER_notes.txt', True),
        ('SPOILER_notes.txt', True, 'SPOILER_notes.txt', True),
        ('SPOILER_notes.txt', False, 'notes.txt', False),
        ('SPOILER_SPOILER_notes.txt', None, 'SPOILER_notes.txt', True),
        ('SPOILER_SPOILER_notes.txt', False, 'notes.txt', False),
    ],
)
def test_spoiler_resolution(notes, name, spoiler, expected_name, expected_spoiler):
    kwargs = {} if spoiler is None else {'spoiler': spoiler}
    f = File(notes, name, **kwargs)

    assert f.filename == expected_name
    assert f.spoiler is expected_spoiler


@pytest.mark.parametrize(
    ('new_name', 'expected_name', 'expected_spoiler'),
    [
        ('notes.txt', 'notes.txt', False),
        ('SPOILER_notes.txt', 'SPOILER_notes.txt', True),
        ('SPOILER_SPOILER_notes.txt', 'SPOILER_notes.txt', True),
    ],
)
def test_renaming_recomputes_spoiler(notes, new_name, expected_name, expected_spoiler):
    f = File(notes, spoiler=True)
    f.filename = new_name

    assert f.filename == expected_name
    assert f.spoiler is expected_spoiler


def test_reset_rewinds_to_initial_position():
    buffer = BytesIO(b'abcdef')
    buffer.seek(2)
    f = File(buffer, 'letters.txt')

    f.fp.read()
    f.reset()
    assert f.fp.tell() == 2


def test_close_is_deferred_until_file_close(notes):
    f = File(notes)

    f.fp.close()
    assert not f.fp.closed

    f.close()
    assert f.fp.closed


def test_borrowed_stream_stays_open():
    buffer = BytesIO(b'data')
    File(buffer).close()
    assert not buffer.closed


def test_unreadable_stream_rejected():
    class Opaque(BytesIO):
        def seekable(self):
            return False

        def readable(self):
            return False

    buffer = Opaque()
    with pytest.raises(ValueError) as excinfo:
        File(buffer)

    assert str(excinfo.value) == f'File buffer {buffer!r} must be seekable and readable'


def test_to_dict():
    f = File(BytesIO(b'x'), filename='shot.png', description='a screenshot')
    assert f.to_dict(3) == {'id': 3, 'filename': 'shot.png', 'description': 'a screenshot'}
    assert File(BytesIO(b'x'), 'a.txt').to_dict(0) == {'id': 0, 'filename': 'a.txt'}
