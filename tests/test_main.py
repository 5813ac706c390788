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

import pytest

import guildcord
from guildcord.__main__ import main, version_report


def test_version_report_lists_library_and_runtime():
    lines = version_report()

    assert lines[0].startswith('- Python v')
    assert lines[1] == '- guildcord v{0.major}.{0.minor}.{0.micro}-{0.releaselevel}'.format(guildcord.version_info)
    assert any(line.startswith('- aiohttp v') for line in lines)


def test_main_version_flag(capsys):
    main(['--version'])

    out = capsys.readouterr().out
    assert '- guildcord v' in out


def test_main_without_arguments_prints_help(capsys):
    main([])

    assert 'usage: guildcord' in capsys.readouterr().out


def test_main_rejects_unknown_flags():
    with pytest.raises(SystemExit):
        main(['--nope'])
