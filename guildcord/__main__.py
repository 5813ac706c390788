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

from typing import List, Optional

import argparse
import importlib.metadata
import platform
import sys

import aiohttp

import guildcord


def _release(info) -> str:
    return f'v{info.major}.{info.minor}.{info.micro}-{info.releaselevel}'


def version_report() -> List[str]:
    lines = [
        f'- Python {_release(sys.version_info)}',
        f'- guildcord {_release(guildcord.version_info)}',
    ]
    if guildcord.version_info.releaselevel != 'final':
        # development installs carry the exact build in their metadata
        try:
            lines.append(f'    - guildcord metadata: v{importlib.metadata.version("guildcord")}')
        except importlib.metadata.PackageNotFoundError:
            pass

    uname = platform.uname()
    lines.append(f'- aiohttp v{aiohttp.__version__}')
    lines.append(f'- system info: {uname.system} {uname.release} {uname.version}')
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='guildcord', description='Tools for helping with guildcord')
    parser.add_argument('-v', '--version', action='store_true', help='shows the library version')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print('\n'.join(version_report()))
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
