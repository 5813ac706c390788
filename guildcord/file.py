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

from typing import Any, Dict, Optional, Tuple, Union

import os
import io

from .utils import MISSING

__all__ = ('File',)

_SPOILER_PREFIX = 'SPOILER_'


def _strip_spoiler(filename: str) -> Tuple[str, bool]:
    bare = filename
    while bare.startswith(_SPOILER_PREFIX):
        bare = bare[len(_SPOILER_PREFIX) :]
    return bare, bare != filename


class File:
    r"""An attachment to upload with a message.

    A file is consumed by the request that sends it. Build a new one for
    every send.

    Attributes
    -----------
    fp: :class:`io.BufferedIOBase`
        The binary stream being uploaded. Paths given to the constructor
        are opened here and closed again by :meth:`close`.
    spoiler: :class:`bool`
        Whether the attachment is blurred until clicked. Taken from a
        ``SPOILER_`` filename prefix unless passed explicitly.
    description: Optional[:class:`str`]
        Alt text shown for images.
    """

    __slots__ = (
        'fp',
        'spoiler',
        'description',
        '_filename',
        '_start',
        '_owns_fp',
        '_real_close',
    )

    def __init__(
        self,
        fp: Union[str, bytes, os.PathLike[Any], io.BufferedIOBase],
        filename: Optional[str] = None,
        *,
        spoiler: bool = MISSING,
        description: Optional[str] = None,
    ):
        if isinstance(fp, io.IOBase):
            if not (fp.seekable() and fp.readable()):
                raise ValueError(f'File buffer {fp!r} must be seekable and readable')
            self.fp: io.BufferedIOBase = fp  # type: ignore
            self._start: int = fp.tell()
            self._owns_fp: bool = False
        else:
            self.fp = open(fp, 'rb')
            self._start = 0
            self._owns_fp = True

        # aiohttp closes the payload after writing it, keep the stream usable for retries
        self._real_close = self.fp.close
        self.fp.close = lambda: None

        if filename is None:
            filename = os.path.basename(fp) if isinstance(fp, str) else getattr(fp, 'name', 'untitled')

        self._filename, prefixed = _strip_spoiler(filename)  # type: ignore
        self.spoiler: bool = prefixed if spoiler is MISSING else spoiler
        self.description: Optional[str] = description

    def __repr__(self) -> str:
        return f'<File filename={self.filename!r} spoiler={self.spoiler}>'

    @property
    def filename(self) -> str:
        """:class:`str`: Name the attachment is uploaded under, ``SPOILER_`` prefix included.

        Defaults to the base name of the path, or the stream's ``name``,
        or ``untitled``. Assigning a name re-derives :attr:`spoiler` from it.
        """
        return f'{_SPOILER_PREFIX}{self._filename}' if self.spoiler else self._filename

    @filename.setter
    def filename(self, value: str) -> None:
        self._filename, self.spoiler = _strip_spoiler(value)

    def reset(self) -> None:
        """Rewinds :attr:`fp` to where it was when the file was created."""
        self.fp.seek(self._start)

    def close(self) -> None:
        """Restores the stream's ``close`` and closes it if this object opened it."""
        self.fp.close = self._real_close
        if self._owns_fp:
            self._real_close()

    def to_dict(self, index: int) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'id': index, 'filename': self.filename}
        if self.description is not None:
            payload['description'] = self.description
        return payload
