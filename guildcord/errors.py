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

from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Tuple, Union

if TYPE_CHECKING:
    from aiohttp import ClientResponse

    from .types.error import (
        Error as ErrorPayload,
        FormErrors as FormErrorsPayload,
    )

__all__ = (
    'DiscordException',
    'ClientException',
    'InvalidData',
    'HTTPException',
    'RateLimited',
    'Forbidden',
    'NotFound',
    'DiscordServerError',
)


class DiscordException(Exception):
    """Root of every exception this library raises on purpose."""

    __slots__ = ()


class ClientException(DiscordException):
    """A call was rejected locally, usually because of its arguments,
    before anything was sent."""

    __slots__ = ()


class InvalidData(ClientException):
    """A payload from the API could not be turned into a model.

    Raised for channel payloads missing a field their type needs and
    for channel types that cannot appear where they were found.
    """

    __slots__ = ()


def _join_messages(wrapper: Dict[str, Any]) -> str:
    return ' '.join(error.get('message', '') for error in wrapper['_errors'])


def _walk_form_errors(errors: FormErrorsPayload, path: str = '') -> Iterator[Tuple[str, str]]:
    # leaves are {'_errors': [...]}, everything above them is a field path
    for name, value in errors.items():
        if name == '_errors':
            yield path or 'miscellaneous', _join_messages(errors)  # type: ignore
            continue

        where = f'{path}.{name}' if path else name
        if not isinstance(value, dict):
            yield where, value  # type: ignore
        elif '_errors' in value:
            yield where, _join_messages(value)
        else:
            yield from _walk_form_errors(value, where)  # type: ignore


def _flatten_error_dict(errors: FormErrorsPayload, /) -> Dict[str, str]:
    return dict(_walk_form_errors(errors))


class HTTPException(DiscordException):
    """The API answered with an error status.

    ``str(exc)`` reads ``"<status> <reason> (error code: <code>): <text>"``.

    Attributes
    ------------
    response: :class:`aiohttp.ClientResponse`
        The failed response.
    status: :class:`int`
        Its HTTP status.
    code: :class:`int`
        The API's own error code, ``0`` when the body had none.
    text: :class:`str`
        Error message. Field errors of a JSON body follow it, one
        ``In <field>: <message>`` line each. May be empty.
    json: :class:`dict`
        The error body. Non-JSON bodies are wrapped as ``{'code': 0, 'message': text}``.
    """

    def __init__(self, response: ClientResponse, message: Optional[Union[str, Dict[str, Any]]]):
        self.response: ClientResponse = response
        self.status: int = response.status
        self.code: int
        self.text: str
        self.json: ErrorPayload

        if isinstance(message, dict):
            self.json = message  # type: ignore
            self.code = message.get('code', 0)
            lines = [message.get('message', '')]
            errors = message.get('errors')
            if errors:
                lines.extend(f'In {field}: {reason}' for field, reason in _flatten_error_dict(errors).items())
            self.text = '\n'.join(lines)
        else:
            self.code = 0
            self.text = message or ''
            self.json = {'code': 0, 'message': self.text}

        summary = f'{response.status} {response.reason} (error code: {self.code})'
        super().__init__(f'{summary}: {self.text}' if self.text else summary)


class RateLimited(DiscordException):
    """The API answered 429 Too Many Requests.

    Nothing is retried automatically. This is deliberately not an
    :exc:`HTTPException` so it can be handled on its own.

    Attributes
    ------------
    retry_after: :class:`float`
        Seconds to wait before the same request may succeed.
    """

    __slots__ = ('retry_after',)

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f'Too many requests. Retry in {retry_after:.2f} seconds.')


class Forbidden(HTTPException):
    """403: the token lacks access or permissions."""

    __slots__ = ()


class NotFound(HTTPException):
    """404: the resource does not exist or is not visible."""

    __slots__ = ()


class DiscordServerError(HTTPException):
    """Any 5xx status."""

    __slots__ = ()
