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

import json
from typing import Any, Dict, List, Optional

import pytest

from guildcord.errors import DiscordServerError, Forbidden, HTTPException, NotFound, RateLimited
from guildcord.http import HTTPClient, Route, handle_message_parameters
from guildcord.mentions import AllowedMentions
from guildcord.utils import MISSING


class FakeResponse:
    def __init__(self, status: int, body: Any, *, reason: str = 'OK') -> None:
        self.status = status
        self.reason = reason
        if isinstance(body, str):
            self.headers = {'content-type': 'text/html'}
            self._text = body
        else:
            self.headers = {'content-type': 'application/json'}
            self._text = json.dumps(body)

    async def text(self, encoding: str = 'utf-8') -> str:
        return self._text

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({'method': method, 'url': url, **kwargs})
        return self.response

    async def close(self) -> None:
        self.closed = True


def make_client(status: int, body: Any, *, reason: str = 'OK', token: Optional[str] = 'Bot abc') -> HTTPClient:
    client = HTTPClient(token=token)
    client._HTTPClient__session = FakeSession(FakeResponse(status, body, reason=reason))  # type: ignore
    return client


def session_of(client: HTTPClient) -> FakeSession:
    return client._HTTPClient__session  # type: ignore


def test_route_url():
    route = Route('GET', '/channels/{channel_id}/messages', channel_id=123)

    assert route.url == 'https://discord.com/api/v10/channels/123/messages'
    assert route.channel_id == 123
    assert route.key == 'GET /channels/{channel_id}/messages'


def test_route_quotes_string_parameters():
    route = Route('DELETE', '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}', channel_id=1, message_id=2, emoji='a b/c')

    assert route.url.endswith('/reactions/a%20b/c')


def test_message_parameters_minimal():
    params = handle_message_parameters(content='hi')

    assert params.payload == {
        'tts': False,
        'content': 'hi',
        'allowed_mentions': {'parse': ['everyone', 'users', 'roles'], 'replied_user': True},
    }
    assert params.files is None


def test_message_parameters_merge_allowed_mentions():
    previous = AllowedMentions(everyone=False, users=True, roles=False)
    params = handle_message_parameters(
        content='hi',
        allowed_mentions=AllowedMentions(roles=True),
        previous_allowed_mentions=previous,
    )

    parse = params.payload['allowed_mentions']['parse']
    assert 'roles' in parse
    assert 'users' in parse
    assert 'everyone' not in parse


def test_message_parameters_channel_payload_nests_message():
    params = handle_message_parameters(content='first', channel_payload={'name': 'post', 'type': 11})

    assert params.payload['name'] == 'post'
    assert params.payload['type'] == 11
    assert params.payload['message']['content'] == 'first'


def test_message_parameters_validation():
    with pytest.raises(TypeError):
        handle_message_parameters(file=object(), files=[object()])  # type: ignore

    with pytest.raises(ValueError):
        handle_message_parameters(embeds=[{}] * 11)


@pytest.mark.asyncio
async def test_request_success_sends_headers():
    client = make_client(200, {'id': '1'})

    data = await client.edit_channel(123, reason='moving things/around', name='general')

    assert data == {'id': '1'}
    call = session_of(client).calls[0]
    assert call['method'] == 'PATCH'
    assert call['url'].endswith('/channels/123')
    headers = call['headers']
    assert headers['Authorization'] == 'Bot abc'
    assert headers['Content-Type'] == 'application/json'
    assert headers['X-Audit-Log-Reason'] == 'moving things/around'
    assert json.loads(call['data']) == {'name': 'general'}


@pytest.mark.asyncio
async def test_edit_channel_drops_unknown_fields():
    client = make_client(200, {'id': '1'})

    await client.edit_channel(123, nsfw=True, topik='typo', rate_limit_per_user=None)

    sent = json.loads(session_of(client).calls[0]['data'])
    assert sent == {'nsfw': True, 'rate_limit_per_user': None}


@pytest.mark.asyncio
async def test_request_without_token_or_reason():
    client = make_client(204, '', token=None)

    await client.delete_channel(123)

    headers = session_of(client).calls[0]['headers']
    assert 'Authorization' not in headers
    assert 'X-Audit-Log-Reason' not in headers


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ('status', 'exc'),
    [
        (400, HTTPException),
        (403, Forbidden),
        (404, NotFound),
        (500, DiscordServerError),
        (503, DiscordServerError),
    ],
)
async def test_request_error_mapping(status, exc):
    client = make_client(status, {'code': 50001, 'message': 'Missing Access'}, reason='Nope')

    with pytest.raises(exc) as excinfo:
        await client.get_channel(123)

    assert type(excinfo.value) is exc
    assert excinfo.value.status == status
    assert excinfo.value.code == 50001
    assert str(excinfo.value) == f'{status} Nope (error code: 50001): Missing Access'


@pytest.mark.asyncio
async def test_request_error_with_nested_errors():
    body = {
        'code': 50035,
        'message': 'Invalid Form Body',
        'errors': {'name': {'_errors': [{'code': 'BASE_TYPE_REQUIRED', 'message': 'This field is required'}]}},
    }
    client = make_client(400, body, reason='Bad Request')

    with pytest.raises(HTTPException) as excinfo:
        await client.edit_channel(123, name=None)

    assert excinfo.value.text == 'Invalid Form Body\nIn name: This field is required'


@pytest.mark.asyncio
async def test_rate_limit_is_not_retried():
    client = make_client(429, {'message': 'You are being rate limited.', 'retry_after': 1.5, 'global': False})

    with pytest.raises(RateLimited) as excinfo:
        await client.get_channel(123)

    assert excinfo.value.retry_after == 1.5
    assert not isinstance(excinfo.value, HTTPException)
    assert len(session_of(client).calls) == 1


@pytest.mark.asyncio
async def test_cloudflare_ban_is_http_exception():
    client = make_client(429, '<html>banned</html>', reason='Too Many Requests')

    with pytest.raises(HTTPException) as excinfo:
        await client.get_channel(123)

    assert excinfo.value.text == '<html>banned</html>'


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ('joined', 'private', 'suffix'),
    [
        (False, False, '/channels/5/threads/archived/public'),
        (False, True, '/channels/5/threads/archived/private'),
        (True, True, '/channels/5/users/@me/threads/archived/private'),
    ],
)
async def test_archived_thread_paths(joined, private, suffix):
    client = make_client(200, {'threads': [], 'members': [], 'has_more': False})

    await client.get_archived_threads(5, before='2023-01-01T00:00:00+00:00', limit=10, joined=joined, private=private)

    call = session_of(client).calls[0]
    assert call['url'].endswith(suffix)
    assert call['params'] == {'limit': 10, 'before': '2023-01-01T00:00:00+00:00'}


@pytest.mark.asyncio
async def test_logs_from_params():
    client = make_client(200, [])

    await client.logs_from(5, 50, before=10)

    assert session_of(client).calls[0]['params'] == {'limit': 50, 'before': 10}


@pytest.mark.asyncio
async def test_close_releases_session():
    client = make_client(200, {})
    session = session_of(client)

    await client.close()

    assert session.closed
    assert session_of(client) is MISSING
