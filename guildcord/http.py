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

import logging
from typing import (
    Any,
    ClassVar,
    Coroutine,
    Dict,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    TYPE_CHECKING,
    Type,
    TypeVar,
    Union,
)
from urllib.parse import quote as _uriquote

import aiohttp

from .errors import HTTPException, RateLimited, Forbidden, NotFound, DiscordServerError
from .file import File
from .mentions import AllowedMentions
from . import utils, __version__
from .utils import MISSING

if TYPE_CHECKING:
    from typing_extensions import Self

    from .flags import MessageFlags
    from .types import (
        channel,
        invite,
        message,
        threads,
        webhook,
    )
    from .types.snowflake import Snowflake, SnowflakeList

    from types import TracebackType

    T = TypeVar('T')
    BE = TypeVar('BE', bound=BaseException)
    Response = Coroutine[Any, Any, T]

API_VERSION = 10
_log = logging.getLogger(__name__)

# statuses with a dedicated exception, everything else in the error range is HTTPException
_STATUS_ERRORS: Dict[int, Type[HTTPException]] = {
    403: Forbidden,
    404: NotFound,
}

# fields the modify channel endpoint takes, for channels and threads alike
_EDITABLE_CHANNEL_FIELDS = frozenset(
    {
        'name',
        'type',
        'icon',
        'nsfw',
        'flags',
        'topic',
        'locked',
        'bitrate',
        'archived',
        'position',
        'parent_id',
        'invitable',
        'user_limit',
        'rtc_region',
        'applied_tags',
        'available_tags',
        'video_quality_mode',
        'default_sort_order',
        'rate_limit_per_user',
        'default_forum_layout',
        'auto_archive_duration',
        'permission_overwrites',
        'default_reaction_emoji',
        'default_auto_archive_duration',
        'default_thread_rate_limit_per_user',
    }
)


async def json_or_text(response: aiohttp.ClientResponse) -> Union[Dict[str, Any], str]:
    text = await response.text(encoding='utf-8')
    # proxies in front of the API may drop the header entirely
    if response.headers.get('content-type') == 'application/json':
        return utils._from_json(text)
    return text


class MultipartParameters(NamedTuple):
    payload: Optional[Dict[str, Any]]
    multipart: Optional[List[Dict[str, Any]]]
    files: Optional[Sequence[File]]

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BE]],
        exc: Optional[BE],
        traceback: Optional[TracebackType],
    ) -> None:
        for file in self.files or ():
            file.close()


def _to_payload(obj: Any) -> Dict[str, Any]:
    # embeds and components come pre-built, either as dicts or as objects with to_dict()
    return obj if isinstance(obj, dict) else obj.to_dict()


def _resolve_allowed_mentions(
    allowed_mentions: Optional[AllowedMentions], previous: Optional[AllowedMentions]
) -> Dict[str, Any]:
    if not allowed_mentions:
        return (previous or AllowedMentions()).to_dict()
    if previous is None:
        return allowed_mentions.to_dict()
    return previous.merge(allowed_mentions).to_dict()


def _multipart_form(payload: Dict[str, Any], files: Sequence[File]) -> List[Dict[str, Any]]:
    form: List[Dict[str, Any]] = [{'name': 'payload_json', 'value': utils._to_json(payload)}]
    form.extend(
        {
            'name': f'files[{index}]',
            'value': file.fp,
            'filename': file.filename,
            'content_type': 'application/octet-stream',
        }
        for index, file in enumerate(files)
    )
    return form


def handle_message_parameters(
    content: Optional[str] = MISSING,
    *,
    tts: bool = False,
    flags: MessageFlags = MISSING,
    file: File = MISSING,
    files: Sequence[File] = MISSING,
    embeds: Sequence[Any] = MISSING,
    components: Sequence[Any] = MISSING,
    allowed_mentions: Optional[AllowedMentions] = MISSING,
    message_reference: Optional[message.MessageReference] = MISSING,
    stickers: Optional[SnowflakeList] = MISSING,
    previous_allowed_mentions: Optional[AllowedMentions] = None,
    mention_author: Optional[bool] = None,
    channel_payload: Dict[str, Any] = MISSING,
) -> MultipartParameters:
    """Builds the body of a message creation request.

    ``tts`` and ``allowed_mentions`` are always sent, other fields only
    when passed. With files the JSON body moves into a ``payload_json``
    form field. A ``channel_payload`` wraps the message for endpoints
    that create a thread together with its first message.

    Use the result as a context manager so the files are closed afterwards.

    Raises
    -------
    TypeError
        Both ``file`` and ``files`` were passed.
    ValueError
        More than 10 embeds.
    """
    if file is not MISSING:
        if files is not MISSING:
            raise TypeError('Cannot mix file and files keyword arguments.')
        files = [file]

    if embeds is not MISSING and len(embeds) > 10:
        raise ValueError('embeds has a maximum of 10 elements.')

    body: Dict[str, Any] = {'tts': tts}

    if content is not MISSING:
        body['content'] = None if content is None else str(content)
    if embeds is not MISSING:
        body['embeds'] = [_to_payload(embed) for embed in embeds]
    if components is not MISSING:
        body['components'] = [_to_payload(component) for component in components]
    if message_reference is not MISSING:
        body['message_reference'] = message_reference
    if stickers is not MISSING:
        body['sticker_ids'] = stickers or []
    if flags is not MISSING:
        body['flags'] = flags.value

    body['allowed_mentions'] = _resolve_allowed_mentions(allowed_mentions, previous_allowed_mentions)
    if mention_author is not None:
        body['allowed_mentions']['replied_user'] = mention_author

    if files:
        body['attachments'] = [f.to_dict(index) for index, f in enumerate(files)]

    payload: Dict[str, Any] = body if channel_payload is MISSING else {'message': body, **channel_payload}

    if not files:
        return MultipartParameters(payload=payload, multipart=[], files=None)
    return MultipartParameters(payload=None, multipart=_multipart_form(payload, files), files=files)


class Route:
    """One endpoint call: the method plus the path with its parameters filled in.

    String parameters are percent-encoded, ``/`` excepted.
    """

    BASE: ClassVar[str] = f'https://discord.com/api/v{API_VERSION}'

    def __init__(self, method: str, path: str, **parameters: Any) -> None:
        self.method: str = method
        self.path: str = path
        self.channel_id: Optional[Snowflake] = parameters.get('channel_id')

        quoted = {key: _uriquote(value) if isinstance(value, str) else value for key, value in parameters.items()}
        self.url: str = (self.BASE + path).format_map(quoted) if parameters else self.BASE + path

    def __repr__(self) -> str:
        return f'<Route method={self.method} url={self.url}>'

    @property
    def key(self) -> str:
        """:class:`str`: Method and unformatted path, identical for every call to the same endpoint."""
        return f'{self.method} {self.path}'


def _only(payload: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    allowed = set(keys)
    return {key: value for key, value in payload.items() if key in allowed}


class HTTPClient:
    """Sends requests to the REST API over a lazily created :class:`aiohttp.ClientSession`.

    Each request is made exactly once. A 429 raises :exc:`RateLimited`
    and retrying is left to the caller.
    """

    def __init__(
        self,
        connector: Optional[aiohttp.BaseConnector] = None,
        *,
        token: Optional[str] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[aiohttp.BasicAuth] = None,
        http_trace: Optional[aiohttp.TraceConfig] = None,
    ) -> None:
        self.connector: aiohttp.BaseConnector = connector or MISSING
        self.__session: aiohttp.ClientSession = MISSING
        self.token: Optional[str] = token
        self.proxy: Optional[str] = proxy
        self.proxy_auth: Optional[aiohttp.BasicAuth] = proxy_auth
        self.http_trace: Optional[aiohttp.TraceConfig] = http_trace
        self.user_agent: str = f'DiscordBot (https://github.com/guildcord/guildcord {__version__})'

    async def startup(self) -> None:
        if self.__session:
            return

        trace_configs = None if self.http_trace is None else [self.http_trace]
        self.__session = aiohttp.ClientSession(connector=self.connector, trace_configs=trace_configs)

    def _headers(self, *, reason: Optional[str], json: bool) -> Dict[str, str]:
        headers = {'User-Agent': self.user_agent}
        if self.token is not None:
            headers['Authorization'] = self.token
        if reason:
            headers['X-Audit-Log-Reason'] = _uriquote(reason, safe='/ ')
        if json:
            headers['Content-Type'] = 'application/json'
        return headers

    async def request(
        self,
        route: Route,
        *,
        files: Optional[Sequence[File]] = None,
        form: Optional[List[Dict[str, Any]]] = None,
        **kwargs: Any,
    ) -> Any:
        await self.startup()

        reason = kwargs.pop('reason', None)
        payload = kwargs.pop('json', None)
        kwargs['headers'] = self._headers(reason=reason, json=payload is not None)

        if payload is not None:
            kwargs['data'] = utils._to_json(payload)

        if self.proxy is not None:
            kwargs['proxy'] = self.proxy
        if self.proxy_auth is not None:
            kwargs['proxy_auth'] = self.proxy_auth

        for f in files or ():
            f.reset()

        if form:
            # the API expects files[0] literally, quoting would escape the brackets
            form_data = aiohttp.FormData(quote_fields=False)
            for field in form:
                form_data.add_field(**field)
            kwargs['data'] = form_data

        method, url = route.method, route.url
        async with self.__session.request(method, url, **kwargs) as response:
            _log.debug('%s %s with %s has returned %s.', method, url, kwargs.get('data'), response.status)
            data = await json_or_text(response)
            status = response.status

            if 200 <= status < 300:
                _log.debug('%s %s has received %s.', method, url, data)
                return data

            if status == 429 and not isinstance(data, str):
                retry_after: float = data.get('retry_after', 0.0)
                _log.warning('We are being rate limited. %s %s responded with 429 (retry after %.2fs).', method, url, retry_after)
                raise RateLimited(retry_after)

            # an HTML 429 is a Cloudflare ban rather than an API rate limit
            if status >= 500:
                raise DiscordServerError(response, data)
            raise _STATUS_ERRORS.get(status, HTTPException)(response, data)

    async def close(self) -> None:
        if self.__session:
            await self.__session.close()
            self.__session = MISSING

    def _send_params(self, route: Route, params: MultipartParameters, **kwargs: Any) -> Response[Any]:
        if params.files:
            return self.request(route, files=params.files, form=params.multipart, **kwargs)
        return self.request(route, json=params.payload, **kwargs)

    # messages

    def send_message(
        self,
        channel_id: Snowflake,
        *,
        params: MultipartParameters,
    ) -> Response[message.Message]:
        return self._send_params(Route('POST', '/channels/{channel_id}/messages', channel_id=channel_id), params)

    def send_typing(self, channel_id: Snowflake) -> Response[None]:
        return self.request(Route('POST', '/channels/{channel_id}/typing', channel_id=channel_id))

    def delete_message(
        self, channel_id: Snowflake, message_id: Snowflake, *, reason: Optional[str] = None
    ) -> Response[None]:
        route = Route('DELETE', '/channels/{channel_id}/messages/{message_id}', channel_id=channel_id, message_id=message_id)
        return self.request(route, reason=reason)

    def delete_messages(
        self, channel_id: Snowflake, message_ids: SnowflakeList, *, reason: Optional[str] = None
    ) -> Response[None]:
        route = Route('POST', '/channels/{channel_id}/messages/bulk-delete', channel_id=channel_id)
        return self.request(route, json={'messages': message_ids}, reason=reason)

    def get_message(self, channel_id: Snowflake, message_id: Snowflake) -> Response[message.Message]:
        route = Route('GET', '/channels/{channel_id}/messages/{message_id}', channel_id=channel_id, message_id=message_id)
        return self.request(route)

    def logs_from(
        self,
        channel_id: Snowflake,
        limit: int,
        before: Optional[Snowflake] = None,
        after: Optional[Snowflake] = None,
        around: Optional[Snowflake] = None,
    ) -> Response[List[message.Message]]:
        params: Dict[str, Any] = {'limit': limit}
        for key, value in (('before', before), ('after', after), ('around', around)):
            if value is not None:
                params[key] = value

        return self.request(Route('GET', '/channels/{channel_id}/messages', channel_id=channel_id), params=params)

    def pins_from(self, channel_id: Snowflake) -> Response[List[message.Message]]:
        return self.request(Route('GET', '/channels/{channel_id}/pins', channel_id=channel_id))

    # channels

    def get_channel(self, channel_id: Snowflake) -> Response[channel.Channel]:
        return self.request(Route('GET', '/channels/{channel_id}', channel_id=channel_id))

    def edit_channel(
        self,
        channel_id: Snowflake,
        *,
        reason: Optional[str] = None,
        **options: Any,
    ) -> Response[channel.Channel]:
        payload = {key: value for key, value in options.items() if key in _EDITABLE_CHANNEL_FIELDS}
        dropped = options.keys() - payload.keys()
        if dropped:
            _log.debug('Dropping unknown channel fields %s for channel ID %s.', sorted(dropped), channel_id)
        return self.request(Route('PATCH', '/channels/{channel_id}', channel_id=channel_id), json=payload, reason=reason)

    def delete_channel(self, channel_id: Snowflake, *, reason: Optional[str] = None) -> Response[channel.Channel]:
        return self.request(Route('DELETE', '/channels/{channel_id}', channel_id=channel_id), reason=reason)

    def edit_channel_permissions(
        self,
        channel_id: Snowflake,
        target: Snowflake,
        allow: str,
        deny: str,
        type: channel.OverwriteType,
        *,
        reason: Optional[str] = None,
    ) -> Response[None]:
        route = Route('PUT', '/channels/{channel_id}/permissions/{target}', channel_id=channel_id, target=target)
        return self.request(route, json={'id': target, 'allow': allow, 'deny': deny, 'type': type}, reason=reason)

    def delete_channel_permissions(
        self, channel_id: Snowflake, target: Snowflake, *, reason: Optional[str] = None
    ) -> Response[None]:
        route = Route('DELETE', '/channels/{channel_id}/permissions/{target}', channel_id=channel_id, target=target)
        return self.request(route, reason=reason)

    def follow_webhook(
        self,
        channel_id: Snowflake,
        webhook_channel_id: Snowflake,
        reason: Optional[str] = None,
    ) -> Response[channel.FollowedChannel]:
        route = Route('POST', '/channels/{channel_id}/followers', channel_id=channel_id)
        return self.request(route, json={'webhook_channel_id': str(webhook_channel_id)}, reason=reason)

    # threads

    def start_thread_without_message(
        self,
        channel_id: Snowflake,
        *,
        name: str,
        auto_archive_duration: threads.ThreadArchiveDuration,
        type: threads.ThreadType,
        invitable: bool = True,
        rate_limit_per_user: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> Response[threads.Thread]:
        payload: Dict[str, Any] = {
            'name': name,
            'type': type,
            'invitable': invitable,
            'auto_archive_duration': auto_archive_duration,
        }
        if rate_limit_per_user is not None:
            payload['rate_limit_per_user'] = rate_limit_per_user

        return self.request(Route('POST', '/channels/{channel_id}/threads', channel_id=channel_id), json=payload, reason=reason)

    def start_thread_in_forum(
        self,
        channel_id: Snowflake,
        *,
        params: MultipartParameters,
        reason: Optional[str] = None,
    ) -> Response[Dict[str, Any]]:
        route = Route('POST', '/channels/{channel_id}/threads', channel_id=channel_id)
        return self._send_params(route, params, params={'use_nested_fields': 1}, reason=reason)

    def _thread_member_route(self, method: str, channel_id: Snowflake, user_id: Optional[Snowflake] = None) -> Route:
        # no user_id targets the current user
        if user_id is None:
            return Route(method, '/channels/{channel_id}/thread-members/@me', channel_id=channel_id)
        return Route(method, '/channels/{channel_id}/thread-members/{user_id}', channel_id=channel_id, user_id=user_id)

    def join_thread(self, channel_id: Snowflake) -> Response[None]:
        return self.request(self._thread_member_route('PUT', channel_id))

    def add_user_to_thread(self, channel_id: Snowflake, user_id: Snowflake) -> Response[None]:
        return self.request(self._thread_member_route('PUT', channel_id, user_id))

    def leave_thread(self, channel_id: Snowflake) -> Response[None]:
        return self.request(self._thread_member_route('DELETE', channel_id))

    def remove_user_from_thread(self, channel_id: Snowflake, user_id: Snowflake) -> Response[None]:
        return self.request(self._thread_member_route('DELETE', channel_id, user_id))

    def get_thread_member(self, channel_id: Snowflake, user_id: Snowflake) -> Response[threads.ThreadMember]:
        return self.request(self._thread_member_route('GET', channel_id, user_id))

    def get_thread_members(self, channel_id: Snowflake) -> Response[List[threads.ThreadMember]]:
        return self.request(Route('GET', '/channels/{channel_id}/thread-members', channel_id=channel_id))

    def get_archived_threads(
        self,
        channel_id: Snowflake,
        *,
        before: Optional[Union[str, Snowflake]] = None,
        limit: int = 50,
        joined: bool = False,
        private: bool = False,
    ) -> Response[threads.ThreadPaginationPayload]:
        # joined implies private and takes precedence
        if joined:
            path = '/channels/{channel_id}/users/@me/threads/archived/private'
        else:
            path = '/channels/{channel_id}/threads/archived/' + ('private' if private else 'public')

        params: Dict[str, Any] = {'limit': limit}
        if before is not None:
            params['before'] = before

        return self.request(Route('GET', path, channel_id=channel_id), params=params)

    # webhooks

    def create_webhook(
        self,
        channel_id: Snowflake,
        *,
        name: str,
        avatar: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Response[webhook.Webhook]:
        payload: Dict[str, Any] = {'name': name}
        if avatar is not None:
            payload['avatar'] = avatar

        route = Route('POST', '/channels/{channel_id}/webhooks', channel_id=channel_id)
        return self.request(route, json=payload, reason=reason)

    def channel_webhooks(self, channel_id: Snowflake) -> Response[List[webhook.Webhook]]:
        return self.request(Route('GET', '/channels/{channel_id}/webhooks', channel_id=channel_id))

    # invites

    def create_invite(
        self,
        channel_id: Snowflake,
        *,
        reason: Optional[str] = None,
        max_age: int = 0,
        max_uses: int = 0,
        temporary: bool = False,
        unique: bool = True,
        target_type: Optional[invite.InviteTargetType] = None,
        target_user_id: Optional[Snowflake] = None,
        target_application_id: Optional[Snowflake] = None,
    ) -> Response[invite.Invite]:
        payload: Dict[str, Any] = {
            'max_age': max_age,
            'max_uses': max_uses,
            'temporary': temporary,
            'unique': unique,
        }

        # the target fields are left out entirely unless set
        if target_type:
            payload['target_type'] = target_type
        if target_user_id:
            payload['target_user_id'] = target_user_id
        if target_application_id:
            payload['target_application_id'] = str(target_application_id)

        route = Route('POST', '/channels/{channel_id}/invites', channel_id=channel_id)
        return self.request(route, json=payload, reason=reason)

    def invites_from_channel(self, channel_id: Snowflake) -> Response[List[invite.Invite]]:
        return self.request(Route('GET', '/channels/{channel_id}/invites', channel_id=channel_id))

    def delete_invite(self, invite_id: str, *, reason: Optional[str] = None) -> Response[invite.Invite]:
        return self.request(Route('DELETE', '/invites/{invite_id}', invite_id=invite_id), reason=reason)

    # stage instances

    def get_stage_instance(self, channel_id: Snowflake) -> Response[channel.StageInstance]:
        return self.request(Route('GET', '/stage-instances/{channel_id}', channel_id=channel_id))

    def create_stage_instance(self, *, reason: Optional[str], **payload: Any) -> Response[channel.StageInstance]:
        payload = _only(payload, ('channel_id', 'topic', 'privacy_level', 'send_start_notification'))
        return self.request(Route('POST', '/stage-instances'), json=payload, reason=reason)

    def edit_stage_instance(
        self, channel_id: Snowflake, *, reason: Optional[str] = None, **payload: Any
    ) -> Response[channel.StageInstance]:
        route = Route('PATCH', '/stage-instances/{channel_id}', channel_id=channel_id)
        return self.request(route, json=_only(payload, ('topic', 'privacy_level')), reason=reason)

    def delete_stage_instance(self, channel_id: Snowflake, *, reason: Optional[str] = None) -> Response[None]:
        return self.request(Route('DELETE', '/stage-instances/{channel_id}', channel_id=channel_id), reason=reason)
