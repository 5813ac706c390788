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


from functools import reduce
from operator import or_

import pytest

from guildcord.flags import ChannelFlags, MessageFlags
from guildcord.permissions import PermissionOverwrite, Permissions


def test_permissions_all():
    assert Permissions.all().value == reduce(or_, Permissions.VALID_FLAGS.values())


def test_permissions_alias_shares_bit():
    perms = Permissions(manage_permissions=True)

    assert perms.manage_roles
    assert perms.value == 1 << 28
    assert 'manage_permissions' not in dict(perms)


def test_permissions_rejects_unknown_names():
    with pytest.raises(TypeError):
        Permissions(administrator_but_cooler=True)

    with pytest.raises(TypeError):
        Permissions('8')  # type: ignore


def test_permissions_subset_superset():
    small = Permissions(send_messages=True)
    big = Permissions(send_messages=True, view_channel=True)

    assert small <= big
    assert big >= small
    assert not big <= small

    with pytest.raises(TypeError):
        small <= 3  # type: ignore


def test_handle_overwrite_clears_deny_then_sets_allow():
    perms = Permissions(view_channel=True, send_messages=True)
    perms.handle_overwrite(allow=Permissions(send_messages=True).value, deny=Permissions(view_channel=True, send_messages=True).value)

    assert not perms.view_channel
    assert perms.send_messages


def test_overwrite_pair_roundtrip():
    overwrite = PermissionOverwrite(send_messages=True, attach_files=False)
    allow, deny = overwrite.pair()

    assert allow == Permissions(send_messages=True)
    assert deny == Permissions(attach_files=True)
    assert PermissionOverwrite.from_pair(allow, deny) == overwrite


def test_overwrite_values():
    overwrite = PermissionOverwrite()
    assert overwrite.is_empty()

    overwrite.update(connect=True, not_a_permission=True)
    assert overwrite.connect is True
    assert not overwrite.is_empty()

    overwrite.connect = None
    assert overwrite.is_empty()

    with pytest.raises(ValueError):
        PermissionOverwrite(not_a_permission=True)

    with pytest.raises(TypeError):
        PermissionOverwrite(connect='yes')  # type: ignore


def test_message_and_channel_flags():
    flags = MessageFlags(suppress_notifications=True)
    assert flags.value == 4096

    channel_flags = ChannelFlags._from_value(2 | 16)
    assert channel_flags.pinned
    assert channel_flags.require_tag
    assert ChannelFlags(pinned=True) | ChannelFlags(require_tag=True) == channel_flags
