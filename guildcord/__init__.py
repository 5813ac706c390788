"""
Guild Channel Model
~~~~~~~~~~~~~~~~~~~

Typed guild channels, threads and voice states over the Discord HTTP API.

:copyright: (c) 2015-present Rapptz
:license: MIT, see LICENSE for more details.

"""

__title__ = 'guildcord'
__author__ = 'Rapptz'
__license__ = 'MIT'
__copyright__ = 'Copyright 2015-present Rapptz'
__version__ = '0.1.0'

import logging
from typing import NamedTuple, Literal

from .client import *
from .partial_emoji import *
from .channel import *
from .guild import *
from .flags import *
from .member import *
from .message import *
from .errors import *
from .permissions import *
from .file import *
from .invite import *
from .object import *
from . import (
    utils as utils,
    abc as abc,
)
from .enums import *
from .mentions import *
from .webhook import *
from .stage_instance import *
from .threads import *
from .voice_state import *
from .iterators import *
from .context_managers import *


class VersionInfo(NamedTuple):
    major: int
    minor: int
    micro: int
    releaselevel: Literal['alpha', 'beta', 'candidate', 'final']
    serial: int


version_info: VersionInfo = VersionInfo(major=0, minor=1, micro=0, releaselevel='final', serial=0)

logging.getLogger(__name__).addHandler(logging.NullHandler())

del logging, NamedTuple, Literal, VersionInfo
