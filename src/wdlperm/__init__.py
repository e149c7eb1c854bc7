""" Python implementation of the WDL permission channel protocol, as spoken
    by a world-archiving client. This includes the binary codec for the
    plugin channel messages, the permission state they govern, the override
    region index, and the permission request queue.
"""

__version__ = '1.0.0'

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import protocol
from . import config
home = config.directory

from . import regions
from . import permissions
from . import pending
from . import transport

# Primary public-facing interfaces.

from .protocol import Rectangle
from .regions import RegionIndex
from .permissions import Permissions
from .pending import PendingRequests, is_valid_request
from .session import Session

from . import begin
connect = begin.connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
