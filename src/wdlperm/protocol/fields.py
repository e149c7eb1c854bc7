"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling. Channel
names and localisation keys are shared with deployed server extensions and
language packs; they must not change.
"""

# Channel names

INIT = "WDL|INIT"
CONTROL = "WDL|CONTROL"
REQUEST = "WDL|REQUEST"

REGISTER = "REGISTER"
UNREGISTER = "UNREGISTER"

SUPPORTED_CHANNELS = (INIT, CONTROL, REQUEST)

# Control message kinds, the leading int32 of every WDL|CONTROL payload.

UNKNOWN_FUNCTIONS = 0
GENERAL_PERMISSIONS = 1
ENTITY_RANGES = 2
REQUEST_PERMISSIONS = 3
OVERRIDE_SYNC = 4
OVERRIDE_GROUP_UPDATE = 5
OVERRIDE_TAG_REMOVAL = 6
OVERRIDE_TAG_REPLACE = 7

KNOWN_KINDS = frozenset(range(UNKNOWN_FUNCTIONS, OVERRIDE_TAG_REPLACE + 1))

# Permission request schema

BOOLEAN_REQUEST_FIELDS = (
    "downloadInGeneral",
    "cacheChunks",
    "saveEntities",
    "saveTileEntities",
    "saveContainers",
    "getEntityRanges",
)

INTEGER_REQUEST_FIELDS = ("saveRadius",)

# Notification message types

PLUGIN_CHANNEL_MESSAGE = "PLUGIN_CHANNEL_MESSAGE"
ERROR = "ERROR"

# Localisation keys

MSG_INIT = "wdl.messages.permissions.init"
MSG_PACKET = "wdl.messages.permissions.packet%d"
MSG_PACKET5_SET = "wdl.messages.permissions.packet5.set"
MSG_PACKET5_ADDED = "wdl.messages.permissions.packet5.added"
MSG_UNKNOWN_PACKET = "wdl.messages.permissions.unknownPacket"
MSG_FORBIDDEN = "wdl.messages.generalError.forbidden"
MSG_NO_UTF8 = "wdl.messages.generalError.noUTF8"

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
