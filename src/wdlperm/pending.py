""" Pending permission requests. A player interface fills these in, then asks
    the session to send them all as one WDL|REQUEST message.

    Sending does not clear anything; the caller clears the pending requests
    once it is satisfied the message actually went out.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from .protocol import fields
from .protocol.message import PermissionRequest, Rectangle


_INTEGER = re.compile(r"[+-]?[0-9]+")

_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


def is_valid_request(key: Optional[str], value: Optional[str]) -> bool:
    """ Return True if *value* is acceptable for the request field *key*.
        Boolean fields take exactly "true" or "false"; integer fields take
        any text that parses as a signed 32-bit integer. Unknown fields are
        never valid.
    """

    if key is None or value is None:
        return False

    if key in fields.BOOLEAN_REQUEST_FIELDS:
        return value == "true" or value == "false"

    if key in fields.INTEGER_REQUEST_FIELDS:
        if _INTEGER.fullmatch(value) is None:
            return False
        return _INT_MIN <= int(value) <= _INT_MAX

    return False


class PendingRequests:
    """ Key/value permission requests plus requested override rectangles.
    """

    is_valid = staticmethod(is_valid_request)

    def __init__(self):
        self._requests: Dict[str, str] = {}
        self._ranges: List[Rectangle] = []

    def __repr__(self):
        return "PendingRequests(%r, %r)" % (self._requests, self._ranges)

    def add(self, key: str, value: str) -> bool:
        """ Record a request, replacing any earlier value for *key*. Invalid
            requests are ignored; the return value says whether it was kept.
        """

        if not is_valid_request(key, value):
            return False

        self._requests[key] = value
        return True

    def remove(self, key: str) -> None:
        self._requests.pop(key, None)

    def get(self, key: str) -> Optional[str]:
        return self._requests.get(key)

    def requests(self) -> Dict[str, str]:
        return dict(self._requests)

    def add_range(self, rectangle: Rectangle) -> None:
        self._ranges.append(rectangle)

    def ranges(self) -> List[Rectangle]:
        return list(self._ranges)

    def is_empty(self) -> bool:
        return not self._requests and not self._ranges

    def clear(self) -> None:
        self._requests = {}
        self._ranges = []

    def build(self, reason: str) -> Optional[PermissionRequest]:
        """ Return the outbound message for everything pending, or None if
            nothing is pending.
        """

        if self.is_empty():
            return None

        return PermissionRequest(reason, dict(self._requests), tuple(self._ranges))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
