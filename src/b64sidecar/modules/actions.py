"""
The actions a sidecar request can ask for.

Actions form a closed set: ``Action.from_string`` is the only way a request's
action name becomes something dispatchable, and ``ACTION_HANDLERS`` maps every
member to the function that implements it.
"""

import base64
import binascii
import logging
import re
from enum import Enum
from typing import Callable, Dict

from .constants import (ACTION_BASE64_DECODE, ACTION_BASE64_ENCODE,
                        ACTION_DESCRIPTIONS, TEXT_ENCODING)
from .errors import DecodeError, UnknownActionError

logger = logging.getLogger(__name__)

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


class Action(Enum):
    """Supported request actions."""

    BASE64_ENCODE = ACTION_BASE64_ENCODE
    BASE64_DECODE = ACTION_BASE64_DECODE

    @classmethod
    def from_string(cls, value: str) -> "Action":
        """Resolve an action name, raising UnknownActionError if it is not supported."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownActionError(value) from None

    @property
    def description(self) -> str:
        return ACTION_DESCRIPTIONS[self.value]


def base64_encode(text: str) -> str:
    """
    Encode the UTF-8 bytes of ``text`` as standard padded base64.

    Unpaired surrogates, which valid JSON can carry as ``\\ud800`` escapes,
    are encoded as U+FFFD.
    """
    text = _LONE_SURROGATE.sub("\ufffd", text)
    return base64.b64encode(text.encode(TEXT_ENCODING)).decode("ascii")


def base64_decode(text: str) -> str:
    """
    Decode standard padded base64 back to text.

    Line breaks are ignored. Any other character outside the standard
    alphabet, a bad length or bad padding raises DecodeError. Bytes that are
    not valid UTF-8 come back as U+FFFD replacement characters.

    Args:
        text: Base64 text

    Returns:
        The decoded text
    """
    cleaned = text.replace("\r", "").replace("\n", "")
    if len(cleaned) % 4 != 0:
        raise DecodeError(f"length {len(cleaned)} is not a multiple of 4")
    try:
        raw = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        # ValueError covers non-ASCII input
        raise DecodeError(str(e)) from e

    try:
        return raw.decode(TEXT_ENCODING)
    except UnicodeDecodeError:
        logger.debug("Decoded payload is not valid UTF-8, using replacement characters")
        return raw.decode(TEXT_ENCODING, errors="replace")


ACTION_HANDLERS: Dict[Action, Callable[[str], str]] = {
    Action.BASE64_ENCODE: base64_encode,
    Action.BASE64_DECODE: base64_decode,
}


def run_action(action: Action, data: str) -> str:
    """Run a resolved action on its payload."""
    return ACTION_HANDLERS[action](data)
