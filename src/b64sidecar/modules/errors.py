"""
Error types raised while handling a sidecar request.

Every error carries the human-readable message that ends up in the
``error`` field of the response.
"""


class SidecarError(Exception):
    """Base class for failures that are reported back in the response body."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(SidecarError):
    """The request on stdin was not valid JSON or had the wrong shape."""

    def __init__(self, detail: str):
        super().__init__(f"failed to parse request: {detail}")
        self.detail = detail


class UnknownActionError(SidecarError):
    """The request named an action the sidecar does not implement."""

    def __init__(self, action: str):
        super().__init__(f"unknown action: {action}")
        self.action = action


class DecodeError(SidecarError):
    """The payload of a decode request was not valid base64."""

    def __init__(self, detail: str):
        super().__init__(f"illegal base64 data: {detail}")
        self.detail = detail
