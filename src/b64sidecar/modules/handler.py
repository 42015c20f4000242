"""
Request/response handler for the sidecar exchange.

One invocation reads a single JSON request from stdin, runs the requested
action and writes a single JSON response line to stdout. Failures the caller
can cause (bad JSON, unknown action, bad base64) become error responses;
anything else propagates.
"""

import json
import logging
from typing import IO, Union

from pydantic import ValidationError

from .actions import Action, run_action
from .constants import EXIT_FAILURE, EXIT_OK, TEXT_ENCODING
from .data_types import SidecarRequest, SidecarResponse
from .errors import ParseError, SidecarError

logger = logging.getLogger(__name__)

# Whitespace allowed before a JSON value
_JSON_WHITESPACE = " \t\n\r"


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "request"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_request(raw: str) -> SidecarRequest:
    """
    Parse the text read from stdin into a request.

    Only the first JSON value is consumed; anything after it is ignored.
    Missing fields default to empty strings.

    Args:
        raw: Entire contents of stdin

    Returns:
        The parsed request

    Raises:
        ParseError: If the text is not JSON or not a request-shaped object
    """
    text = raw.lstrip(_JSON_WHITESPACE)
    try:
        payload, end = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as e:
        raise ParseError(str(e)) from e
    except RecursionError as e:
        raise ParseError("exceeded max depth") from e

    trailing = text[end:].strip(_JSON_WHITESPACE)
    if trailing:
        logger.debug(f"Ignoring {len(trailing)} characters after the request")

    if not isinstance(payload, dict):
        raise ParseError(
            f"expected a JSON object, got {type(payload).__name__}"
        )

    try:
        return SidecarRequest.model_validate(payload)
    except ValidationError as e:
        raise ParseError(_format_validation_error(e)) from e


def dispatch(request: SidecarRequest) -> str:
    """Run the action a request names and return its result text."""
    action = Action.from_string(request.action)
    logger.debug(f"Dispatching {action.value} on {len(request.data)} characters")
    return run_action(action, request.data)


def respond(request: SidecarRequest) -> SidecarResponse:
    """Run a parsed request and wrap the outcome in a response."""
    try:
        result = dispatch(request)
    except SidecarError as e:
        logger.info(f"Request failed: {e.message}")
        return SidecarResponse.fail(e.message)
    return SidecarResponse.ok(result)


def handle(raw: str) -> SidecarResponse:
    """Turn the raw request text into the response to emit."""
    try:
        request = parse_request(raw)
    except ParseError as e:
        logger.info(f"Request failed: {e.message}")
        return SidecarResponse.fail(e.message)
    return respond(request)


def emit_response(response: SidecarResponse, stream: IO[str]) -> None:
    """Write the response as one newline-terminated JSON line."""
    stream.write(response.to_json() + "\n")
    stream.flush()


def read_input(stream: Union[IO[str], IO[bytes]]) -> str:
    """Read a stream to exhaustion, decoding bytes as UTF-8 with replacement."""
    content = stream.read()
    if isinstance(content, bytes):
        return content.decode(TEXT_ENCODING, errors="replace")
    return content


def exit_code_for(response: SidecarResponse, strict_exit_code: bool = False) -> int:
    """Exit code for a response. Failures only exit non-zero in strict mode."""
    if strict_exit_code and not response.success:
        return EXIT_FAILURE
    return EXIT_OK


def run(
    stdin: Union[IO[str], IO[bytes]],
    stdout: IO[str],
    strict_exit_code: bool = False,
) -> int:
    """
    Perform one complete sidecar exchange.

    Args:
        stdin: Stream holding the request
        stdout: Stream the response line is written to
        strict_exit_code: Map error responses to a non-zero exit code

    Returns:
        Process exit code
    """
    response = handle(read_input(stdin))
    emit_response(response, stdout)
    return exit_code_for(response, strict_exit_code)
