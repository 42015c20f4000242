"""
Logging setup for b64sidecar.

The response is the only thing the sidecar writes by default, so handlers are
opt-in: a file handler when ``log_file`` is configured and a rich stderr
handler when running verbose. Without either the package logger only has a
NullHandler.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config_manager import SidecarConfig
from .constants import APP_NAME

_HANDLER_MARK = "_b64sidecar_handler"


def configure_logging(
    config: SidecarConfig, verbose: bool = False, console: Optional[Console] = None
) -> logging.Logger:
    """
    Attach handlers to the package logger according to the configuration.

    Calling this again replaces the handlers it installed previously.

    Args:
        config: Effective configuration
        verbose: Also log to stderr through rich, at DEBUG level
        console: Console for the rich handler (defaults to a stderr console)

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(APP_NAME)
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            package_logger.removeHandler(handler)
            handler.close()

    level = logging.DEBUG if verbose else logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    package_logger.setLevel(level)
    package_logger.propagate = False

    handlers = []
    file_error = None
    if config.log_file:
        try:
            formatter = logging.Formatter(config.log_format)
            file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            file_error = e
        else:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
    if verbose:
        handlers.append(
            RichHandler(
                console=console or Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
        )
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        setattr(handler, _HANDLER_MARK, True)
        package_logger.addHandler(handler)

    if file_error is not None:
        package_logger.warning(f"Cannot open log file {config.log_file}: {file_error}")

    return package_logger
