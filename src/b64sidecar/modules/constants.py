"""
Central constants for b64sidecar.

Shared names, default values and environment variable names used across the
package.
"""

APP_NAME = "b64sidecar"

# Environment variables are read with this prefix, e.g. B64SIDECAR_LOG_LEVEL
ENV_PREFIX = "B64SIDECAR_"

# Action names accepted in the request "action" field
ACTION_BASE64_ENCODE = "base64_encode"
ACTION_BASE64_DECODE = "base64_decode"

ACTION_DESCRIPTIONS = {
    ACTION_BASE64_ENCODE: "Encode UTF-8 text as standard padded base64",
    ACTION_BASE64_DECODE: "Decode standard padded base64 back to text",
}

# Text encoding used for both directions
TEXT_ENCODING = "utf-8"

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1  # only used when strict_exit_code is enabled

# Host-side client
DEFAULT_TIMEOUT_SECONDS = 30.0

# Logging
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
