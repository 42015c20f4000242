"""b64sidecar - a one-shot JSON over stdio base64 sidecar."""

import logging

# Version information
# This version should match the version in setup.py
__version__ = "1.0.0"

# Silent unless the CLI or the embedding application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())
