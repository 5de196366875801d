"""
Test settings for the License Authority.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

# Sign with an in-process key instead of Vault
LICENSE_SIGNER = {
    "BACKEND": "memory",
    "KEY_NAME": "license-signing-key",
    "TIMEOUT_SECONDS": 2.0,
}

# Disable logging during tests
LOGGING_CONFIG = None
