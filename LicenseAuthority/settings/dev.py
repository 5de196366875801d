"""
Development settings for the License Authority.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Local Vault dev server uses a fixed root token; set SIGNER_BACKEND=memory
# to run without Vault at all.
LICENSE_SIGNER["TOKEN"] = os.environ.get("VAULT_TOKEN", "myroot")  # noqa: F405

LOGGING = get_logging_config("development")  # noqa: F405
