"""
App configuration for the License Authority.
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class LicenseAuthorityConfig(AppConfig):
    """App configuration for LicenseAuthority."""

    name = "LicenseAuthority"
    verbose_name = "License Authority"

    def ready(self):
        """Called when Django starts."""
        # Skip for management commands that never serve requests
        if len(sys.argv) > 1 and sys.argv[1] in [
            "collectstatic",
            "shell",
            "test",
            "check",
            "spectacular",
        ]:
            return

        # Django's autoreloader runs ready() in both parent and child
        if os.environ.get("RUN_MAIN") == "false":
            return

        if getattr(self, "_initialized", False):
            return

        self.register_event_handlers()
        self.setup_observability()
        self._initialized = True

    def setup_observability(self):
        """Setup tracing and metrics exporters."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning(f"Failed to setup OpenTelemetry: {e}")

    def register_event_handlers(self):
        """Register event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
