"""
WSGI config for the License Authority project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseAuthority.settings.prod")

application = get_wsgi_application()
