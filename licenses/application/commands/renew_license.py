"""
RenewLicenseCommand.

Command to renew a license into a new, re-signed license.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from licenses.domain.license import License


@dataclass
class RenewLicenseCommand:
    """Command to renew a license with a new expiration date."""

    license: License
    new_expires_at: datetime
    timeout_seconds: Optional[float] = None
