"""
ValidateLicenseQuery.

Query to check a license's signature and expiration.
"""
from dataclasses import dataclass
from typing import Optional

from licenses.domain.license import License


@dataclass
class ValidateLicenseQuery:
    """Query to validate a license supplied by the caller."""

    license: License
    timeout_seconds: Optional[float] = None
