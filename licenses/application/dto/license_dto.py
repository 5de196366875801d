"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from licenses.domain.license import License


@dataclass
class LicenseDTO:
    """DTO for license information."""

    license_id: str
    customer: str
    modules: List[str]
    issued_at: datetime
    expires_at: datetime
    renewed_from: Optional[str]
    signature: Optional[str]

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """Build DTO from a License entity."""
        return cls(
            license_id=license.license_id,
            customer=license.customer,
            modules=list(license.modules),
            issued_at=license.issued_at,
            expires_at=license.expires_at,
            renewed_from=license.renewed_from,
            signature=license.signature,
        )


@dataclass
class LicenseValidationDTO:
    """DTO for license validation response."""

    valid: bool
    signature_valid: bool
    expired: bool
    license: LicenseDTO
