"""
License domain entity.

This is the core domain entity representing a signed license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from core.domain.exceptions import InvalidRequestError
from licenses.domain.canonical import format_timestamp


def new_license_id() -> str:
    """Generate a collision-resistant license identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any, field_name: str) -> datetime:
    """
    Parse an ISO-8601 timestamp or datetime into an aware UTC datetime.

    Naive values are interpreted as UTC.

    Raises:
        InvalidRequestError: If the value is not a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidRequestError(f"{field_name} is not a valid timestamp") from e
    else:
        raise InvalidRequestError(f"{field_name} is required")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_modules(modules: Any) -> Tuple[str, ...]:
    """
    Validate and normalize a module list.

    Raises:
        InvalidRequestError: If modules is empty, a bare string, or holds
            anything other than non-empty strings
    """
    if not modules or isinstance(modules, (str, bytes, Mapping)):
        raise InvalidRequestError("modules must be a non-empty list")
    if not isinstance(modules, Iterable):
        raise InvalidRequestError("modules must be a non-empty list")
    normalized = tuple(modules)
    for module in normalized:
        if not isinstance(module, str) or not module.strip():
            raise InvalidRequestError("modules must contain non-empty strings")
    return normalized


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    A license is immutable: renewing produces a new License that points back
    at its predecessor through ``renewed_from``. ``signature`` covers every
    other field.
    """

    license_id: str
    customer: str
    modules: Tuple[str, ...]
    issued_at: datetime
    expires_at: datetime
    renewed_from: Optional[str] = None
    signature: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize the license entity."""
        if not isinstance(self.license_id, str) or not self.license_id.strip():
            raise InvalidRequestError("license_id is required")
        if not isinstance(self.customer, str) or not self.customer.strip():
            raise InvalidRequestError("customer is required")
        if self.renewed_from is not None and not isinstance(self.renewed_from, str):
            raise InvalidRequestError("renewed_from must be a string")
        if self.signature is not None and not isinstance(self.signature, str):
            raise InvalidRequestError("signature must be a string")

        object.__setattr__(self, "modules", normalize_modules(self.modules))
        object.__setattr__(self, "issued_at", parse_timestamp(self.issued_at, "issued_at"))
        object.__setattr__(self, "expires_at", parse_timestamp(self.expires_at, "expires_at"))

    @classmethod
    def create(
        cls,
        customer: str,
        modules: Iterable[str],
        expires_at: datetime,
        issued_at: Optional[datetime] = None,
        license_id: Optional[str] = None,
    ) -> "License":
        """
        Create a new unsigned License draft.

        Args:
            customer: License holder
            modules: Entitlements granted by the license
            expires_at: Expiration datetime
            issued_at: Issue datetime (defaults to now)
            license_id: Identifier (generated if not provided)

        Returns:
            Unsigned License entity
        """
        return cls(
            license_id=license_id or new_license_id(),
            customer=customer,
            modules=modules,
            issued_at=issued_at or utc_now(),
            expires_at=expires_at,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "License":
        """
        Build a License from its wire representation.

        Raises:
            InvalidRequestError: If the mapping is not a well-formed license
        """
        if not isinstance(data, Mapping):
            raise InvalidRequestError("license must be an object")
        return cls(
            license_id=data.get("license_id"),
            customer=data.get("customer"),
            modules=data.get("modules"),
            issued_at=data.get("issued_at"),
            expires_at=data.get("expires_at"),
            renewed_from=data.get("renewed_from"),
            signature=data.get("signature"),
        )

    @property
    def is_signed(self) -> bool:
        """Whether the license carries a signature."""
        return bool(self.signature)

    def unsigned_fields(self) -> Dict[str, Any]:
        """Return every field covered by the signature."""
        fields = {
            "license_id": self.license_id,
            "customer": self.customer,
            "modules": list(self.modules),
            "issued_at": self.issued_at,
            "expires_at": self.expires_at,
        }
        if self.renewed_from is not None:
            fields["renewed_from"] = self.renewed_from
        return fields

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation of the license."""
        data = self.unsigned_fields()
        data["issued_at"] = format_timestamp(self.issued_at)
        data["expires_at"] = format_timestamp(self.expires_at)
        if self.signature is not None:
            data["signature"] = self.signature
        return data

    def with_signature(self, signature: str) -> "License":
        """Return a copy of this license carrying ``signature``."""
        return replace(self, signature=signature)

    def renewal_draft(
        self,
        new_expires_at: datetime,
        issued_at: Optional[datetime] = None,
        license_id: Optional[str] = None,
    ) -> "License":
        """
        Create the unsigned successor of this license.

        The successor keeps customer and modules, gets a fresh identifier and
        issue time, and records this license as its predecessor.

        Args:
            new_expires_at: Expiration of the successor
            issued_at: Issue datetime of the successor (defaults to now)
            license_id: Identifier of the successor (generated if not provided)

        Returns:
            Unsigned License entity
        """
        return License(
            license_id=license_id or new_license_id(),
            customer=self.customer,
            modules=self.modules,
            issued_at=issued_at or utc_now(),
            expires_at=new_expires_at,
            renewed_from=self.license_id,
        )

    def is_expired(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check if the license has expired.

        A license expiring exactly at ``current_time`` is not yet expired.

        Args:
            current_time: Current time (defaults to now)
        """
        check_time = current_time or utc_now()
        return check_time > self.expires_at
