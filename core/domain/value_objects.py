"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True, eq=False)
class LicenseValidation(ValueObject):
    """Outcome of validating a license."""

    signature_valid: bool
    expired: bool

    @property
    def valid(self) -> bool:
        """A license is valid when authentic and not expired."""
        return self.signature_valid and not self.expired

    def to_dict(self) -> Dict[str, Any]:
        """Return the outcome as a plain dictionary."""
        return {
            "valid": self.valid,
            "signature_valid": self.signature_valid,
            "expired": self.expired,
        }
