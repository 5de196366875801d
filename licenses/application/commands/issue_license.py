"""
IssueLicenseCommand.

Command to issue a new signed license.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass
class IssueLicenseCommand:
    """Command to issue a license to a customer."""

    customer: str
    modules: List[str]
    expires_at: datetime
    timeout_seconds: Optional[float] = None
