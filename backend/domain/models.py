"""Framework-agnostic domain models for the license key service.

KeyRecord is what the lifecycle logic works on. The persisted JSON shape
(camelCase, dashboard-owned) stays in the store, with mappers at the
boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

# durationDays at or above this marks a lifetime key
LIFETIME_DAYS = 10_000_000


class KeyStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass
class KeyRecord:
    """One product key entry from the key store."""
    product_key: str
    auth_key: Optional[str] = None
    status: Optional[str] = None
    activated_at: Any = None
    duration_days: int = 0
    expires_at: int = 0
    last_seen: Optional[int] = None
    last_ip: Optional[str] = None
    discord: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == KeyStatus.ACTIVE.value

    @property
    def is_lifetime(self) -> bool:
        return self.duration_days >= LIFETIME_DAYS


@dataclass
class AuthResult:
    """Successful authentication outcome."""
    product_key: str
    expires_display: str
    duration_days: int
    discord: Optional[str] = None


@dataclass
class HeartbeatResult:
    product_key: str
    extended: bool
    extended_by_hours: int
    expires_at: Optional[int] = None


@dataclass
class KeyCounts:
    total: int = 0
    active: int = 0
