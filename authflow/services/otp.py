"""
One-time codes for email verification and password reset.

Codes are six ASCII digits drawn uniformly from [100000, 999999]. Expiry is
an absolute timestamp in milliseconds since the epoch.
"""

import secrets
import time
from datetime import timedelta
from typing import Optional

OTP_MIN = 100000
OTP_MAX = 999999

VERIFY_OTP_TTL = timedelta(hours=24)
RESET_OTP_TTL = timedelta(minutes=15)


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_otp() -> str:
    """Generate a 6-digit numeric OTP."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def expires_at(issued_at_ms: int, ttl: timedelta) -> int:
    """Absolute expiry for a code issued at ``issued_at_ms``."""
    return issued_at_ms + int(ttl.total_seconds() * 1000)


def is_expired(expires_at_ms: Optional[int], current_ms: int) -> bool:
    if expires_at_ms is None:
        return False
    return expires_at_ms < current_ms
