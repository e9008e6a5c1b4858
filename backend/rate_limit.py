"""
Rate limiting configuration for the PackVault API.

Provides a shared Limiter instance used by the upload and command endpoints.
Set PACKVAULT_RATE_LIMIT_ENABLED=false to disable (e.g., in tests or CI).
"""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

_enabled = os.environ.get("PACKVAULT_RATE_LIMIT_ENABLED", "true").lower() != "false"

limiter = Limiter(key_func=get_remote_address, enabled=_enabled)
