"""
Rate limiter configuration.
Uses slowapi for IP-based rate limiting of admin writes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from blog_api.config import settings

# Rate limiter (uses client IP)
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

# Limit applied to every admin create/update/delete endpoint
ADMIN_WRITE_LIMIT = f"{settings.admin_write_rate_limit}/minute"
