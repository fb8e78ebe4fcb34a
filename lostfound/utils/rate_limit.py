from slowapi import Limiter
from slowapi.util import get_remote_address
from lostfound.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Per-client limit on the search routes and message sends
DEFAULT_RATE = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
