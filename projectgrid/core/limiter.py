"""slowapi limiter shared by main (app.state) and the route modules.

Limits are keyed by client address. A decorated endpoint must accept
``request: Request``. ``RATE_LIMIT_ENABLED=false`` switches every limit off.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

AUTH_RATE = "10/minute"
WRITE_RATE = "120/minute"

limiter = Limiter(key_func=get_remote_address, headers_enabled=False)

# Register, login, OTP and reset endpoints.
limit_auth = limiter.limit(AUTH_RATE)
# Profile and workspace mutations.
limit_writes = limiter.limit(WRITE_RATE)
