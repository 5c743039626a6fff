"""SlowAPI limiter and the per-route limits.

main.py installs ``limiter`` on app.state; endpoint modules import the
decorators from here.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"
BILLING_APPROVAL_LIMIT = "30/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_billing_approval = limiter.limit(BILLING_APPROVAL_LIMIT)
