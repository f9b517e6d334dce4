import os

from slowapi import Limiter
from slowapi.util import get_remote_address

PREDICT_RATE_LIMIT = os.getenv("PREDICT_RATE_LIMIT", "30/minute")
AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "10/minute")

limiter = Limiter(key_func=get_remote_address, default_limits=[])
