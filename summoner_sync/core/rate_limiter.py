"""Rate limiting configuration for the HTTP endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client IP; summoner lookups can fan out into many upstream calls
limiter = Limiter(key_func=get_remote_address)
