"""Rate limiting global / Global rate limiter.

Utilise slowapi pour limiter les requetes par IP.
Les limites par route (import de fichiers) s'ajoutent a la limite par defaut.
Per-route limits (file imports) come on top of the default limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from fuelmaster.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
