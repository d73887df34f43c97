"""
velada/middleware/rate_limit.py
Shared slowapi limiter (attached to app.state in main)
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from velada.config import get_bool_env

limiter = Limiter(
    key_func=get_remote_address,
    enabled=get_bool_env("RATE_LIMIT_ENABLED", True),
)
