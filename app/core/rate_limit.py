"""
Shared rate limiter.
Routers decorate endpoints with it; main.py registers it on the app.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
