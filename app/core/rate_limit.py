from slowapi import Limiter
from slowapi.util import get_remote_address

# key_func identifies the client by IP
limiter = Limiter(key_func=get_remote_address)
