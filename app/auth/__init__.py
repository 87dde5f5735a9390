from .dependencies import get_optional_principal, get_required_principal
from .middleware import SecurityMiddleware
from .service import create_access_token, decode_access_token, extract_bearer_token

__all__ = [
    # Dependencies
    "get_optional_principal",
    "get_required_principal",
    # Middleware
    "SecurityMiddleware",
    # Service
    "create_access_token",
    "decode_access_token",
    "extract_bearer_token",
]
