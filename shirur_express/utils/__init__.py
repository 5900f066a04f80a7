# shirur_express/utils/__init__.py
from .auth import (
    oauth2_scheme,
    verify_password,
    get_password_hash,
    create_access_token,
    authenticate_user,
    get_current_user,
    require_customer,
    require_provider
)
from .geo import distance_km, within_radius

__all__ = [
    "oauth2_scheme",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "authenticate_user",
    "get_current_user",
    "require_customer",
    "require_provider",
    "distance_km",
    "within_radius"
]
