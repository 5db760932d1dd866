from .auth import auth_bp
from .user import user_bp
from .admin import admin_bp
from .catalog import catalog_bp
from .search import search_bp
from .checkout import checkout_bp


__all__ = [
    'auth_bp',
    'user_bp',
    'admin_bp',
    'catalog_bp',
    'search_bp',
    'checkout_bp',
]
