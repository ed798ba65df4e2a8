# turfboard/routes/__init__.py
"""
Application routes package
"""

from .importer import register_importer_routes
from .logins import register_login_routes
from .organizations import register_organization_routes
from .system import register_system_routes


def init_routes(app):
    """Initialize all application routes"""
    register_login_routes(app)
    register_organization_routes(app)
    register_importer_routes(app)
    register_system_routes(app)
