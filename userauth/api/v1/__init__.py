"""
API v1 package.

Contains the versioned routes for the user account API.
"""

from userauth.api.v1.routes import router

__all__ = ["router"]
