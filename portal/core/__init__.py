"""
Core module - configuration and error types shared by every layer.
"""
from portal.core.config import Settings, get_settings
from portal.core.errors import PortalError

__all__ = ["Settings", "get_settings", "PortalError"]
