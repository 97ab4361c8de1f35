"""
API Routers
"""

from supply_info.routers import supply_router

__all__ = ["supply_router"]
