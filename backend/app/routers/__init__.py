"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .reports import router as reports_router, get_report_manager
from .maintenance import router as maintenance_router

__all__ = [
    "reports_router",
    "maintenance_router",
    "get_report_manager",
]
