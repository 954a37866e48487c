"""API module for Drive.

Contains versioned API routers.
"""

from drive.api.v1 import router as v1_router

__all__ = ["v1_router"]
