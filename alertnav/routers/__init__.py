"""API Routers"""
from alertnav.routers import auth, data, pages

__all__ = ["auth", "data", "pages"]
