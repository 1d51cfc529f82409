"""API version 1."""

from projectgrid.api.v1.router import api_router

__all__ = ["api_router"]
