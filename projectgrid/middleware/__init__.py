"""ASGI middleware."""

from projectgrid.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
