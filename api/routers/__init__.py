"""API Routers"""

from api.routers import health, pricing, reports

__all__ = ["health", "pricing", "reports"]
