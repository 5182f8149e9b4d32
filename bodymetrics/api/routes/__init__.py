from __future__ import annotations

from bodymetrics.api.routes.auth import router as auth_router
from bodymetrics.api.routes.health import router as health_router
from bodymetrics.api.routes.metrics import router as metrics_router
from bodymetrics.api.routes.users import router as users_router

__all__ = ["auth_router", "health_router", "metrics_router", "users_router"]
