"""API route modules."""

from jewelpos.api.routes.health import router as health_router
from jewelpos.api.routes.memos import router as memos_router
from jewelpos.api.routes.sales import router as sales_router

__all__ = [
    "health_router",
    "sales_router",
    "memos_router",
]
