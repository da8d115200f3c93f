"""API route modules."""

from moleculex.api.routes.backup import router as backup_router
from moleculex.api.routes.catalog import router as catalog_router
from moleculex.api.routes.dashboard import router as dashboard_router
from moleculex.api.routes.families import router as families_router
from moleculex.api.routes.formulas import router as formulas_router
from moleculex.api.routes.health import router as health_router
from moleculex.api.routes.materials import router as materials_router
from moleculex.api.routes.notes import router as notes_router
from moleculex.api.routes.products import router as products_router
from moleculex.api.routes.wishlist import router as wishlist_router

__all__ = [
    "backup_router",
    "catalog_router",
    "dashboard_router",
    "families_router",
    "formulas_router",
    "health_router",
    "materials_router",
    "notes_router",
    "products_router",
    "wishlist_router",
]
