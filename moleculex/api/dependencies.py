"""
Dependency injection container for FastAPI.

Provides service instances to route handlers.
"""

from functools import lru_cache

from moleculex.application.domain_store import DomainStore
from moleculex.application.services import get_domain_store
from moleculex.config import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


def get_store() -> DomainStore:
    """Get the domain store."""
    return get_domain_store()
