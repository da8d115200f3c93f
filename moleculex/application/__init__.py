"""Application layer - domain store orchestration and DTOs."""

from moleculex.application.domain_store import DomainStore, SaveResult
from moleculex.application.services import get_domain_store, get_remote_store, reset_services

__all__ = [
    "DomainStore",
    "SaveResult",
    "get_domain_store",
    "get_remote_store",
    "reset_services",
]
