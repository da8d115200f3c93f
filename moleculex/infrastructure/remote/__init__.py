"""HTTP remote store adapters."""

from moleculex.infrastructure.remote.rest_store import RestRemoteStore

__all__ = ["RestRemoteStore"]
