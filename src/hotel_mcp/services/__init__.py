"""Service clients for the travel backend."""

from .backend_client import BackendClient, BackendUnavailableError

__all__ = [
    "BackendClient",
    "BackendUnavailableError",
]
