"""API v1: document routes, capabilities and health."""

from construction_docs.api.v1.router import api_router

__all__ = ["api_router"]
