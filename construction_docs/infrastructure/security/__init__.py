"""Security: JWT issue and verification."""

from construction_docs.infrastructure.security.jwt import (
    create_access_token,
    verify_token,
)

__all__ = ["create_access_token", "verify_token"]
