"""API schema package."""

from heartsmiles.api.schemas.auth import LoginRequest

__all__ = ["LoginRequest"]
