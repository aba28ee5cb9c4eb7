"""Static browser UI."""

from src.web.router import router

__all__ = ["router"]
