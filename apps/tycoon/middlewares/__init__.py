from __future__ import annotations

from .storage import StorageMiddleware

__all__ = ["StorageMiddleware"]
