"""Product domain - Catalogue CRUD, stock and product images"""

from .router import router

__all__ = ["router"]
