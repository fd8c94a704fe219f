"""Review domain - Reviews nested under a product and its aggregate rating"""

from .router import router

__all__ = ["router"]
