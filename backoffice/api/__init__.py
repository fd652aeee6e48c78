# ==============================================================================
# API PACKAGE
# ==============================================================================

from backoffice.api.router import api_router

__all__ = ["api_router"]
