# ==============================================================================
# MIDDLEWARE PACKAGE
# ==============================================================================

from backoffice.middleware.request_logger import RequestLoggerMiddleware

__all__ = ["RequestLoggerMiddleware"]
