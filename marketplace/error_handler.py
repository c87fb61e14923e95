"""Error payloads for the marketplace API."""
from typing import Any, Dict, Tuple
import logging

from marketplace.errors import MarketplaceError

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_domain_error(self, exc: MarketplaceError, context: Dict[str, Any] = None) -> Tuple[int, Dict[str, Any]]:
        level = logging.WARNING if exc.status_code >= 500 else logging.INFO
        logger.log(level, "Request rejected (%s %s): %s %s", exc.status_code, type(exc).__name__, exc.message, context or {})
        return exc.status_code, {"error": exc.message}

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Tuple[int, Dict[str, Any]]:
        logger.error("Unhandled exception while processing request %s: %s", context or {}, exc, exc_info=exc)
        return 500, {"error": "Internal server error"}
