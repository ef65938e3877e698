"""data module"""

from .base import DbAdapter
import logging

logger = logging.getLogger(__name__)


# Conditional import - only import if the SurrealDB SDK is available
try:
    from .surrealdb import SurrealDbAdapter
except ImportError:
    logger.info("SurrealDbAdapter not loaded - probably, missing dependencies")
