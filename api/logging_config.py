"""
Centralized logging configuration.

Quiets chatty third-party loggers (driver heartbeats, HTTP connection
pool messages) that would otherwise flood logs with non-actionable lines.
Import triggers the suppression; configure_logging() sets the root level.
"""
import logging

_SUPPRESSED_LOGGERS = [
    'pymongo',
    'pymongo.serverSelection',
    'pymongo.connection',
    'urllib3',
]

for _logger_name in _SUPPRESSED_LOGGERS:
    logging.getLogger(_logger_name).setLevel(logging.WARNING)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
