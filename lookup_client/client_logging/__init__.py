"""
Structured logging for the lookup client.

JSON logs with timestamp, level, logger and event_type.
Use get_logger() in all modules.
"""

from lookup_client.client_logging.logger import get_logger

__all__ = ["get_logger"]
