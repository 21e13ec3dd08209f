"""
Structured logging for Backend Reputul.

JSON logs with timestamp, business_id, event_type.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_reputul.reputul_logging.logger import bind_business, configure_structlog, get_logger

__all__ = ["bind_business", "configure_structlog", "get_logger"]
