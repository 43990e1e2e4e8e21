"""Logging configuration and handlers."""

from eventimport.logging.logger import LogContext, get_logger, log_import, setup_logging

__all__ = ["LogContext", "get_logger", "log_import", "setup_logging"]
