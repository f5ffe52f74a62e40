"""Core utilities: settings, structured logging and the error taxonomy."""
from .config import Settings, get_settings
from .logging import configure_logging, get_logger

__all__ = ["Settings", "get_settings", "configure_logging", "get_logger"]
