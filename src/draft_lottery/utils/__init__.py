"""Shared helpers: logging setup and lottery statistics."""

from draft_lottery.utils.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
