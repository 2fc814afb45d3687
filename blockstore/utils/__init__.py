"""Shared utilities"""
from blockstore.utils.logger import get_logger, reset_logging, setup_logging

__all__ = ["get_logger", "reset_logging", "setup_logging"]
