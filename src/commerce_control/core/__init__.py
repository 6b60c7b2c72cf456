"""Core module - Logging, anti-forgery tokens, caching and error monitoring."""

from commerce_control.core.logger import setup_logger
from commerce_control.core.nonce import create_nonce, verify_nonce
from commerce_control.core.result import Err, Ok, Result

__all__ = ["setup_logger", "create_nonce", "verify_nonce", "Ok", "Err", "Result"]
