"""Async client for the VardexPay exchange and payment API."""

from vardexpay.core.config import ClientConfig, load_config
from vardexpay.core.logger import configure_logging, setup_logging
from vardexpay.exchange.client import VardexPayClient
from vardexpay.exchange.exceptions import ErrorCode, VardexPayError, error_for_code

__all__ = [
    "ClientConfig",
    "ErrorCode",
    "VardexPayClient",
    "VardexPayError",
    "configure_logging",
    "error_for_code",
    "load_config",
    "setup_logging",
]
