"""
Utils Package

Contains utility modules for hex formatting and logging.
"""

from .hex_format import (
    format_hex,
    format_hex_block,
    format_integer_bytes,
    format_serial,
)
from .logger import X509Logger

__all__ = [
    # Hex formatting
    "format_hex",
    "format_hex_block",
    "format_integer_bytes",
    "format_serial",
    # Logging
    "X509Logger",
]
