"""
X.509 Configuration Package

Centralizza default e impostazioni del generatore e del parser.
"""

from .x509_config import (
    X509_DEFAULTS,
    X509_SETTINGS,
    X509Defaults,
    X509Settings,
)

__all__ = [
    'X509_DEFAULTS',
    'X509_SETTINGS',
    'X509Defaults',
    'X509Settings',
]
