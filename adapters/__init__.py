"""
Adapters Package

Boundary layer between host values (shell, CLI) and the certificates core.
"""

from .host import from_x509, read_host_bytes, request_from_host, to_x509

__all__ = [
    "from_x509",
    "read_host_bytes",
    "request_from_host",
    "to_x509",
]
