"""
Hex formatting helpers shared by the certificate parser.

All renderings are lowercase and never carry a "0x" prefix.
"""

from typing import Optional

from config.x509_config import X509_DEFAULTS


def format_serial(serial: int) -> str:
    """
    Renders a certificate serial number as compact lowercase hex.

    Args:
        serial: Serial number as decoded from the certificate

    Returns:
        Hex string without prefix, separators or leading zeros (e.g. "1a2b")
    """
    return format(serial, "x")


def format_hex(data: Optional[bytes]) -> str:
    """Contiguous lowercase hex, empty string for missing data."""
    if not data:
        return ""
    return bytes(data).hex()


def format_hex_block(data: bytes, groups_per_line: int = X509_DEFAULTS.HEX_GROUPS_PER_LINE) -> str:
    """
    Renders raw bytes as colon-grouped hex pairs wrapped into lines.

    Example (groups_per_line=4):
        b"\\x00\\x01\\x02\\x03\\x04" -> "00:01:02:03\\n04"

    Args:
        data: Bytes to render (public key, signature value)
        groups_per_line: Byte pairs per line

    Returns:
        Lines of ":"-joined pairs, joined by "\\n"
    """
    pairs = [f"{b:02x}" for b in bytes(data)]
    lines = [
        ":".join(pairs[i:i + groups_per_line])
        for i in range(0, len(pairs), groups_per_line)
    ]
    return "\n".join(lines)


def format_integer_bytes(value: int) -> str:
    """
    Hex of an INTEGER's DER content octets (minimal two's complement).

    Example:
        0x80 -> "0080", 0x7f -> "7f"
    """
    magnitude = value if value >= 0 else ~value
    length = (magnitude.bit_length() + 8) // 8
    return value.to_bytes(length, "big", signed=True).hex()
