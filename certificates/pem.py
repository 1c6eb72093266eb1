"""
PEM block scanning.

Accepts any block label and any text between blocks (CA bundles often print
the decoded certificate above each block). Scanning stops at the first
malformed block; blocks read up to that point are kept.
"""

from typing import Iterator, Tuple

from asn1crypto import pem

from utils.logger import X509Logger

logger = X509Logger.get_logger("PEMScanner")


def iter_pem_blocks(data: bytes) -> Iterator[Tuple[str, bytes]]:
    """
    Yields (label, der_bytes) for every PEM block in ``data``, in order.

    Yields nothing when the buffer holds no PEM armor at all.
    """
    if not pem.detect(data):
        return

    try:
        for object_type, _headers, der_bytes in pem.unarmor(data, multiple=True):
            yield object_type, der_bytes
    except ValueError as e:
        # binascii.Error e UnicodeDecodeError sono sottoclassi di ValueError
        logger.debug(f"PEM scan stopped: {e}")
